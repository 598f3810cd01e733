"""
Loopback HTTP divide service.

A self-contained test double that computes integer remainders over HTTP.
It binds 127.0.0.1 on an ephemeral port and serves from a daemon thread,
so the remote classifier can exercise a real HTTP round trip without any
external dependency.

Wire contract:
    GET /divide?a=<int>&b=<int>
        200 {"remainder": <int>}
        400 {"message": "Invalid query parameter: 'a'"} (or 'b')
        400 {"message": "Division by zero is not allowed"}
        404 {"message": "Unsupported path"}
        500 {"message": "Failed to marshal JSON"}
"""

import json
import logging
import re
import threading
from dataclasses import asdict, dataclass
from http.server import BaseHTTPRequestHandler, ThreadingHTTPServer
from typing import Any, Dict, List, Optional, Tuple
from urllib.parse import parse_qs, urlsplit

logger = logging.getLogger(__name__)

DIVIDE_PATH = '/divide'

_INTEGER_PATTERN = re.compile(r'^[+-]?\d+$')


@dataclass
class DivisionResult:
    """Successful divide response body."""
    remainder: int

    @classmethod
    def from_json(cls, payload: Any) -> 'DivisionResult':
        """
        Build from a decoded JSON value.

        Raises:
            ValueError: If payload is not an object with an integer remainder
        """
        if not isinstance(payload, dict):
            raise ValueError(f"expected a JSON object, got {type(payload).__name__}")
        remainder = payload.get('remainder')
        if isinstance(remainder, bool) or not isinstance(remainder, int):
            raise ValueError(f"'remainder' must be an integer, got {remainder!r}")
        return cls(remainder=remainder)


@dataclass
class ErrorResult:
    """Failed divide response body."""
    message: str

    @classmethod
    def from_json(cls, payload: Any) -> 'ErrorResult':
        """
        Build from a decoded JSON value.

        Raises:
            ValueError: If payload is not an object with a string message
        """
        if not isinstance(payload, dict):
            raise ValueError(f"expected a JSON object, got {type(payload).__name__}")
        message = payload.get('message')
        if not isinstance(message, str):
            raise ValueError(f"'message' must be a string, got {message!r}")
        return cls(message=message)


def _error_json(message: str) -> bytes:
    try:
        return json.dumps(asdict(ErrorResult(message=message))).encode('utf-8')
    except (TypeError, ValueError):
        return b'{"message": "Internal Server Error"}'


def _int_from_query(query: Dict[str, List[str]], param: str) -> Optional[int]:
    values = query.get(param) or ['']
    value = values[0]
    if not _INTEGER_PATTERN.match(value):
        return None
    return int(value)


def _truncated_remainder(a: int, b: int) -> int:
    # Remainder takes the sign of the dividend, like C-family '%'
    remainder = abs(a) % abs(b)
    return -remainder if a < 0 else remainder


def handle_request(path: str, query: Dict[str, List[str]]) -> Tuple[int, bytes]:
    """
    Route a request to the divide handler.

    Args:
        path: URL path (without query string)
        query: Parsed query string, as returned by urllib.parse.parse_qs

    Returns:
        Tuple of (HTTP status code, JSON response body)
    """
    if path != DIVIDE_PATH:
        return 404, _error_json("Unsupported path")

    a = _int_from_query(query, 'a')
    if a is None:
        return 400, _error_json("Invalid query parameter: 'a'")

    b = _int_from_query(query, 'b')
    if b is None:
        return 400, _error_json("Invalid query parameter: 'b'")

    if b == 0:
        return 400, _error_json("Division by zero is not allowed")

    try:
        body = json.dumps(asdict(DivisionResult(remainder=_truncated_remainder(a, b))))
    except (TypeError, ValueError) as e:
        logger.error(f"Failed to encode division result: {e}")
        return 500, _error_json("Failed to marshal JSON")

    return 200, body.encode('utf-8')


class _DivideRequestHandler(BaseHTTPRequestHandler):

    def do_GET(self):
        parts = urlsplit(self.path)
        status, body = handle_request(parts.path, parse_qs(parts.query, keep_blank_values=True))

        self.send_response(status)
        self.send_header('Content-Type', 'application/json')
        self.send_header('Content-Length', str(len(body)))
        self.end_headers()
        self.wfile.write(body)

    def log_message(self, format, *args):
        logger.debug(f"{self.address_string()} - {format % args}")


class DivideServer:
    """
    Divide service bound to an ephemeral loopback port.

    Usage:
        with DivideServer() as server:
            httpx.get(f"{server.url}/divide", params={'a': 10, 'b': 3})
    """

    def __init__(self, host: str = '127.0.0.1', port: int = 0):
        self._httpd = ThreadingHTTPServer((host, port), _DivideRequestHandler)
        self._httpd.daemon_threads = True
        self._thread = threading.Thread(
            target=self._httpd.serve_forever,
            name='divide-server',
            daemon=True
        )
        self._closed = False
        self._thread.start()
        logger.info(f"Divide server listening on {self.url}")

    @property
    def url(self) -> str:
        host, port = self._httpd.server_address[:2]
        return f"http://{host}:{port}"

    def close(self) -> None:
        """Stop serving and release the socket."""
        if self._closed:
            return
        self._closed = True
        self._httpd.shutdown()
        self._httpd.server_close()
        self._thread.join()
        logger.info("Divide server stopped")

    def __enter__(self) -> 'DivideServer':
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()
