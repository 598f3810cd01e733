"""
Remote divide API classifier.

This module implements the classifier contract by delegating the
divisibility check to the divide service over HTTP, simulating an
external API call.

Usage:
    from integrations.divide_api import DivideAPI

    with DivideAPI.start() as api:
        api.is_fizz(9)       # True
        api.divide(10, 3)    # 1

Failure policy: is_fizz()/is_buzz() never raise. Any error from the
service is logged and reported as "not divisible". Callers that need to
tell a real negative from a failed lookup should call divide() directly.
"""

import json
import logging
from typing import Optional

import httpx

from domain.models import BUZZ_DIVISOR, FIZZ_DIVISOR
from services.divide_server import DIVIDE_PATH, DivideServer, DivisionResult, ErrorResult

logger = logging.getLogger(__name__)

MAX_RESPONSE_SIZE = 1024  # 1 KB is the largest response body we will read
DEFAULT_TIMEOUT = 10.0


# ============================================================================
# Custom Exception Classes
# ============================================================================

class DivideAPIError(Exception):
    """Raised when the divide API call fails (transport or decoding)."""
    pass


class ResponseTooLargeError(DivideAPIError):
    """Raised when the declared response size exceeds the configured maximum."""
    pass


class UnknownResponseSizeError(DivideAPIError):
    """Raised when the response does not declare its size."""
    pass


class BadRequestError(DivideAPIError):
    """Raised on a 400 response."""
    pass


class ClientRequestError(DivideAPIError):
    """Raised on any other 4xx response."""
    pass


class ServerError(DivideAPIError):
    """Raised on a 500 response."""
    pass


class UnexpectedStatusError(DivideAPIError):
    """Raised on any status code outside the documented set."""
    pass


# ============================================================================
# Client
# ============================================================================

def _status_line(response: httpx.Response) -> str:
    return f"{response.status_code} {response.reason_phrase}"


class DivideAPI:
    """
    Classifier backed by the divide service.

    Owns the HTTP client and, when created with start(), the loopback
    server it talks to. Both are released by close().
    """

    def __init__(
        self,
        client: httpx.Client,
        server: Optional[DivideServer] = None,
        max_response_size: int = MAX_RESPONSE_SIZE
    ):
        """
        Args:
            client: HTTP client whose base_url points at the divide service
            server: Loopback server owned by this instance (closed with it)
            max_response_size: Largest response body, in bytes, that will be read
        """
        self._client = client
        self._server = server
        self._max_response_size = max_response_size

    @classmethod
    def start(cls, max_response_size: int = MAX_RESPONSE_SIZE, timeout: float = DEFAULT_TIMEOUT) -> 'DivideAPI':
        """
        Start a loopback divide server and a client bound to it.

        Returns:
            DivideAPI: Ready-to-use classifier; call close() when done
        """
        server = DivideServer()
        # Loopback only: ignore proxy settings from the environment
        client = httpx.Client(base_url=server.url, timeout=timeout, trust_env=False)
        logger.info(
            f"Divide API client initialized: base_url={server.url}, "
            f"max_response_size={max_response_size}, timeout={timeout}s"
        )
        return cls(client, server=server, max_response_size=max_response_size)

    def close(self) -> None:
        """Close the HTTP client and stop the owned server, if any."""
        self._client.close()
        if self._server is not None:
            self._server.close()
            self._server = None

    def __enter__(self) -> 'DivideAPI':
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    def is_fizz(self, number: int) -> bool:
        """True if number is divisible by three. Errors are logged and return False."""
        return self._is_divisible(number, FIZZ_DIVISOR)

    def is_buzz(self, number: int) -> bool:
        """True if number is divisible by five. Errors are logged and return False."""
        return self._is_divisible(number, BUZZ_DIVISOR)

    def _is_divisible(self, number: int, divisor: int) -> bool:
        try:
            remainder = self.divide(number, divisor)
        except DivideAPIError as e:
            logger.error(f"Error calling divide API: {e}", extra={'number': number, 'error': str(e)})
            return False
        return remainder == 0

    def divide(self, a: int, b: int) -> int:
        """
        Ask the divide service for a mod b.

        Args:
            a: Dividend
            b: Divisor

        Returns:
            int: The remainder reported by the service

        Raises:
            ResponseTooLargeError: If the declared body size exceeds the maximum
            UnknownResponseSizeError: If the response has no Content-Length
            BadRequestError: On a 400 response
            ClientRequestError: On any other 4xx response
            ServerError: On a 500 response
            UnexpectedStatusError: On any other non-200 response
            DivideAPIError: On transport or decoding failures
        """
        try:
            with self._client.stream('GET', DIVIDE_PATH, params={'a': a, 'b': b}) as response:
                # Check the declared size before reading the body into memory
                body = self._read_bounded(response)
        except (httpx.HTTPError, httpx.StreamError, RuntimeError) as e:
            # RuntimeError covers a client that has already been closed
            raise DivideAPIError(f"failed to call API: {e}") from e

        if response.status_code == httpx.codes.OK:
            try:
                return DivisionResult.from_json(json.loads(body)).remainder
            except ValueError as e:
                raise DivideAPIError(f"failed to decode result response: {e}") from e

        try:
            error = ErrorResult.from_json(json.loads(body))
        except ValueError as e:
            raise DivideAPIError(
                f"failed to decode error response for status code {response.status_code}: {e}"
            ) from e

        status = _status_line(response)
        if response.status_code == httpx.codes.BAD_REQUEST:
            raise BadRequestError(f"{status}: {error.message}")
        elif 400 <= response.status_code <= 499:
            raise ClientRequestError(f"{status}: {error.message}")
        elif response.status_code == httpx.codes.INTERNAL_SERVER_ERROR:
            raise ServerError(f"{status}: {error.message}")
        else:
            raise UnexpectedStatusError(f"unexpected status code: {status}: {error.message}")

    def _read_bounded(self, response: httpx.Response) -> bytes:
        content_length = response.headers.get('content-length')
        if content_length is None:
            raise UnknownResponseSizeError("response size unknown, will not process")

        try:
            declared_size = int(content_length)
        except ValueError:
            raise UnknownResponseSizeError(f"invalid Content-Length header: {content_length!r}")

        if declared_size > self._max_response_size:
            raise ResponseTooLargeError(f"response too large: {declared_size} bytes")

        return response.read()
