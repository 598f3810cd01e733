"""
Tests for the command-line entry point.
"""

import json
import threading
import pytest
from click.testing import CliRunner
from unittest.mock import patch
import sys
import os

# Add src to path for imports
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '../src'))

import fizzbuzz_cli
from config import Settings
from fizzbuzz_cli import main, run_fizzbuzz


FIRST_FIFTEEN = [
    "1", "2", "Fizz", "4", "Buzz",
    "Fizz", "7", "8", "Fizz", "Buzz",
    "11", "Fizz", "13", "14", "FizzBuzz",
]


@pytest.fixture
def cli_runner(restore_root_logger):
    return CliRunner()


def json_lines(output):
    return [json.loads(line) for line in output.splitlines() if line.startswith('{')]


def result_messages(output):
    return [line['msg'] for line in json_lines(output) if 'number' in line and line['level'] == 'INFO']


class TestMain:
    """Test running the CLI end to end."""

    def test_math_adapter(self, cli_runner):
        """Test the local classifier prints the canonical sequence."""
        result = cli_runner.invoke(main, ['--limit', '15', '--adapter', 'math'])

        assert result.exit_code == 0
        assert result_messages(result.output) == FIRST_FIFTEEN

    def test_httpapi_adapter(self, cli_runner):
        """Test the remote classifier prints the same sequence."""
        result = cli_runner.invoke(main, ['--limit', '15', '--adapter', 'httpapi'])

        assert result.exit_code == 0
        assert result_messages(result.output) == FIRST_FIFTEEN

    def test_result_line_shape(self, cli_runner):
        """Test result lines are {level, msg, number} JSON records."""
        result = cli_runner.invoke(main, ['--limit', '3'])

        results = [line for line in json_lines(result.output) if 'number' in line]
        assert results[2] == {'level': 'INFO', 'msg': 'Fizz', 'number': 3}

    def test_start_line(self, cli_runner):
        """Test the first record announces the run settings."""
        result = cli_runner.invoke(main, ['--limit', '2'])

        start = json_lines(result.output)[0]
        assert start == {'level': 'INFO', 'msg': 'Starting FizzBuzz', 'upper_limit': 2, 'adapter': 'math'}

    def test_default_limit(self, cli_runner):
        """Test the limit defaults to 64."""
        result = cli_runner.invoke(main, [])

        assert result.exit_code == 0
        assert len(result_messages(result.output)) == 64

    def test_limit_from_environment(self, cli_runner):
        """Test FIZZBUZZ_LIMIT supplies the limit."""
        result = cli_runner.invoke(main, [], env={'FIZZBUZZ_LIMIT': '5'})

        assert result.exit_code == 0
        assert result_messages(result.output) == ["1", "2", "Fizz", "4", "Buzz"]

    def test_text_format(self, cli_runner):
        """Test the text log format."""
        result = cli_runner.invoke(main, ['--limit', '3', '--log-format', 'text'])

        assert result.exit_code == 0
        assert "INFO - Fizz" in result.output.splitlines()


class TestConfigurationErrors:
    """Test fatal configuration errors."""

    @pytest.mark.parametrize("limit", ['0', '-3'])
    def test_invalid_limit(self, cli_runner, limit):
        """Test a limit below 1 exits with status 1 before any output."""
        with patch('fizzbuzz_cli.run_fizzbuzz') as mock_run:
            result = cli_runner.invoke(main, ['--limit', limit])

        assert result.exit_code == 1
        assert "Invalid upper limit" in result.output
        mock_run.assert_not_called()

    def test_invalid_adapter(self, cli_runner):
        """Test an unknown adapter exits with status 1."""
        with patch('fizzbuzz_cli.run_fizzbuzz') as mock_run:
            result = cli_runner.invoke(main, ['--adapter', 'abacus'])

        assert result.exit_code == 1
        assert "Invalid adapter" in result.output
        mock_run.assert_not_called()

    def test_non_integer_limit(self, cli_runner):
        """Test click rejects a non-numeric limit."""
        result = cli_runner.invoke(main, ['--limit', 'lots'])

        assert result.exit_code != 0

    def test_error_line_is_json(self, cli_runner):
        """Test configuration errors are logged as JSON error records."""
        result = cli_runner.invoke(main, ['--limit', '0'])

        error = json_lines(result.output)[-1]
        assert error['level'] == 'ERROR'
        assert error['msg'] == "Invalid upper limit: 0, must be higher than 0"


class TestInterrupt:
    """Test Ctrl-C handling."""

    def test_keyboard_interrupt(self, cli_runner):
        """Test an interrupt exits with status 130."""
        with patch.object(fizzbuzz_cli, 'run_fizzbuzz', side_effect=KeyboardInterrupt):
            result = cli_runner.invoke(main, ['--limit', '10'])

        assert result.exit_code == 130
        assert "Interrupted" in result.output


class TestRunFizzBuzz:
    """Test the programmatic entry point."""

    def test_returns_count(self, recording_logger):
        """Test the number of logged results is returned."""
        logger, handler = recording_logger

        emitted = run_fizzbuzz(Settings.from_values(15, 'math'), logger)

        assert emitted == 15
        messages = [record.getMessage() for record in handler.records]
        assert messages[0] == "Starting FizzBuzz"
        assert messages[1:] == FIRST_FIFTEEN

    def test_interrupt_closes_classifier_after_producer(self, recording_logger):
        """Test an interrupted run closes the classifier only once the producer has exited."""
        # Setup - interrupt the first join while the producer is inside is_fizz(2)
        logger, _ = recording_logger
        cancel_event = threading.Event()
        in_flight = threading.Event()
        events = []

        class RecordingClassifier:
            def is_fizz(self, number):
                events.append(('is_fizz', number))
                if number == 2:
                    in_flight.set()
                    cancel_event.wait(5)
                return False

            def is_buzz(self, number):
                return False

            def close(self):
                alive = [t.name for t in threading.enumerate() if t.name == 'fizzbuzz-producer']
                events.append(('close', alive))

            def __enter__(self):
                return self

            def __exit__(self, exc_type, exc, tb):
                self.close()

        real_join = threading.Thread.join
        interrupted = []

        def join(thread, timeout=None):
            if not interrupted:
                interrupted.append(thread.name)
                in_flight.wait(5)
                raise KeyboardInterrupt
            return real_join(thread, timeout)

        # Execute
        with patch.object(fizzbuzz_cli, 'classifier_for', return_value=RecordingClassifier()), \
                patch.object(threading.Thread, 'join', autospec=True, side_effect=join):
            with pytest.raises(KeyboardInterrupt):
                run_fizzbuzz(Settings.from_values(100, 'math'), logger, cancel_event)

        # Assert
        assert events == [('is_fizz', 1), ('is_fizz', 2), ('close', [])]
