"""
Command-line entry point for the FizzBuzz pipeline.

Thin orchestration layer: validates configuration, builds the classifier
and delegates to FizzBuzzRunner.
Policy: configuration errors are logged and exit with status 1 before any
work begins. Ctrl-C stops generation and exits with status 130.
"""

import logging
import sys
import threading
from typing import Optional

import click

from config import DEFAULT_ADAPTER, DEFAULT_LIMIT, DEFAULT_LOG_LEVEL, ConfigurationError, Settings
from domain.classifiers import classifier_for
from domain.fizzbuzz_runner import FizzBuzzRunner
from domain.models import ClassifierKind
from logging_config import configure_logging

EXIT_CONFIG_ERROR = 1
EXIT_INTERRUPTED = 130


def run_fizzbuzz(settings: Settings, logger: logging.Logger, cancel_event: Optional[threading.Event] = None) -> int:
    """
    Run the pipeline with the classifier selected in settings.

    Args:
        settings: Validated run settings
        logger: Destination for result lines
        cancel_event: Optional event that stops generation when set

    Returns:
        int: Number of results logged
    """
    logger.info(
        "Starting FizzBuzz",
        extra={'upper_limit': settings.upper_limit, 'adapter': settings.adapter.value}
    )

    with classifier_for(settings.adapter) as classifier:
        runner = FizzBuzzRunner(settings.upper_limit, classifier, logger)
        return runner.run(cancel_event)


@click.command(context_settings={'help_option_names': ['-h', '--help']})
@click.option(
    '--limit', type=int, default=DEFAULT_LIMIT, envvar='FIZZBUZZ_LIMIT', show_default=True,
    help='The upper limit for the FizzBuzz sequence, must be higher than 0'
)
@click.option(
    '--adapter', default=DEFAULT_ADAPTER, envvar='FIZZBUZZ_ADAPTER', show_default=True,
    help=f"The classifier to use: {' | '.join(ClassifierKind.names())}"
)
@click.option(
    '--log-level', default=DEFAULT_LOG_LEVEL, envvar='LOG_LEVEL', show_default=True,
    help='Logging level name'
)
@click.option(
    '--log-format', type=click.Choice(['json', 'text']), default='json', show_default=True,
    help='Log line format'
)
def main(limit, adapter, log_level, log_format):
    """Log the FizzBuzz sequence from 1 to LIMIT."""
    try:
        settings = Settings.from_values(limit, adapter, log_level)
    except ConfigurationError as e:
        logger = configure_logging(DEFAULT_LOG_LEVEL, log_format)
        logger.error(str(e))
        sys.exit(EXIT_CONFIG_ERROR)

    logger = configure_logging(settings.log_level, log_format)

    cancel_event = threading.Event()
    try:
        run_fizzbuzz(settings, logger, cancel_event)
    except KeyboardInterrupt:
        cancel_event.set()
        logger.warning("Interrupted, stopping FizzBuzz")
        sys.exit(EXIT_INTERRUPTED)


if __name__ == '__main__':
    main()
