"""
Classifier strategies for the FizzBuzz pipeline.

A classifier answers two independent questions about a positive integer:
is it divisible by three (fizz) and is it divisible by five (buzz).
"""

import logging
from typing import Protocol, runtime_checkable

from .models import BUZZ_DIVISOR, FIZZ_DIVISOR, ClassificationResult, ClassifierKind

logger = logging.getLogger(__name__)


@runtime_checkable
class Classifier(Protocol):
    """
    Contract shared by every classifier implementation.

    Classifiers are context managers: close() releases any external
    resource they hold.
    """

    def is_fizz(self, number: int) -> bool:
        ...

    def is_buzz(self, number: int) -> bool:
        ...

    def close(self) -> None:
        ...

    def __enter__(self) -> "Classifier":
        ...

    def __exit__(self, exc_type, exc, tb) -> None:
        ...


class MathClassifier:
    """Computes divisibility locally with the modulo operator."""

    def is_fizz(self, number: int) -> bool:
        return number % FIZZ_DIVISOR == 0

    def is_buzz(self, number: int) -> bool:
        return number % BUZZ_DIVISOR == 0

    def close(self) -> None:
        pass

    def __enter__(self) -> 'MathClassifier':
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()


def classify(classifier: Classifier, number: int) -> ClassificationResult:
    """Run both predicates for number and bundle them into a result."""
    return ClassificationResult(
        number=number,
        fizz=classifier.is_fizz(number),
        buzz=classifier.is_buzz(number)
    )


def classifier_for(kind: ClassifierKind) -> Classifier:
    """
    Build the classifier implementation for a validated kind.

    The returned object is a context manager; the remote variant owns a
    loopback server and HTTP client that are released on exit.

    Args:
        kind: Which implementation to build

    Returns:
        MathClassifier or DivideAPI
    """
    if kind is ClassifierKind.MATH:
        logger.info("Using local math classifier")
        return MathClassifier()

    if kind is ClassifierKind.HTTPAPI:
        # Imported lazily so the math path never touches the HTTP stack
        from integrations.divide_api import DivideAPI

        logger.info("Using remote divide API classifier")
        return DivideAPI.start()

    raise ValueError(f"Unsupported classifier kind: {kind!r}")
