"""
Data models for the FizzBuzz domain.

These type-safe data structures define clear contracts between the
classifier, the pipeline runner and the output stage.
"""

from dataclasses import dataclass
from enum import Enum


FIZZ_DIVISOR = 3
BUZZ_DIVISOR = 5


class ClassifierKind(str, Enum):
    """
    Closed set of classifier implementations selectable from configuration.

    Values are the names accepted by the ``--adapter`` flag.
    """
    MATH = 'math'
    HTTPAPI = 'httpapi'

    @classmethod
    def names(cls):
        return [kind.value for kind in cls]


@dataclass(frozen=True)
class ClassificationResult:
    """
    Outcome of classifying a single integer.

    Produced once per integer by the pipeline runner, consumed exactly once
    by the output stage.

    Attributes:
        number: The classified integer (>= 1)
        fizz: True if number is divisible by three
        buzz: True if number is divisible by five
    """
    number: int
    fizz: bool
    buzz: bool

    @property
    def tag(self) -> str:
        """
        Text emitted for this result.

        Returns:
            str: "FizzBuzz", "Fizz", "Buzz" or the number in decimal
        """
        if self.fizz and self.buzz:
            return 'FizzBuzz'
        if self.fizz:
            return 'Fizz'
        if self.buzz:
            return 'Buzz'
        return str(self.number)

    def __repr__(self) -> str:
        return f"ClassificationResult(number={self.number}, tag={self.tag})"
