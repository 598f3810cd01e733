"""
FizzBuzz pipeline - core orchestration.

Drives generation and consumption of classification results:
1. Producer classifies 1..N in order and pushes each result into a bounded queue
2. Consumer drains the queue and logs one line per result
3. run() blocks until the consumer has seen the end of the stream

The queue holds at most N // 2 results, so the producer is held back
whenever it gets ahead of the consumer.
"""

import logging
import threading
from typing import List, Optional

from .classifiers import Classifier, classify
from .models import ClassificationResult
from services.bounded_queue import BoundedQueue, QueueClosed

module_logger = logging.getLogger(__name__)


class FizzBuzzRunner:
    """
    Runs the producer/consumer pipeline for one upper limit.

    Results are written to the logger supplied by the caller rather than a
    process-wide default, so output can be redirected per run.
    """

    def __init__(self, upper_limit: int, classifier: Classifier, logger: Optional[logging.Logger] = None):
        """
        Args:
            upper_limit: Last integer to classify (0 means no output)
            classifier: Strategy used for the fizz and buzz predicates
            logger: Destination for result lines (defaults to this module's logger)
        """
        if upper_limit < 0:
            raise ValueError(f"upper_limit must be >= 0, got: {upper_limit}")

        self.upper_limit = upper_limit
        self.classifier = classifier
        self.logger = logger or module_logger

    @property
    def queue_capacity(self) -> int:
        return self.upper_limit // 2

    def run(self, cancel_event: Optional[threading.Event] = None) -> int:
        """
        Classify and log every integer from 1 to upper_limit.

        Args:
            cancel_event: When set, the producer stops before its next item.
                          Results already queued are still logged.

        Returns:
            int: Number of results logged

        Raises:
            Exception: Whatever the producer raised, after the consumer finished
            KeyboardInterrupt: If interrupted while waiting, once the producer has stopped
        """
        if cancel_event is None:
            cancel_event = threading.Event()

        queue = BoundedQueue(self.queue_capacity)
        producer_errors: List[BaseException] = []
        emitted = [0]

        producer = threading.Thread(
            target=self._produce,
            args=(queue, cancel_event, producer_errors),
            name='fizzbuzz-producer',
            daemon=True
        )
        consumer = threading.Thread(
            target=self._consume,
            args=(queue, emitted),
            name='fizzbuzz-consumer',
            daemon=True
        )

        module_logger.debug(
            f"Starting pipeline: upper_limit={self.upper_limit}, queue_capacity={queue.capacity}"
        )
        consumer.start()
        producer.start()

        try:
            consumer.join()
            producer.join()
        except BaseException:
            # Interrupted while waiting: stop the producer before unwinding so
            # the classifier is never used after its owner closes it
            cancel_event.set()
            producer.join()
            queue.close()
            consumer.join()
            raise

        if producer_errors:
            raise producer_errors[0]

        module_logger.debug(f"Pipeline complete: {emitted[0]} result(s) emitted")
        return emitted[0]

    def _produce(
        self,
        queue: BoundedQueue,
        cancel_event: threading.Event,
        errors: List[BaseException]
    ) -> None:
        try:
            for number in range(1, self.upper_limit + 1):
                if cancel_event.is_set():
                    module_logger.warning(f"Run cancelled before number {number}")
                    return
                queue.put(classify(self.classifier, number))
        except QueueClosed:
            module_logger.warning("Queue closed before generation finished")
        except Exception as e:
            module_logger.error(f"Producer failed: {e}", exc_info=True)
            errors.append(e)
        finally:
            queue.close()

    def _consume(self, queue: BoundedQueue, emitted: List[int]) -> None:
        for result in queue:
            self.emit(result)
            emitted[0] += 1
        module_logger.debug("Queue drained")

    def emit(self, result: ClassificationResult) -> None:
        """Log one result line: the tag as message, the number as an attribute."""
        self.logger.info(result.tag, extra={'number': result.number})
