"""Progress messages emitted while trials run."""

import logging
from datetime import datetime
from typing import Callable, Optional

logger = logging.getLogger(__name__)

ProgressSink = Callable[[str], None]


def str_date_formatted(now: Optional[datetime] = None) -> str:
    return (now or datetime.now()).strftime("%Y-%m-%d %H:%M:%S")


class ProgressReporter:
    """Emit status lines for a normalisation run.

    Messages go to ``sink``, which defaults to this module's logger at INFO
    level. A custom sink receives messages prefixed with the local time; the
    logger leaves timing to its formatter. The reporter only observes; it
    never changes the result.
    """

    def __init__(
        self,
        n_samples: int,
        sink: Optional[ProgressSink] = None,
        every: int = 5,
        timestamp: Optional[bool] = None,
    ):
        self.n_samples = n_samples
        self.sink = sink or logger.info
        self.every = every
        self.timestamp = sink is not None if timestamp is None else timestamp

    def emit(self, message: str) -> None:
        if self.timestamp:
            message = f"{str_date_formatted()}: {message}"
        self.sink(message)

    def start(self) -> None:
        self.emit(f"Sampling and predicting {self.n_samples} times...")

    def update(self, index: int) -> None:
        # Only every fifth trial
        if index % self.every != 0:
            return
        percent = index / self.n_samples * 100
        self.emit(f"Predicting {index} of {self.n_samples} times ({percent:.2f} %)...")

    def aggregating(self) -> None:
        self.emit("Aggregating predictions...")


class NullReporter(ProgressReporter):
    """Reporter that discards every message."""

    def __init__(self, n_samples: int = 0):
        super().__init__(n_samples, sink=lambda message: None, timestamp=False)
