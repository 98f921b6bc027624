import time
import logging

class ThrottledLogger:
    """
    Collapses bursts of the same message into one record per interval.
    The emitted record is prefixed with the number of occurrences it stands for.
    """
    def __init__(self, logger: logging.Logger, interval_sec: float = 5.0, level: int = logging.WARNING) -> None:
        self._logger = logger
        self._interval = interval_sec
        self._level = level
        self._last_log_time = 0.0
        self._counter = 0

    def log(self, message: str, *args, **kwargs):
        self._counter += 1
        now = time.monotonic()

        if now - self._last_log_time >= self._interval:
            self._logger.log(self._level, "[%d] " + message, self._counter, *args, **kwargs)
            self._last_log_time = now
            self._counter = 0
