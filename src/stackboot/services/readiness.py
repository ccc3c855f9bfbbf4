"""Bounded readiness polling."""

import time
from typing import Callable

from stackboot.errors import BootstrapError


class ReadinessPoller:
    """Calls a probe until it succeeds or the attempt budget runs out."""

    def __init__(self, logger):
        self.logger = logger

    def wait_until_ready(
        self,
        probe: Callable[[], bool],
        max_attempts: int,
        interval_seconds: float,
    ) -> bool:
        if max_attempts < 1:
            raise ValueError("max_attempts must be at least 1")

        for attempt in range(1, max_attempts + 1):
            try:
                ready = bool(probe())
            except BootstrapError as exc:
                self.logger.debug("Readiness probe raised on attempt %s: %s", attempt, exc)
                ready = False

            if ready:
                self.logger.debug("Readiness probe succeeded on attempt %s/%s", attempt, max_attempts)
                return True

            self.logger.debug("Readiness probe failed on attempt %s/%s", attempt, max_attempts)
            if attempt < max_attempts:
                time.sleep(interval_seconds)

        return False
