"""
Deploy Hook

Triggers a site rebuild (Vercel deploy hook) after rows were inserted.
Failures are logged and never raised.
"""

import logging
import time
from typing import Callable, Optional

import requests

logger = logging.getLogger(__name__)


class DeployHook:
    """POST to a deploy hook URL with a small bounded retry."""

    MAX_ATTEMPTS = 3
    RATE_LIMIT_WAIT = 10
    ERROR_WAIT = 5

    def __init__(
        self,
        url: str,
        session: Optional[requests.Session] = None,
        timeout: int = 30,
        sleep: Callable[[float], None] = time.sleep,
    ):
        self.url = url
        self.session = session or requests.Session()
        self.timeout = timeout
        self._sleep = sleep

    def trigger(self) -> bool:
        """
        Fire the hook.

        Returns:
            True if the hook accepted the request
        """
        if not self.url:
            logger.debug("No deploy hook configured")
            return False

        for attempt in range(1, self.MAX_ATTEMPTS + 1):
            try:
                response = self.session.post(self.url, timeout=self.timeout)
            except requests.RequestException as e:
                logger.warning("Deploy hook attempt %d/%d failed: %s",
                               attempt, self.MAX_ATTEMPTS, e)
                wait = self.ERROR_WAIT
            else:
                if response.ok:
                    logger.info("Deploy triggered")
                    return True
                logger.warning("Deploy hook attempt %d/%d returned HTTP %d",
                               attempt, self.MAX_ATTEMPTS, response.status_code)
                if response.status_code == 429:
                    wait = self.RATE_LIMIT_WAIT * attempt
                else:
                    wait = self.ERROR_WAIT

            if attempt < self.MAX_ATTEMPTS:
                self._sleep(wait)

        logger.error("Deploy hook failed after %d attempts", self.MAX_ATTEMPTS)
        return False
