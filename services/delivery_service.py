"""
Simulated delivery-date checks with last-write-wins semantics.

There is no courier integration: a check waits a fixed delay (to mimic a
network lookup) and then reports today + DELIVERY_OFFSET_DAYS. What matters
is ordering. The shopper may press Check again before the previous check
finished, and only the most recently issued check may set the estimate.

SUPERSEDING:
    - Each check gets a sequence number from a counter that only grows
    - Starting a check cancels the wait of the one in flight
    - A finished check publishes only if its number is still the latest
      issued one; otherwise its result is dropped

Thread Model:
    Flask request thread
    └── DeliveryEstimator.check() -> one daemon thread per check
                                     ("Delivery-<n>")

Usage:
    estimator = DeliveryEstimator(delay_seconds=1.0)
    estimator.check("100001")
    estimator.check("200002")      # supersedes the first
    estimator.wait()
    estimator.estimate.pincode     # "200002"

    # In the web app, one estimator per browser session
    service = DeliveryService(delay_seconds=1.0, offset_days=4)
    service.estimator_for(session_key).check(pincode)
"""

from __future__ import annotations

import threading
from collections import OrderedDict
from datetime import date, timedelta
from typing import Callable, Dict, Optional, Tuple

from core.exceptions import ValidationError
from models.selection import DeliveryEstimate
from logging_config import get_logger, get_check_logger


# Module logger
logger = get_logger(__name__)

# The Check button is enabled from 3 characters on. This is the only rule
# applied to pincodes; it is not a postal-code format check.
MIN_PINCODE_LENGTH = 3

# Browser sessions remembered by DeliveryService before the least recently
# used one is evicted
DEFAULT_MAX_SESSIONS = 1000


class DeliveryEstimator:
    """
    Delivery checks for one configuration session.

    Attributes:
        delay_seconds: Simulated lookup latency
        offset_days: Calendar days added to today's date
    """

    def __init__(
        self,
        delay_seconds: float = 1.0,
        offset_days: int = 4,
        today: Callable[[], date] = date.today
    ):
        self.delay_seconds = delay_seconds
        self.offset_days = offset_days
        self._today = today

        self._lock = threading.Lock()
        self._latest_request = 0
        self._estimate: Optional[DeliveryEstimate] = None
        self._pending: Optional[Tuple[int, threading.Event]] = None
        self._threads: Dict[int, threading.Thread] = {}

    @staticmethod
    def can_check(pincode: str) -> bool:
        return len(pincode or "") >= MIN_PINCODE_LENGTH

    @property
    def estimate(self) -> Optional[DeliveryEstimate]:
        """Latest published estimate, or None."""
        with self._lock:
            return self._estimate

    @property
    def is_checking(self) -> bool:
        """Whether the most recent check is still waiting."""
        with self._lock:
            return self._pending is not None

    def check(self, pincode: str) -> int:
        """
        Start a delivery check, superseding any check in flight.

        Args:
            pincode: Pincode to check (at least MIN_PINCODE_LENGTH chars)

        Returns:
            Sequence number of the new check

        Raises:
            ValidationError: If the pincode is too short
        """
        if not self.can_check(pincode):
            raise ValidationError(
                f"Pincode must be at least {MIN_PINCODE_LENGTH} characters",
                field="pincode",
                value=pincode,
            )

        cancel = threading.Event()
        with self._lock:
            self._latest_request += 1
            request_id = self._latest_request
            if self._pending is not None:
                superseded_id, superseded_cancel = self._pending
                superseded_cancel.set()
                logger.debug(f"Check {superseded_id} superseded by {request_id}")
            self._pending = (request_id, cancel)

            thread = threading.Thread(
                target=self._check_thread_main,
                args=(request_id, pincode, cancel),
                name=f"Delivery-{request_id}",
                daemon=True
            )
            self._threads[request_id] = thread
            # Started under the lock so wait() never sees an unstarted thread
            thread.start()

        logger.info(f"Delivery check {request_id} started for pincode {pincode}")
        return request_id

    def wait(self, timeout: Optional[float] = None) -> Optional[DeliveryEstimate]:
        """
        Block until every started check has finished.

        Returns:
            The estimate after all checks settled
        """
        with self._lock:
            threads = list(self._threads.values())
        for thread in threads:
            thread.join(timeout=timeout)
        return self.estimate

    def clear(self) -> None:
        """
        Forget the estimate and invalidate any check in flight.

        Used when the shopper switches to another product.
        """
        with self._lock:
            self._latest_request += 1
            if self._pending is not None:
                self._pending[1].set()
            self._pending = None
            self._estimate = None

    def _check_thread_main(self, request_id: int, pincode: str, cancel: threading.Event) -> None:
        check_logger = get_check_logger(request_id)
        try:
            if cancel.wait(self.delay_seconds):
                check_logger.debug("Cancelled before the simulated lookup finished")
                return

            estimate = DeliveryEstimate(
                pincode=pincode,
                estimated_date=self._today() + timedelta(days=self.offset_days),
            )
            if self._publish(request_id, estimate):
                check_logger.info(f"Estimate for {pincode}: {estimate.display_date}")
            else:
                check_logger.debug(f"Stale result for {pincode} dropped")
        finally:
            with self._lock:
                self._threads.pop(request_id, None)

    def _publish(self, request_id: int, estimate: DeliveryEstimate) -> bool:
        """
        Store a finished check's result if it is still the latest check.

        Returns:
            True if the estimate was stored, False if it was stale
        """
        with self._lock:
            if request_id != self._latest_request:
                return False
            self._estimate = estimate
            self._pending = None
            return True


class DeliveryService:
    """
    Registry of DeliveryEstimators keyed by browser session.

    Flask handles requests on several threads, so the registry is
    lock-protected. Estimators are created lazily and kept in least
    recently used order; once more than max_sessions browser sessions are
    known, the oldest is evicted and its estimator cleared. Anonymous
    shoppers never log out, so eviction is what keeps the registry bounded.
    """

    def __init__(
        self,
        delay_seconds: float = 1.0,
        offset_days: int = 4,
        today: Callable[[], date] = date.today,
        max_sessions: int = DEFAULT_MAX_SESSIONS
    ):
        if max_sessions < 1:
            raise ValueError("max_sessions must be at least 1")
        self._delay_seconds = delay_seconds
        self._offset_days = offset_days
        self._today = today
        self._max_sessions = max_sessions
        self._estimators: "OrderedDict[str, DeliveryEstimator]" = OrderedDict()
        self._lock = threading.Lock()

        logger.info(
            f"DeliveryService initialized (delay={delay_seconds}s, offset={offset_days} days, "
            f"max_sessions={max_sessions})"
        )

    def estimator_for(self, session_key: str) -> DeliveryEstimator:
        evicted = []
        with self._lock:
            estimator = self._estimators.get(session_key)
            if estimator is None:
                estimator = DeliveryEstimator(
                    delay_seconds=self._delay_seconds,
                    offset_days=self._offset_days,
                    today=self._today,
                )
                self._estimators[session_key] = estimator
                while len(self._estimators) > self._max_sessions:
                    evicted.append(self._estimators.popitem(last=False))
            else:
                self._estimators.move_to_end(session_key)

        for old_key, old_estimator in evicted:
            old_estimator.clear()
            logger.debug(f"Evicted delivery estimator for idle session {old_key[:8]}")
        return estimator

    def discard(self, session_key: str) -> None:
        """Drop a session's estimator (e.g. on logout)."""
        with self._lock:
            estimator = self._estimators.pop(session_key, None)
        if estimator is not None:
            estimator.clear()

    def shutdown(self, timeout_per_check: float = 2.0) -> None:
        """Wait for outstanding checks; call at application exit."""
        with self._lock:
            estimators = list(self._estimators.values())
        for estimator in estimators:
            estimator.clear()
            estimator.wait(timeout=timeout_per_check)
        logger.info("Delivery service shutdown complete")
