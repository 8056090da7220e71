"""
Balance Refresher

Keeps a wallet snapshot and activity list fresh on a background thread.
"""

import logging
import threading
from typing import Callable, List, Optional, Tuple, TYPE_CHECKING

from ..types import ActivityRecord, BalanceSnapshot
from ..errors import TransientReadError
from ..config import config as global_config

if TYPE_CHECKING:
    from .wallet import WalletModule

logger = logging.getLogger(__name__)

UpdateCallback = Callable[[BalanceSnapshot, List[ActivityRecord]], None]


class BalanceRefresher:
    """
    Periodic, cancellable wallet refresh

    start() refreshes immediately and then every interval on a daemon
    thread; stop() cancels and joins it. refresh_now() runs one cycle on the
    caller's thread. A failed SOL read keeps the last known SOL value.

    Usage:
        refresher = BalanceRefresher(client.wallet, on_update=render)
        refresher.start()
        ...
        refresher.stop()
    """

    def __init__(
        self,
        wallet: "WalletModule",
        interval_seconds: Optional[float] = None,
        on_update: Optional[UpdateCallback] = None,
    ):
        self._wallet = wallet
        self._interval = (
            interval_seconds if interval_seconds is not None else global_config.wallet.refresh_interval_seconds
        )
        self._on_update = on_update
        self._stop_event = threading.Event()
        self._thread: Optional[threading.Thread] = None
        self._state_lock = threading.Lock()
        self._snapshot: Optional[BalanceSnapshot] = None
        self._activity: List[ActivityRecord] = []

    @property
    def interval(self) -> float:
        return self._interval

    @property
    def is_running(self) -> bool:
        return self._thread is not None and self._thread.is_alive()

    @property
    def snapshot(self) -> Optional[BalanceSnapshot]:
        """Latest snapshot (None before the first successful cycle)"""
        with self._state_lock:
            return self._snapshot

    @property
    def activity(self) -> List[ActivityRecord]:
        with self._state_lock:
            return list(self._activity)

    def refresh_now(self) -> Tuple[Optional[BalanceSnapshot], List[ActivityRecord]]:
        """
        Run one refresh cycle synchronously

        Returns:
            (snapshot, activity); snapshot stays None if SOL has never been read
        """
        previous = self.snapshot
        try:
            snapshot = self._wallet.snapshot(previous=previous)
        except TransientReadError as e:
            logger.warning(f"Balance refresh skipped: {e}")
            snapshot = previous
        activity = self._wallet.activity()

        with self._state_lock:
            self._snapshot = snapshot
            self._activity = activity

        if self._on_update is not None and snapshot is not None:
            self._on_update(snapshot, activity)
        return snapshot, activity

    def _run(self):
        while not self._stop_event.is_set():
            try:
                self.refresh_now()
            except Exception as e:
                logger.error(f"Refresh cycle failed: {e}", exc_info=True)
            self._stop_event.wait(self._interval)

    def start(self):
        """Start periodic refresh (no-op if already running)"""
        if self.is_running:
            return
        self._stop_event.clear()
        self._thread = threading.Thread(target=self._run, name="balance-refresh", daemon=True)
        self._thread.start()
        logger.debug(f"Balance refresh started (every {self._interval}s)")

    def stop(self, timeout: Optional[float] = None):
        """Cancel periodic refresh and wait for the thread to exit"""
        self._stop_event.set()
        if self._thread is not None:
            self._thread.join(timeout)
            self._thread = None
        logger.debug("Balance refresh stopped")

    def __enter__(self):
        self.start()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.stop()
