"""
Process-wide store status.

The status is observational: presentation code subscribes to it to render a
connection indicator. It never gates correctness, except that the store
refuses operations until it has been opened.
"""

import logging
from collections.abc import Callable
from enum import Enum

logger = logging.getLogger(__name__)


class DatabaseStatus(str, Enum):
    NOT_INITIALIZED = "not_initialized"
    CONNECTED = "connected"
    ERROR = "error"
    SYNCING = "syncing"


StatusListener = Callable[[DatabaseStatus], None]


class StatusTracker:
    """Holds the current status and pushes every change to listeners."""

    def __init__(self) -> None:
        self._status = DatabaseStatus.NOT_INITIALIZED
        self._listeners: list[StatusListener] = []

    @property
    def status(self) -> DatabaseStatus:
        return self._status

    def subscribe(self, listener: StatusListener) -> Callable[[], None]:
        """
        Register a listener. It is called immediately with the current status.

        Returns:
            A callable that removes the listener
        """
        self._listeners.append(listener)
        self._notify(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def set(self, status: DatabaseStatus) -> None:
        if status != self._status:
            logger.info(f"Database status: {self._status.value} -> {status.value}")
        self._status = status
        for listener in list(self._listeners):
            self._notify(listener)

    def _notify(self, listener: StatusListener) -> None:
        try:
            listener(self._status)
        except Exception:
            # Display code must not break storage operations
            logger.exception("Status listener failed")
