"""Permission errors and the channel they are reported on.

Permission failures from the backing store are not shown raw to shoppers.
Call sites catch them and emit them on an ``ErrorChannel``; the admin
dashboard (or a test) subscribes to the channel for diagnostics.
"""

from collections.abc import Callable

import structlog

logger = structlog.get_logger(__name__)


class PermissionDeniedError(Exception):
    """An actor attempted an operation its role does not allow."""

    def __init__(self, path: str, operation: str, request_data: dict | None = None):
        self.path = path
        self.operation = operation
        self.request_data = request_data or {}
        super().__init__(f"Missing or insufficient permissions: {operation} on {path}")

    def to_dict(self) -> dict:
        return {
            "path": self.path,
            "operation": self.operation,
            "request_data": self.request_data,
        }


class ErrorChannel:
    """Fan-out of permission errors to subscribed listeners.

    A listener that raises is logged and skipped so one broken subscriber
    cannot hide the error from the others.
    """

    def __init__(self):
        self._listeners: list[Callable[[PermissionDeniedError], None]] = []

    def subscribe(self, listener: Callable[[PermissionDeniedError], None]) -> Callable[[], None]:
        self._listeners.append(listener)

        def unsubscribe():
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def emit(self, error: PermissionDeniedError) -> None:
        logger.warning("permission_denied", **error.to_dict())
        for listener in list(self._listeners):
            try:
                listener(error)
            except Exception:
                logger.exception("Error channel listener failed", listener=repr(listener))
