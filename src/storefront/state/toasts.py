"""User-facing messages produced by the client state layer.

Toasts carry a message key plus parameters; turning the key into French,
Arabic or English text is the UI's business.
"""

from dataclasses import dataclass, field
from enum import Enum

import structlog

from storefront.state.comparison import MAX_COMPARISON_ITEMS
from storefront.state.store import Signal
from storefront.state.wishlist import ToggleWishlist

logger = structlog.get_logger(__name__)


class ToastVariant(Enum):
    DEFAULT = "default"
    DESTRUCTIVE = "destructive"


@dataclass(frozen=True)
class Toast:
    key: str
    variant: ToastVariant = ToastVariant.DEFAULT
    params: dict = field(default_factory=dict)


class ToastSink:
    """Where toasts go. The default implementation only logs them."""

    def show(self, toast: Toast) -> None:
        logger.info("toast", key=toast.key, variant=toast.variant.value, **toast.params)


class MemoryToastSink(ToastSink):
    def __init__(self):
        self.toasts: list[Toast] = []

    def show(self, toast: Toast) -> None:
        self.toasts.append(toast)

    @property
    def keys(self) -> list[str]:
        return [toast.key for toast in self.toasts]


_SIGNAL_TOASTS = {
    Signal.LIMIT_REACHED: Toast(
        key="compare.toast.limitReached",
        variant=ToastVariant.DESTRUCTIVE,
        params={"count": MAX_COMPARISON_ITEMS},
    ),
    Signal.LOGIN_REQUIRED: Toast(
        key="auth.toast.loginRequired",
        variant=ToastVariant.DESTRUCTIVE,
    ),
}


class SignalToasts:
    """Signal listener that shows the toast matching a declined action."""

    def __init__(self, sink: ToastSink):
        self.sink = sink

    def __call__(self, signal: Signal, action) -> None:
        toast = _SIGNAL_TOASTS.get(signal)
        if toast is not None:
            self.sink.show(toast)


class WishlistToasts:
    """Store effect announcing wishlist additions and removals."""

    def __init__(self, sink: ToastSink):
        self.sink = sink

    def __call__(self, previous, current, action) -> None:
        if not isinstance(action, ToggleWishlist):
            return
        if current.contains(action.product_id):
            self.sink.show(Toast(key="wishlist.toast.added", params={"product_id": action.product_id}))
        else:
            self.sink.show(Toast(key="wishlist.toast.removed", params={"product_id": action.product_id}))
