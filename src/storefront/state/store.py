"""Generic store: current state + pure reducer + effects.

A reducer is a pure function ``(state, action) -> (next_state, signal)``.
It returns the *same* state object when an action is a no-op, which is how
the store knows not to run effects. Signals are caller-visible outcomes of
declined actions (comparison full, login required); they never mutate state.

Effects are called as ``effect(previous, current, action)`` after every real
state change. A failing effect is logged and swallowed: losing a write to
client storage must not break the shopping flow.
"""

from collections.abc import Callable
from dataclasses import dataclass
from enum import Enum
from typing import Any

import structlog

logger = structlog.get_logger(__name__)


class Signal(Enum):
    LIMIT_REACHED = "LimitReached"
    LOGIN_REQUIRED = "LoginRequired"


@dataclass(frozen=True)
class ReplaceState:
    """Swap the whole state, used when rehydrating from storage."""

    state: Any


Reducer = Callable[[Any, Any], tuple[Any, Signal | None]]
Effect = Callable[[Any, Any, Any], None]
SignalListener = Callable[[Signal, Any], None]


class Store:
    """Holds one concern's state and funnels every change through its reducer."""

    name = "store"

    def __init__(self, initial_state, reducer: Reducer, effects: list[Effect] | None = None):
        self._state = initial_state
        self._reducer = reducer
        self._effects: list[Effect] = list(effects or [])
        self._listeners: list[SignalListener] = []

    @property
    def state(self):
        return self._state

    def add_effect(self, effect: Effect) -> None:
        self._effects.append(effect)

    def subscribe(self, listener: SignalListener) -> Callable[[], None]:
        """Register a signal listener; returns a callable that unregisters it."""
        self._listeners.append(listener)

        def unsubscribe():
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def dispatch(self, action) -> Signal | None:
        previous = self._state
        current, signal = self._reducer(previous, action)

        if current is not previous:
            self._state = current
            self._run_effects(previous, current, action)

        if signal is not None:
            logger.debug("store_signal", store=self.name, signal=signal.value, action=type(action).__name__)
            for listener in list(self._listeners):
                listener(signal, action)

        return signal

    def rehydrate(self, state) -> None:
        """Load previously persisted state; ``None`` leaves the initial state in place."""
        if state is not None:
            self.dispatch(ReplaceState(state))

    def _run_effects(self, previous, current, action) -> None:
        for effect in self._effects:
            try:
                effect(previous, current, action)
            except Exception:
                logger.exception(
                    "Store effect failed",
                    store=self.name,
                    effect=getattr(effect, "__name__", type(effect).__name__),
                    action=type(action).__name__,
                )
