"""Event dispatching."""

from xiaoniu.infrastructure.events.dispatcher import DispatchOutcome, EventDispatcher

__all__ = ["DispatchOutcome", "EventDispatcher"]
