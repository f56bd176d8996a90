"""Hands watch results to the user callback and interprets its directives."""

import logging
from typing import Iterable

from logwatcher.events import Callback, Line, LogWatcherAction, WatchResult

logger = logging.getLogger(__name__)


class EventDispatcher:
    def __init__(self, callback: Callback):
        self._callback = callback
        self.last_delivered: WatchResult | None = None

    def dispatch(self, results: Iterable[WatchResult]) -> LogWatcherAction:
        """Deliver one poll cycle's results in order.

        FINISH stops delivery immediately. SEEK_TO_END drops the remaining
        line events of the cycle but still delivers rotations and errors.
        Returns the directive the loop should act on; ``last_delivered``
        is the final result the callback actually saw.
        """
        pending = LogWatcherAction.CONTINUE
        self.last_delivered = None
        for result in results:
            if pending is LogWatcherAction.SEEK_TO_END and isinstance(result, Line):
                continue
            self.last_delivered = result
            action = self.invoke(result)
            if action is LogWatcherAction.FINISH:
                logger.debug("Callback requested finish")
                return action
            if action is LogWatcherAction.SEEK_TO_END:
                pending = action
        return pending

    def invoke(self, result: WatchResult) -> LogWatcherAction:
        action = self._callback(result)
        if action is None:
            return LogWatcherAction.CONTINUE
        if not isinstance(action, LogWatcherAction):
            raise TypeError(
                f"callback must return a LogWatcherAction or None, got {type(action).__name__}"
            )
        return action
