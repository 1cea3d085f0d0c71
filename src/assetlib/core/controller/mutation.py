from __future__ import annotations

"""
One-shot operation controller (create, update, delete, move...).

Unlike ResourceController it does not swallow failures: the error is
recorded and then re-raised so the caller can react to it.
"""

import logging
from typing import Any, Awaitable, Callable, List, Optional

from assetlib.domain.models import STATUS_ERROR, STATUS_LOADING, STATUS_SUCCESS, RequestState

logger = logging.getLogger(__name__)


class MutationController:
    """Tracks ``loading``, ``error`` and ``result`` of an awaited operation."""

    def __init__(self, operation: Callable[..., Awaitable[Any]]) -> None:
        self._operation = operation
        self._state = RequestState()
        self._runs = 0
        self._listeners: List[Callable[[RequestState], None]] = []

    @property
    def state(self) -> RequestState:
        return self._state

    @property
    def loading(self) -> bool:
        return self._state.loading

    @property
    def error(self) -> Optional[Exception]:
        return self._state.error

    @property
    def result(self) -> Any:
        return self._state.data

    def subscribe(self, listener: Callable[[RequestState], None]) -> Callable[[], None]:
        """Register a state listener; the returned callable removes it."""
        self._listeners.append(listener)

        def _unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return _unsubscribe

    async def run(self, *args: Any, **kwargs: Any) -> Any:
        """
        Await the operation with the given arguments.

        Raises:
            Exception: Whatever the operation raised, after recording it.
        """
        self._runs += 1
        sequence = self._runs
        self._apply(RequestState(loading=True, status=STATUS_LOADING, sequence=sequence))
        try:
            result = await self._operation(*args, **kwargs)
        except Exception as e:
            logger.debug(f"Mutation: Run #{sequence} failed with {type(e).__name__}")
            self._apply(RequestState(error=e, status=STATUS_ERROR, sequence=sequence))
            raise
        self._apply(RequestState(data=result, status=STATUS_SUCCESS, sequence=sequence))
        return result

    def reset(self) -> None:
        self._apply(RequestState())

    def _apply(self, state: RequestState) -> None:
        self._state = state
        for listener in list(self._listeners):
            listener(state)
