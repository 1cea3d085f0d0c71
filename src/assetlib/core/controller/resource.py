from __future__ import annotations

"""
Resource Request Controller.

Tracks one asynchronous data request for a view: the last payload, the
loading flag and the last error. Requests are (re)issued explicitly through
``activate``, ``tick`` and ``refetch``. When calls overlap, the last one
issued wins: every call takes a monotonically increasing sequence number
and a settlement that is no longer the latest is ignored for state.
"""

import inspect
import logging
from dataclasses import replace
from typing import Any, Awaitable, Callable, List, Optional, Sequence, Tuple, Union

from assetlib.domain.models import (
    STATUS_ERROR,
    STATUS_LOADING,
    STATUS_SUCCESS,
    RequestDescriptor,
    RequestState,
)

logger = logging.getLogger(__name__)

RequestFn = Callable[[Any], Union[Awaitable[Any], Any]]
StateListener = Callable[[RequestState], None]


class ResourceController:
    """
    State holder for one call site.

    The controller never retries, never persists and never logs payloads.
    Errors are stored in ``error`` while ``data`` keeps its previous value;
    the next call clears ``error`` as soon as it starts loading.
    """

    def __init__(
            self,
            fn: RequestFn,
            params: Any = None,
            *,
            dependency_key: Sequence[Any] = (),
            initial_data: Any = None,
    ) -> None:
        """
        Args:
            fn: Called with the stored params; may return a value or an
                awaitable.
            params: Initial params passed to ``fn``.
            dependency_key: Values whose change triggers a reissue on ``tick``.
            initial_data: ``data`` before the first successful call.
        """
        self._descriptor = RequestDescriptor(fn, params, tuple(dependency_key))
        self._state = RequestState(data=initial_data)
        self._issued = 0
        self._active = False
        self._listeners: List[StateListener] = []

    # -------------------------------------------------------------------------
    # State access
    # -------------------------------------------------------------------------

    @property
    def state(self) -> RequestState:
        return self._state

    @property
    def data(self) -> Any:
        return self._state.data

    @property
    def loading(self) -> bool:
        return self._state.loading

    @property
    def error(self) -> Optional[Exception]:
        return self._state.error

    @property
    def params(self) -> Any:
        return self._descriptor.params

    @property
    def dependency_key(self) -> Tuple[Any, ...]:
        return self._descriptor.dependency_key

    @property
    def descriptor(self) -> RequestDescriptor:
        """The call currently issued by this controller."""
        return self._descriptor

    @property
    def issued(self) -> int:
        """Sequence number of the most recently issued call."""
        return self._issued

    def subscribe(self, listener: StateListener) -> Callable[[], None]:
        """
        Register a listener called with each applied state snapshot.

        Returns:
            Callable[[], None]: Removes the listener again.
        """
        self._listeners.append(listener)

        def _unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return _unsubscribe

    # -------------------------------------------------------------------------
    # Triggers
    # -------------------------------------------------------------------------

    async def activate(self) -> Any:
        """Issue the first call (equivalent of the view mounting)."""
        self._active = True
        return await self._issue()

    async def tick(self, dependency_key: Sequence[Any]) -> Any:
        """
        Compare ``dependency_key`` with the previous one and reissue if it
        differs element-wise. An inactive controller is activated.

        Returns:
            The call's data, or None when nothing was issued or it failed.
        """
        key = tuple(dependency_key)
        if self._active and key == self._descriptor.dependency_key:
            return None
        self._descriptor = replace(self._descriptor, dependency_key=key)
        self._active = True
        return await self._issue()

    async def refetch(self, params: Any = None) -> Any:
        """
        Reissue the call. New ``params`` replace the stored ones; None
        replays the call with the existing params.
        """
        if params is not None:
            self._descriptor = replace(self._descriptor, params=params)
        return await self._issue()

    # -------------------------------------------------------------------------
    # Internals
    # -------------------------------------------------------------------------

    async def _issue(self) -> Any:
        self._issued += 1
        sequence = self._issued
        self._apply(replace(self._state, loading=True, error=None, status=STATUS_LOADING, sequence=sequence))

        try:
            result = self._descriptor.fn(self._descriptor.params)
            if inspect.isawaitable(result):
                result = await result
        except Exception as e:
            if sequence != self._issued:
                logger.debug(f"Controller: Discarded stale failure of call #{sequence}")
                return None
            self._apply(RequestState(
                data=self._state.data,
                loading=False,
                error=e,
                status=STATUS_ERROR,
                sequence=sequence,
            ))
            return None

        if sequence != self._issued:
            logger.debug(f"Controller: Discarded stale result of call #{sequence} (latest #{self._issued})")
            return result

        self._apply(RequestState(data=result, loading=False, error=None, status=STATUS_SUCCESS, sequence=sequence))
        return result

    def _apply(self, state: RequestState) -> None:
        self._state = state
        for listener in list(self._listeners):
            listener(state)


def use_resource(
        fn: RequestFn,
        dependency_key: Sequence[Any] = (),
        initial_data: Any = None,
        initial_params: Any = None,
) -> ResourceController:
    """
    Create a controller for ``fn``. Call ``activate`` (or ``tick``) to issue
    the first request.
    """
    return ResourceController(
        fn,
        initial_params,
        dependency_key=dependency_key,
        initial_data=initial_data,
    )
