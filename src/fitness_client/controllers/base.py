"""
Shared fetch-lifecycle plumbing for the activity controllers.

Each fetch is stamped with a generation number. A result is applied only if
no newer fetch (or deactivate) happened while it was outstanding.
"""

import asyncio
import logging
from typing import Any, Awaitable, Callable

from fitness_client.errors import FitnessClientError, NetworkError
from fitness_client.models.view_state import FetchState, Failed, Idle, Loaded, Loading

logger = logging.getLogger(__name__)

StateListener = Callable[[FetchState], None]


class FetchController:
    def __init__(self) -> None:
        self._state: FetchState = Idle()
        self._generation = 0
        self._listeners: list[StateListener] = []

    @property
    def state(self) -> FetchState:
        return self._state

    @property
    def loading(self) -> bool:
        return isinstance(self._state, Loading)

    def subscribe(self, listener: StateListener) -> Callable[[], None]:
        self._listeners.append(listener)

        def unsubscribe() -> None:
            try:
                self._listeners.remove(listener)
            except ValueError:
                pass
        return unsubscribe

    def _set_state(self, state: FetchState) -> None:
        self._state = state
        for listener in list(self._listeners):
            try:
                listener(state)
            except Exception:
                logger.exception("View state listener failed")

    def _invalidate(self) -> None:
        self._generation += 1
        if not isinstance(self._state, Idle):
            self._set_state(Idle())

    async def _run_fetch(self, label: str, fetch: Callable[[], Awaitable[Any]]) -> None:
        self._generation += 1
        generation = self._generation
        self._set_state(Loading())
        try:
            payload = await fetch()
        except asyncio.CancelledError:
            if generation == self._generation:
                self._set_state(Idle())
            raise
        except FitnessClientError as e:
            error = e
        except Exception as e:
            logger.exception(f"Unexpected error loading {label}")
            error = NetworkError(f"Failed to load {label}: {e}")
        else:
            if generation != self._generation:
                logger.debug(f"Dropping stale response for {label}")
                return
            self._set_state(Loaded(payload=payload))
            return
        if generation != self._generation:
            logger.debug(f"Dropping stale failure for {label}: {error}")
            return
        logger.warning(f"Failed to load {label}: [{error.code}] {error}")
        self._set_state(Failed(error=error))
