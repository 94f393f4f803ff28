# src/tasksync/client/store.py

from __future__ import annotations

"""
Store: the single owner of client state.

dispatch(action):
- queues the action; if no dispatch is running, drains the queue FIFO
- per action: reducer (synchronous) -> subscribers -> schedule matching effects
- nested dispatches (from subscribers) are queued, not interleaved

Effects run as asyncio tasks on the running loop and report back only through
dispatch(). There are no locks: everything that writes state goes through the
single dispatch path on the event loop thread. Dispatching an action that has
effects outside a running loop raises RuntimeError and leaves state untouched.
"""

import asyncio
import logging
from collections import deque
from collections.abc import Callable

from ..core.ports import ApiClient
from .actions import Action
from .effects import EffectContext, EffectHandler, EffectRegistry, build_effects
from .reducer import reduce
from .state import State, initial_state

logger = logging.getLogger(__name__)

Reducer = Callable[[State, Action], State]
Listener = Callable[[State, State], None]


class Store:
    def __init__(
        self,
        reducer: Reducer,
        effects: EffectRegistry,
        api: ApiClient,
        *,
        page_size: int = 10,
        initial: State | None = None,
    ) -> None:
        self._reducer = reducer
        self._effects = effects
        self._api = api
        self._page_size = max(1, int(page_size))
        self._state = initial if initial is not None else initial_state()

        self._queue: deque[Action] = deque()
        self._dispatching = False
        self._listeners: list[Listener] = []
        self._in_flight: set[asyncio.Task[None]] = set()

    # ---- read side ----

    def get_state(self) -> State:
        return self._state

    @property
    def in_flight(self) -> int:
        return len(self._in_flight)

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """
        Call listener(old_state, new_state) after every state change.
        Returns a function that removes the listener.
        """
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    # ---- write side ----

    def dispatch(self, action: Action) -> None:
        self._queue.append(action)
        if self._dispatching:
            return

        self._dispatching = True
        try:
            while self._queue:
                self._process(self._queue.popleft())
        except RuntimeError:
            self._queue.clear()
            raise
        finally:
            self._dispatching = False

    def _process(self, action: Action) -> None:
        handlers = self._effects.handlers_for(action)
        # Effects need a running loop: checked before the reducer commits anything.
        loop = asyncio.get_running_loop() if handlers else None

        previous = self._state
        current = self._reducer(previous, action)
        self._state = current
        logger.debug("dispatch %s", action.__class__.__name__)

        if current is not previous:
            for listener in list(self._listeners):
                try:
                    listener(previous, current)
                except Exception:
                    logger.exception("State listener failed on %s", action.__class__.__name__)

        if loop is None:
            return
        for handler in handlers:
            ctx = EffectContext(
                action=action,
                previous_state=previous,
                state=current,
                get_state=self.get_state,
                dispatch=self.dispatch,
                api=self._api,
                page_size=self._page_size,
            )
            self._start_effect(loop, handler, ctx)

    def _start_effect(
        self, loop: asyncio.AbstractEventLoop, handler: EffectHandler, ctx: EffectContext
    ) -> None:
        name = f"{getattr(handler, '__name__', 'effect')}:{ctx.action.__class__.__name__}"
        task = loop.create_task(handler(ctx), name=name)
        self._in_flight.add(task)
        task.add_done_callback(self._effect_done)

    def _effect_done(self, task: asyncio.Task[None]) -> None:
        self._in_flight.discard(task)
        if task.cancelled():
            logger.debug("Effect %s cancelled", task.get_name())
            return
        exc = task.exception()
        if exc is not None:
            logger.error("Effect %s crashed", task.get_name(), exc_info=exc)

    async def wait_idle(self) -> None:
        """Wait until no effect is running, including effects started by effects."""
        while self._in_flight:
            await asyncio.gather(*list(self._in_flight), return_exceptions=True)


def configure_store(
    api: ApiClient,
    *,
    page_size: int = 10,
    initial: State | None = None,
) -> Store:
    """Store wired with the default reducer and effects."""
    return Store(reduce, build_effects(), api, page_size=page_size, initial=initial)
