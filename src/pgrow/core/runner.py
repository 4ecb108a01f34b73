"""
Runners that drive an execution routine in one of four styles.

A routine is a generator holding the whole statement lifecycle. Each time it
needs I/O it yields the step produced by its IO port:

- BlockingIO performs the I/O when called, so the step *is* the result and
  `run_blocking` hands it straight back.
- SuspendingIO returns a coroutine, which `run_suspending` awaits before
  sending the result back (or throwing the failure in, so the routine's
  `finally` blocks release the connection).

The safe variants wrap either runner and turn any Exception into `Err`.
"""
import asyncio
import logging
from collections.abc import Awaitable, Generator
from typing import Any, Protocol, TypeVar

from pgrow.exceptions import QueryCancelledError
from pgrow.result import Err, Ok, Result

logger = logging.getLogger(__name__)

T = TypeVar('T')

Routine = Generator[Any, Any, T]


class CancelSignal(Protocol):
    """Anything shaped like asyncio.Event."""

    def is_set(self) -> bool: ...

    async def wait(self) -> Any: ...


def run_blocking(routine: Routine[T]) -> T:
    """Drive a routine whose steps complete synchronously."""
    try:
        step = next(routine)
        while True:
            step = routine.send(step)
    except StopIteration as stop:
        return stop.value


async def _await_step(step: Awaitable[Any], cancel: CancelSignal | None) -> Any:
    """Await one step, aborting it if `cancel` is set first."""
    if cancel is None:
        return await step

    if cancel.is_set():
        if hasattr(step, 'close'):
            step.close()
        raise QueryCancelledError('Query cancelled')

    task = asyncio.ensure_future(step)
    waiter = asyncio.ensure_future(cancel.wait())
    try:
        done, _ = await asyncio.wait({task, waiter}, return_when=asyncio.FIRST_COMPLETED)
    except BaseException:
        task.cancel()
        waiter.cancel()
        raise
    waiter.cancel()

    if task in done:
        return task.result()

    task.cancel()
    await asyncio.wait({task})
    logger.debug('Cancel signal set, aborted in-flight step')
    raise QueryCancelledError('Query cancelled')


async def run_suspending(routine: Routine[T], cancel: CancelSignal | None = None) -> T:
    """Drive a routine whose steps are awaitables.

    Failures of a step, including task cancellation, are thrown back into the
    routine so its cleanup steps still run before the failure propagates.
    """
    result: Any = None
    error: BaseException | None = None
    while True:
        try:
            if error is not None:
                step = routine.throw(error)
            else:
                step = routine.send(result)
        except StopIteration as stop:
            return stop.value

        result, error = None, None
        try:
            result = await _await_step(step, cancel)
        except BaseException as exc:
            error = exc
            if isinstance(exc, QueryCancelledError):
                # cleanup steps after cancellation must run to completion
                cancel = None


def run_blocking_safe(routine: Routine[T]) -> Result:
    """Blocking runner that returns Ok/Err instead of raising."""
    try:
        return Ok(run_blocking(routine))
    except Exception as exc:
        logger.debug(f'Returning failure result: {exc!r}')
        return Err(exc)


async def run_suspending_safe(routine: Routine[T], cancel: CancelSignal | None = None) -> Result:
    """Suspending runner that returns Ok/Err instead of raising."""
    try:
        return Ok(await run_suspending(routine, cancel))
    except Exception as exc:
        logger.debug(f'Returning failure result: {exc!r}')
        return Err(exc)
