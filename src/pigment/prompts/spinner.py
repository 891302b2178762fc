"""Task questions: run an async generator under a spinner."""

from __future__ import annotations

import asyncio
import logging
from typing import Any, Callable

from pigment import components
from pigment.components import Status
from pigment.events import KeyPress, Resize
from pigment.prompts.base import ControllerContext, InputChannel, cancel
from pigment.questions import TaskFactory, TaskProgress, TaskQuestion, TaskResult
from pigment.render import Section, render

logger = logging.getLogger(__name__)

FRAME_INTERVAL = 0.08

# Tasks abandoned by a cancel keep running; hold a reference until they end
_detached: set[asyncio.Future[Any]] = set()


async def drive_task(factory: TaskFactory, on_progress: Callable[[str], None] | None = None) -> TaskResult:
    """Consume a task generator up to its :class:`TaskResult`.

    Progress messages are passed to *on_progress*. A generator that ends
    without a result answers ``None``.
    """
    generator = factory()
    result = TaskResult(value=None)
    try:
        async for item in generator:
            match item:
                case TaskResult():
                    result = item
                    break
                case TaskProgress(message=message):
                    if on_progress is not None:
                        on_progress(message)
                case _:
                    raise TypeError(f"Task yielded {type(item).__name__}, expected TaskProgress or TaskResult")
    finally:
        aclose = getattr(generator, "aclose", None)
        if aclose is not None:
            await aclose()
    return result


def _forget(future: asyncio.Future[Any]) -> None:
    _detached.discard(future)
    if not future.cancelled() and future.exception() is not None:
        logger.warning("abandoned task failed: %s", future.exception())


class TaskController:
    """Spinner frames, progress messages and Ctrl-C handling for one task."""

    def __init__(self, question: TaskQuestion, context: ControllerContext) -> None:
        self.question = question
        self.context = context
        self.counter = 0
        self.message = question.message
        self._section: Section | None = None
        self._timer: asyncio.TimerHandle | None = None

    def frame(self, status: Status, answer: Any = None) -> str:
        return components.spinner(
            self.message, status, counter=self.counter, answer=answer, theme=self.context.theme
        )

    def progress(self, message: str) -> None:
        logger.debug("task %r: %s", self.question.message, message)
        if message:
            self.message = message
            self._repaint()

    def _repaint(self) -> None:
        if self._section is not None:
            self._section.update(self.frame("pending"))

    def _schedule(self) -> None:
        self._timer = asyncio.get_running_loop().call_later(FRAME_INTERVAL, self._tick)

    def _tick(self) -> None:
        self.counter += 1
        self._repaint()
        self._schedule()

    def _stop(self) -> None:
        if self._timer is not None:
            self._timer.cancel()
            self._timer = None

    async def _watch(self, channel: InputChannel) -> None:
        """Return when the user presses Ctrl-C."""
        while True:
            match await channel.next():
                case KeyPress(name="ctrl+c"):
                    return
                case Resize():
                    self._repaint()

    async def run(self) -> Any:
        terminal = self.context.terminal
        cancelled = False
        terminal.hide_cursor()
        try:
            async with InputChannel(terminal) as channel:
                self._section = render(terminal, self.frame("pending"))
                self._schedule()
                runner = asyncio.ensure_future(drive_task(self.question.task, self.progress))
                watcher = asyncio.ensure_future(self._watch(channel))
                try:
                    done, _ = await asyncio.wait({runner, watcher}, return_when=asyncio.FIRST_COMPLETED)
                except asyncio.CancelledError:
                    runner.cancel()
                    raise
                finally:
                    self._stop()
                    watcher.cancel()

                if runner in done:
                    try:
                        result = runner.result()
                    except Exception:
                        self._section.update(self.frame("cancelled"))
                        self._section.finish()
                        raise
                    if result.message:
                        self.message = result.message
                    else:
                        self.message = self.question.message
                    self._section.update(self.frame("done", result.value))
                else:
                    cancelled = True
                    self._section.update(self.frame("cancelled"))
                    _detached.add(runner)
                    runner.add_done_callback(_forget)
                self._section.finish()
                # Progress from an abandoned generator must not paint
                self._section = None
        finally:
            terminal.show_cursor()

        if cancelled:
            logger.debug("task %r cancelled, generator left running", self.question.message)
            raise cancel(self.context)
        return result.value


async def spinner(question: TaskQuestion, context: ControllerContext) -> Any:
    """Run a task question under a spinner and return its result value."""
    return await TaskController(question, context).run()
