from __future__ import annotations
import asyncio
import logging
from typing import Any, Mapping, Optional, Union

from ..utils import HiResTimer
from .analysis import summarize_typing
from .config import SimulationConfig
from .engine import TypingEngine
from .primitives import _emit_insert_text, _press_key
from .scheduler import AsyncioScheduler
from .utils import _is_line_break

# Route debug prints in this module through logging
print = logging.getLogger(__name__).debug


async def _press_post_keys(page, tab: bool, enter: bool) -> None:
    # Tab first, then Enter
    if tab:
        await _press_key(page, "Tab")
    if enter:
        await _press_key(page, "Enter")


async def type_in_element(
    page,
    text: str = "",
    *,
    config: Union[SimulationConfig, Mapping[str, Any], None] = None,
    seed: Optional[int] = None,
    tab: bool = False,
    enter: bool = False,
    log_summary: bool = False,
) -> Optional[TypingEngine]:
    """
    Type text into the already-focused element like a human.
    Use your mouse to focus first.

    A TypingEngine runs on the current event loop; every character it
    commits (mistakes included) and every backspace it performs is sent to
    the page in order. Returns the finished engine for inspection.

    - If `text` is empty, only Tab and/or Enter are sent and None is returned.
    """
    if not text:
        await _press_post_keys(page, tab, enter)
        return None

    engine = TypingEngine(text, config, scheduler=AsyncioScheduler(), seed=seed)
    actions: asyncio.Queue = asyncio.Queue()
    done = asyncio.Event()

    def on_character(chars: str, index: int) -> None:
        actions.put_nowait(("text", chars, index))

    engine.on_character(on_character)
    engine.on_backspace(lambda: actions.put_nowait(("key", "Backspace", -1)))
    engine.on_complete(done.set)

    async def dispatch() -> None:
        while True:
            kind, value, index = await actions.get()
            try:
                if kind == "key":
                    await _press_key(page, value)
                    continue
                for ch in value:
                    if not _is_line_break(ch):
                        await _emit_insert_text(page, ch)
                    elif not (ch == "\r" and text[index + 1 : index + 2] == "\n"):
                        await _press_key(page, "Enter")
            finally:
                actions.task_done()

    worker = asyncio.create_task(dispatch())
    try:
        with HiResTimer():
            engine.start()
            await done.wait()
            await actions.join()
    finally:
        if not engine.is_completed:
            engine.stop()
        worker.cancel()
        await asyncio.gather(worker, return_exceptions=True)

    await _press_post_keys(page, tab, enter)

    if log_summary:
        print(summarize_typing(engine))
    return engine
