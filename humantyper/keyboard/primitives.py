from __future__ import annotations
import asyncio
import logging
from typing import Any, Awaitable, Callable, Dict
from zendriver import cdp

CDP_SEND_TIMEOUT_S = 0.35  # keep input sends from blocking the loop

# name -> (key, code, virtual key code, key-down event type)
_KEYS: Dict[str, tuple] = {
    "Backspace": ("Backspace", "Backspace", 8, "rawKeyDown"),
    "Enter": ("Enter", "Enter", 13, "keyDown"),
    "Tab": ("Tab", "Tab", 9, "rawKeyDown"),
}


async def _send_cdp_event(
    page, fn: Callable[[], Awaitable[Any]], *, label: str
) -> None:
    """Send a CDP event with a short timeout; fall back to background dispatch."""
    task = asyncio.create_task(fn())
    try:
        await asyncio.wait_for(asyncio.shield(task), timeout=CDP_SEND_TIMEOUT_S)
    except asyncio.TimeoutError:
        logging.getLogger(__name__).warning(
            "CDP %s stalled >%.0f ms; continuing in background",
            label,
            CDP_SEND_TIMEOUT_S * 1000.0,
        )
    except Exception:
        logging.getLogger(__name__).warning(
            "CDP %s failed (skipped this event)", label, exc_info=True
        )


async def _emit_insert_text(page, text: str) -> None:
    await _send_cdp_event(
        page,
        lambda: page.send(cdp.input_.insert_text(text=text)),
        label="insertText",
    )


async def _press_key(page, name: str) -> None:
    """Send a down/up pair for one of the named editing keys."""
    key, code, vk, down_type = _KEYS[name]
    for type_ in (down_type, "keyUp"):
        await _send_cdp_event(
            page,
            lambda type_=type_: page.send(
                cdp.input_.dispatch_key_event(
                    type_=type_,
                    key=key,
                    code=code,
                    windows_virtual_key_code=vk,
                    native_virtual_key_code=vk,
                )
            ),
            label=f"{name}{'Up' if type_ == 'keyUp' else 'Down'}",
        )
