"""Rendering of operation events on the terminal."""

from collections.abc import Iterable
from typing import TypeVar

import click

from gitlab_fork.events import CompletionEvent, ProgressEvent
from gitlab_fork.output.output import user_output

T = TypeVar("T")

_STYLE_MAP: dict[str, dict[str, bool | str]] = {
    "info": {},
    "success": {"fg": "green"},
    "warning": {"fg": "yellow"},
    "error": {"fg": "red", "bold": True},
}


def render_progress(event: ProgressEvent) -> None:
    """Render a progress event to stderr."""
    style = _STYLE_MAP.get(event.style, {})
    user_output(click.style(f"   {event.message}", **style))


def render_events(events: Iterable[ProgressEvent | CompletionEvent[T]]) -> T | None:
    """Render every progress event and return the completion result.

    Returns None if the operation ended without a CompletionEvent.
    """
    result: T | None = None
    for event in events:
        if isinstance(event, ProgressEvent):
            render_progress(event)
        elif isinstance(event, CompletionEvent):
            result = event.result
    return result
