"""
Host editor interface.

The engine only talks to the editor through the ``Host`` protocol below.
Activation primitives (``lsp_config``, ``lsp_enable``, ``require_legacy``)
and ``notify`` are optional and discovered by probing; see capabilities.py.
"""

from __future__ import annotations

import logging
from collections import deque
from dataclasses import dataclass
from enum import IntEnum
from typing import Callable, Protocol, runtime_checkable

logger = logging.getLogger(__name__)

Task = Callable[[], None]


class LogLevel(IntEnum):
    """Notification levels understood by ``Host.notify``."""

    DEBUG = 1
    INFO = 2
    WARN = 3
    ERROR = 4


@dataclass(frozen=True)
class AutocmdOptions:
    """Options carried by a replayed lifecycle event."""

    group: str = "lspconfig"
    modeline: bool = False
    buffer: int | None = None


@runtime_checkable
class Host(Protocol):
    """Capabilities the activation engine requires from its editor."""

    def schedule(self, task: Task) -> None:
        """Run ``task`` later on the editor's main loop."""
        ...

    def list_buffers(self) -> list[int]:
        ...

    def buffer_filetype(self, bufnr: int) -> str:
        ...

    def exec_autocmds(self, event: str, options: AutocmdOptions) -> None:
        """Fire ``event`` for ``options.buffer`` (or every buffer when None)."""
        ...

    def executable(self, command: str) -> bool:
        """Whether ``command`` is runnable from the current PATH."""
        ...


class DeferredQueue:
    """
    FIFO run-queue for deferred tasks on a single thread.

    Tasks scheduled while draining run in the same drain, after the ones
    already queued. A task that raises is logged and the drain continues.
    """

    def __init__(self) -> None:
        self._tasks: deque[Task] = deque()

    def __len__(self) -> int:
        return len(self._tasks)

    def schedule(self, task: Task) -> None:
        self._tasks.append(task)

    def run_pending(self) -> int:
        """Run queued tasks until the queue is empty; return how many ran."""
        ran = 0
        while self._tasks:
            task = self._tasks.popleft()
            ran += 1
            try:
                task()
            except Exception:
                logger.exception("Deferred task failed")
        return ran
