"""
In-process reference host.

Holds buffers and autocommand listeners in memory and records every
configure/enable call. Used by the ``doctor`` command to preview activation
without an editor, and by embedders that drive the engine themselves.
"""

from __future__ import annotations

import logging
import shutil
from collections import defaultdict
from dataclasses import dataclass
from typing import Any, Callable

from ..host import AutocmdOptions, DeferredQueue, LogLevel, Task

logger = logging.getLogger(__name__)

Listener = Callable[[str, int], None]


@dataclass(frozen=True)
class FiredEvent:
    """An autocommand fired through the host."""

    event: str
    buffer: int
    group: str
    modeline: bool


class LocalHost:
    """
    A ``Host`` that keeps editor state in memory.

    Activation goes through the modern single-call interface: ``lsp_config``
    stores the configuration and ``lsp_enable`` marks the server enabled.
    """

    def __init__(
        self,
        *,
        path: str | None = None,
        executables: set[str] | None = None,
    ):
        """
        Args:
            path: PATH used to resolve executables (defaults to the process PATH)
            executables: If given, exactly these commands count as installed
        """
        self.queue = DeferredQueue()
        self.path = path
        self.installed = executables
        self.buffers: dict[int, str] = {}
        self.configs: dict[str, dict[str, Any]] = {}
        self.enabled: list[str] = []
        self.messages: list[tuple[str, LogLevel]] = []
        self.fired: list[FiredEvent] = []
        self._listeners: dict[str, list[tuple[str | None, Listener]]] = defaultdict(list)
        self._next_bufnr = 1

    # Buffers

    def open_buffer(self, filetype: str) -> int:
        bufnr = self._next_bufnr
        self._next_bufnr += 1
        self.buffers[bufnr] = filetype
        return bufnr

    def list_buffers(self) -> list[int]:
        return list(self.buffers)

    def buffer_filetype(self, bufnr: int) -> str:
        return self.buffers.get(bufnr, "")

    # Autocommands

    def on(self, event: str, listener: Listener, group: str | None = None) -> None:
        """Call ``listener(event, bufnr)`` when ``event`` fires (in ``group`` if given)."""
        self._listeners[event].append((group, listener))

    def exec_autocmds(self, event: str, options: AutocmdOptions) -> None:
        targets = [options.buffer] if options.buffer is not None else self.list_buffers()
        for bufnr in targets:
            self.fired.append(FiredEvent(event, bufnr, options.group, options.modeline))
            for group, listener in list(self._listeners.get(event, ())):
                if group is None or group == options.group:
                    listener(event, bufnr)

    # Scheduling

    def schedule(self, task: Task) -> None:
        self.queue.schedule(task)

    def run_pending(self) -> int:
        return self.queue.run_pending()

    # System

    def executable(self, command: str) -> bool:
        if self.installed is not None:
            return command in self.installed
        return shutil.which(command, path=self.path) is not None

    def notify(self, message: str, level: LogLevel) -> None:
        self.messages.append((message, level))
        logger.debug("notify[%s]: %s", level.name, message)

    # Modern activation interface

    def lsp_config(self, name: str, config: dict[str, Any]) -> None:
        self.configs[name] = config

    def lsp_enable(self, name: str) -> None:
        if name not in self.configs:
            raise KeyError(f"{name} is not configured")
        if name not in self.enabled:
            self.enabled.append(name)
