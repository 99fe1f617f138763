"""Pytest configuration and fixtures."""

from __future__ import annotations

from typing import Any

import pytest

from autolsp.host import AutocmdOptions, DeferredQueue, LogLevel
from autolsp.hosts.local import LocalHost


class BareHost:
    """Host with buffers and a run-queue but no activation interface."""

    def __init__(self, buffers: dict[int, str] | None = None, installed: set[str] | None = None):
        self.queue = DeferredQueue()
        self.buffers = dict(buffers or {})
        self.installed = set(installed or ())
        self.fired: list[tuple[str, int | None]] = []
        self.options: list[AutocmdOptions] = []
        self.messages: list[tuple[str, LogLevel]] = []
        self.probed: list[str] = []

    def schedule(self, task) -> None:
        self.queue.schedule(task)

    def run_pending(self) -> int:
        return self.queue.run_pending()

    def list_buffers(self) -> list[int]:
        return list(self.buffers)

    def buffer_filetype(self, bufnr: int) -> str:
        return self.buffers[bufnr]

    def exec_autocmds(self, event: str, options: AutocmdOptions) -> None:
        self.fired.append((event, options.buffer))
        self.options.append(options)

    def executable(self, command: str) -> bool:
        self.probed.append(command)
        return command in self.installed

    def notify(self, message: str, level: LogLevel) -> None:
        self.messages.append((message, level))


class RecordingHost(BareHost):
    """BareHost with a modern configure function and enable primitive."""

    def __init__(self, *args: Any, fail_configure: set[str] | None = None, **kwargs: Any):
        super().__init__(*args, **kwargs)
        self.fail_configure = set(fail_configure or ())
        self.configured: list[tuple[str, dict[str, Any]]] = []
        self.enabled: list[str] = []

    def lsp_config(self, name: str, config: dict[str, Any]) -> None:
        if name in self.fail_configure:
            raise RuntimeError(f"bad config for {name}")
        self.configured.append((name, config))

    def lsp_enable(self, name: str) -> None:
        self.enabled.append(name)


@pytest.fixture
def bare_host() -> BareHost:
    return BareHost(buffers={1: "go", 2: "python", 3: "go"})


@pytest.fixture
def host() -> RecordingHost:
    return RecordingHost(buffers={1: "go", 2: "python", 3: "go"})


@pytest.fixture
def local_host() -> LocalHost:
    return LocalHost(executables={"gopls"})


@pytest.fixture
def make_bare_host():
    """Factory for hosts without an activation interface."""
    return BareHost


@pytest.fixture
def make_recording_host():
    """Factory for hosts with a modern configure/enable interface."""
    return RecordingHost
