"""
Lifecycle event replay.

A provider activated after its buffers were opened missed the events that
attach it. Replaying them lets buffer-local setup run as if the provider had
been there from the start.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from dataclasses import replace

from .host import AutocmdOptions, Host

logger = logging.getLogger(__name__)

FILETYPE = "FileType"
BUF_READ_POST = "BufReadPost"


def replay_filetype(host: Host, tag: str, options: AutocmdOptions | None = None) -> int:
    """
    Fire ``FileType`` for every open buffer classified as ``tag``.

    Returns:
        Number of buffers the event was fired for
    """
    options = options or AutocmdOptions()
    fired = 0
    for bufnr in host.list_buffers():
        if host.buffer_filetype(bufnr) == tag:
            host.exec_autocmds(FILETYPE, replace(options, buffer=bufnr))
            fired += 1
    logger.debug("Replayed %s for %d %s buffer(s)", FILETYPE, fired, tag)
    return fired


def replay_all(host: Host, events: str | Iterable[str], options: AutocmdOptions | None = None) -> int:
    """
    Fire each of ``events`` for every open buffer, in order, buffer by buffer.

    Returns:
        Number of buffers visited
    """
    options = options or AutocmdOptions()
    names = [events] if isinstance(events, str) else list(events)
    buffers = host.list_buffers()
    for bufnr in buffers:
        for event in names:
            host.exec_autocmds(event, replace(options, buffer=bufnr))
    logger.debug("Replayed %s for %d buffer(s)", ", ".join(names), len(buffers))
    return len(buffers)
