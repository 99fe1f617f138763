"""
Activation engine.

Decides when each provider gets configured: once per provider, on the first
buffer of a matching filetype, with failed providers retried only on request.
All real work is deferred through ``Host.schedule`` so public calls return
immediately and never run inside the host's own event dispatch.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping
from typing import Any, Callable

from .adapter import configure_server, enable_server, notify_error, NOTIFY_PREFIX
from .capabilities import HostBinding, probe_host
from .host import AutocmdOptions, Host
from .models import CheckState, ProviderStatus, TrackingState
from .registry import Registry
from .replay import BUF_READ_POST, FILETYPE, replay_all, replay_filetype
from .resolve import UNAVAILABLE, GlobalDefaults, resolve_config

logger = logging.getLogger(__name__)

DEFAULT_AUGROUP = "lspconfig"


class ActivationEngine:
    """Lazily activates language servers for the filetypes a host has open."""

    def __init__(
        self,
        host: Host,
        providers: Mapping[str, Any],
        global_config: Mapping[str, Any] | Callable[[], Mapping[str, Any]] | None = None,
        *,
        generic_providers: Iterable[str] = (),
        filetype_providers: Mapping[str, Iterable[str]] | None = None,
        executables: Mapping[str, str] | None = None,
        augroup: str = DEFAULT_AUGROUP,
    ):
        """
        Args:
            host: Editor the engine acts on
            providers: Provider name → definition (see ProviderDef.from_raw)
            global_config: Defaults merged under every provider config, or a
                producer for them
            generic_providers: Providers activated regardless of filetype
            filetype_providers: Base filetype → providers index to extend
            executables: Provider name → executable probed when config is absent
            augroup: Autocommand group the replayed events are fired in
        """
        self.host = host
        self.registry = Registry.build(
            providers,
            filetype_providers=filetype_providers,
            executables=executables,
            generic_providers=generic_providers,
        )
        self.defaults = GlobalDefaults(global_config)
        self.state = TrackingState()
        self.replay_options = AutocmdOptions(group=augroup, modeline=False)
        self._binding: HostBinding | None = None

    @property
    def binding(self) -> HostBinding:
        """Host activation capabilities, probed on first use."""
        if self._binding is None:
            self._binding = probe_host(self.host)
        return self._binding

    def state_of(self, name: str) -> CheckState:
        return self.state.state_of(name)

    def check_server(self, name: str, recheck: bool = False) -> None:
        """Resolve and activate ``name`` unless it was already checked."""
        did_setup = self.state.checked_providers.get(name)
        if did_setup is True or (did_setup is False and not recheck):
            return

        provider = self.registry.get(name)
        try:
            config = resolve_config(provider, self.host.executable, self.defaults)
        except Exception as e:
            notify_error(self.binding, f"{NOTIFY_PREFIX} Failed to configure {name}: {e}")
            self._record(name, False)
            return

        if config is UNAVAILABLE:
            logger.debug("%s unavailable, not activating", name)
            self._record(name, False)
            return

        result = configure_server(self.binding, name, config)
        ok = result.ok
        if ok and result.used_modern:
            ok = enable_server(self.binding, name, self.state)
        self._record(name, ok)

    def check_filetype(self, tag: str, recheck: bool = False) -> None:
        """Schedule activation of every provider for ``tag``, then replay ``FileType``."""
        if self.state.checked_tags.get(tag) and not recheck:
            return
        self.state.checked_tags[tag] = True

        names = self.registry.providers_for(tag)
        if not names:
            return

        logger.debug("Scheduling %d provider(s) for filetype %s", len(names), tag)
        for name in names:
            self.host.schedule(self._deferred_check(name))
        self.host.schedule(lambda: replay_filetype(self.host, tag, self.replay_options))

    def check_generics(self, recheck: bool = False) -> None:
        """Schedule activation of the filetype-independent providers."""
        for name in self.registry.generic_providers:
            self.host.schedule(self._deferred_check(name, recheck))
        self.host.schedule(lambda: replay_all(self.host, BUF_READ_POST, self.replay_options))

    def refresh(self) -> None:
        """Retry every failed provider and replay events for all buffers."""
        # Host capabilities may have changed too (e.g. a plugin was installed).
        self._binding = None
        failed = self.state.failed_providers()
        logger.debug("Refreshing %d failed provider(s)", len(failed))
        for name in failed:
            self.host.schedule(self._deferred_check(name, True))
        self.host.schedule(lambda: replay_all(self.host, (FILETYPE, BUF_READ_POST), self.replay_options))

    def status(self) -> list[ProviderStatus]:
        """Snapshot of every known provider, in registration order."""
        names = list(self.registry.providers)
        names.extend(n for n in self.state.checked_providers if n not in self.registry.providers)
        result = []
        for name in names:
            provider = self.registry.get(name)
            result.append(
                ProviderStatus(
                    name=name,
                    tags=self.registry.tags_for(name),
                    executable=provider.executable,
                    state=self.state.state_of(name),
                    enabled=bool(self.state.enabled_providers.get(name)),
                )
            )
        return result

    def _deferred_check(self, name: str, recheck: bool = False) -> Callable[[], None]:
        def task() -> None:
            self.check_server(name, recheck)

        return task

    def _record(self, name: str, ok: bool) -> None:
        previous = self.state.state_of(name)
        self.state.checked_providers[name] = ok
        logger.debug("%s: %s -> %s", name, previous.value, self.state.state_of(name).value)
