"""
Host capability probe.

Hosts differ in which activation interface they offer. The probe runs once
and yields a ``HostBinding`` the adapter dispatches on, instead of
re-inspecting the host on every activation.
"""

from __future__ import annotations

import inspect
import logging
from enum import Enum
from typing import Any, Callable

from .host import LogLevel

logger = logging.getLogger(__name__)

_NOT_LOADED = object()


class BindingKind(str, Enum):
    """Which activation interface the host exposes."""

    MODERN_FUNCTION = "modern-function"
    MODERN_CALLABLE = "modern-callable"
    MODERN_TABLE = "modern-table"
    LEGACY = "legacy"
    NONE = "none"

    @property
    def is_modern(self) -> bool:
        return self in (BindingKind.MODERN_FUNCTION, BindingKind.MODERN_CALLABLE, BindingKind.MODERN_TABLE)


class HostBinding:
    """Resolved activation capabilities of one host."""

    def __init__(
        self,
        kind: BindingKind,
        *,
        configure: Any = None,
        enable: Callable[[str], Any] | None = None,
        notify: Callable[[str, LogLevel], Any] | None = None,
        legacy_loader: Callable[[], Any] | None = None,
    ):
        self.kind = kind
        self.configure = configure
        self.enable = enable
        self.notify = notify
        self._legacy_loader = legacy_loader
        self._legacy: Any = _NOT_LOADED

    def legacy(self) -> Any | None:
        """The legacy per-provider namespace, looked up on first use."""
        if self._legacy is _NOT_LOADED:
            self._legacy = _load_legacy(self._legacy_loader)
        return self._legacy

    def __repr__(self) -> str:
        return f"HostBinding(kind={self.kind.value!r})"


def _load_legacy(loader: Callable[[], Any] | None) -> Any | None:
    # Best effort: a host without the legacy namespace is not an error.
    if loader is None:
        return None
    try:
        return loader()
    except Exception as e:
        logger.debug("Legacy configuration namespace unavailable: %s", e)
        return None


def _optional_callable(host: Any, attr: str) -> Callable[..., Any] | None:
    value = getattr(host, attr, None)
    return value if callable(value) else None


def probe_host(host: Any) -> HostBinding:
    """
    Inspect ``host`` and classify its activation interface.

    Precedence: a plain configure function, then a callable configuration
    object, then a configuration table of per-name entries, then the legacy
    namespace returned by ``require_legacy()``.
    """
    config_api = getattr(host, "lsp_config", None)
    enable = _optional_callable(host, "lsp_enable")
    notify = _optional_callable(host, "notify")
    legacy_loader = _optional_callable(host, "require_legacy")

    common = {"enable": enable, "notify": notify, "legacy_loader": legacy_loader}

    if inspect.isfunction(config_api) or inspect.ismethod(config_api) or inspect.isbuiltin(config_api):
        binding = HostBinding(BindingKind.MODERN_FUNCTION, configure=config_api, **common)
    elif callable(config_api):
        binding = HostBinding(BindingKind.MODERN_CALLABLE, configure=config_api, **common)
    elif config_api is not None:
        # Per-name entries, as mapping keys or attributes (e.g. a module).
        binding = HostBinding(BindingKind.MODERN_TABLE, configure=config_api, **common)
    else:
        binding = HostBinding(BindingKind.NONE, **common)
        if binding.legacy() is not None:
            binding.kind = BindingKind.LEGACY

    logger.debug("Probed host activation interface: %s", binding.kind.value)
    return binding
