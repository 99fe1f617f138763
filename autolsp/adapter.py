"""
Activation adapter: hand a resolved configuration to the host.

Every call into the host is guarded; a failure is reported once through the
host's notifier and turned into a ``False`` result, never an exception.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any, Callable

from .capabilities import BindingKind, HostBinding
from .host import LogLevel
from .models import TrackingState

logger = logging.getLogger(__name__)

NOTIFY_PREFIX = "[autolsp]"


@dataclass(frozen=True)
class ActivationResult:
    """Outcome of ``configure_server``."""

    ok: bool
    used_modern: bool


def notify_error(binding: HostBinding, message: str) -> None:
    """Show ``message`` to the user if the host can, and log it regardless."""
    logger.warning(message)
    if binding.notify is None:
        return
    try:
        binding.notify(message, LogLevel.ERROR)
    except Exception:
        logger.exception("Host notify failed")


def _lookup(namespace: Any, name: str) -> Any:
    if isinstance(namespace, Mapping):
        return namespace.get(name)
    return getattr(namespace, name, None)


def _setup_of(entry: Any) -> Callable[..., Any] | None:
    setup = _lookup(entry, "setup") if entry is not None else None
    return setup if callable(setup) else None


def _attempt(binding: HostBinding, name: str, fn: Callable[..., Any], *args: Any) -> bool:
    try:
        fn(*args)
    except Exception as e:
        notify_error(binding, f"{NOTIFY_PREFIX} Failed to configure {name}: {e}")
        return False
    return True


def configure_server(binding: HostBinding, name: str, config: dict[str, Any]) -> ActivationResult:
    """
    Configure ``name`` through the best interface the host offers.

    Returns:
        Whether configuration succeeded, and whether a modern interface
        handled it (only then is a separate enable step needed)
    """
    kind = binding.kind

    if kind in (BindingKind.MODERN_FUNCTION, BindingKind.MODERN_CALLABLE):
        return ActivationResult(_attempt(binding, name, binding.configure, name, config), True)

    if kind is BindingKind.MODERN_TABLE:
        entry = _lookup(binding.configure, name)
        setup = _setup_of(entry)
        if setup is not None:
            return ActivationResult(_attempt(binding, name, setup, config), True)
        if callable(entry):
            return ActivationResult(_attempt(binding, name, entry, config), True)
        # No per-name entry: fall through to the legacy namespace.

    legacy = binding.legacy()
    if legacy is None:
        return ActivationResult(False, False)

    setup = _setup_of(_lookup(legacy, name))
    if setup is None:
        logger.debug("Legacy namespace has no setup for %s", name)
        return ActivationResult(False, False)

    return ActivationResult(_attempt(binding, name, setup, config), False)


def enable_server(binding: HostBinding, name: str, state: TrackingState) -> bool:
    """
    Register ``name`` for automatic enablement, at most once per engine.

    A host without an enable primitive has nothing to register against, so
    the provider counts as enabled.
    """
    if state.enabled_providers.get(name):
        return True

    if binding.enable is None:
        state.enabled_providers[name] = True
        return True

    try:
        binding.enable(name)
    except Exception as e:
        notify_error(binding, f"{NOTIFY_PREFIX} Failed to enable {name}: {e}")
        return False

    state.enabled_providers[name] = True
    return True
