"""Resolve a provider's effective configuration."""

from __future__ import annotations

import copy
from collections.abc import Mapping
from typing import Any, Callable

from .models import Flag, Producer, ProviderDef, StaticTable


class _Unavailable:
    """Sentinel: the provider has no usable configuration."""

    _instance: _Unavailable | None = None

    def __new__(cls) -> _Unavailable:
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __bool__(self) -> bool:
        return False

    def __repr__(self) -> str:
        return "UNAVAILABLE"


UNAVAILABLE = _Unavailable()


def deep_merge(base: Mapping[str, Any], override: Mapping[str, Any]) -> dict[str, Any]:
    """
    Merge ``override`` over ``base`` recursively.

    Nested mappings are merged key by key; any other value (lists included)
    from ``override`` replaces the one in ``base``. Inputs are not mutated.
    """
    result: dict[str, Any] = copy.deepcopy(dict(base))
    for key, value in override.items():
        current = result.get(key)
        if isinstance(current, Mapping) and isinstance(value, Mapping):
            result[key] = deep_merge(current, value)
        else:
            result[key] = copy.deepcopy(value)
    return result


class GlobalDefaults:
    """
    Holder for the configuration shared by every provider.

    A producer is called on first use and replaced by its result, so later
    providers reuse the computed table.
    """

    def __init__(self, value: Mapping[str, Any] | Callable[[], Mapping[str, Any]] | None = None):
        self._value = value if value is not None else {}

    def get(self) -> Mapping[str, Any]:
        if callable(self._value):
            self._value = self._value() or {}
        return self._value


def resolve_config(
    provider: ProviderDef,
    executable_exists: Callable[[str], bool],
    defaults: GlobalDefaults,
) -> dict[str, Any] | _Unavailable:
    """
    Compute the configuration to activate ``provider`` with.

    Producers are called, tables used as-is, flags map to ``{}``/unavailable,
    and an absent config falls back to probing the declared executable.
    A producer returning anything but a mapping marks the provider unavailable.
    Exceptions raised by a producer propagate to the caller.

    Returns:
        The provider table merged over the global defaults, or UNAVAILABLE
    """
    source = provider.config
    table: Mapping[str, Any] | None

    if isinstance(source, Producer):
        produced = source.fn()
        table = produced if isinstance(produced, Mapping) else None
    elif isinstance(source, StaticTable):
        table = source.value
    elif isinstance(source, Flag):
        table = {} if source.enabled else None
    elif provider.executable and executable_exists(provider.executable):
        table = {}
    else:
        table = None

    if table is None:
        return UNAVAILABLE
    return deep_merge(defaults.get(), table)
