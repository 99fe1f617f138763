"""Data models for providers and their tracking state."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable, Union


@dataclass(frozen=True)
class StaticTable:
    """A configuration table given verbatim."""

    value: dict[str, Any]


@dataclass(frozen=True)
class Producer:
    """A zero-argument callable that builds the configuration table."""

    fn: Callable[[], dict[str, Any]]


@dataclass(frozen=True)
class Flag:
    """True means "use the defaults", False means "never activate"."""

    enabled: bool


ConfigSource = Union[StaticTable, Producer, Flag]


class CheckState(str, Enum):
    """Outcome of the activation check for one provider."""

    UNCHECKED = "unchecked"
    SUCCEEDED = "succeeded"
    FAILED = "failed"


@dataclass(frozen=True)
class ProviderDef:
    """A named language server that can be lazily activated."""

    name: str
    config: ConfigSource | None = None
    executable: str | None = None
    tags: tuple[str, ...] = ()

    @classmethod
    def from_raw(cls, name: str, raw: Any, executable: str | None = None) -> ProviderDef | None:
        """
        Build a definition from the loose shapes users write.

        A mapping is a config table whose ``filetypes`` key lists its tags.
        Callables become producers, booleans become flags and ``None`` means
        the config is absent. Anything else is malformed and yields ``None``.
        """
        if isinstance(raw, ProviderDef):
            return raw
        if isinstance(raw, Mapping):
            filetypes = raw.get("filetypes") or ()
            tags = tuple(str(ft) for ft in filetypes) if isinstance(filetypes, (list, tuple)) else ()
            return cls(name=name, config=StaticTable(dict(raw)), executable=executable, tags=tags)
        if isinstance(raw, bool):
            return cls(name=name, config=Flag(raw), executable=executable)
        if callable(raw):
            return cls(name=name, config=Producer(raw), executable=executable)
        if raw is None:
            return cls(name=name, executable=executable)
        return None


@dataclass
class TrackingState:
    """
    Per-engine record of what has been checked.

    Entries are only ever added or flipped, never removed.
    """

    # name -> True (succeeded) / False (failed); missing means unchecked
    checked_providers: dict[str, bool] = field(default_factory=dict)
    checked_tags: dict[str, bool] = field(default_factory=dict)
    enabled_providers: dict[str, bool] = field(default_factory=dict)

    def state_of(self, name: str) -> CheckState:
        did_setup = self.checked_providers.get(name)
        if did_setup is None:
            return CheckState.UNCHECKED
        return CheckState.SUCCEEDED if did_setup else CheckState.FAILED

    def failed_providers(self) -> list[str]:
        return [name for name, ok in self.checked_providers.items() if not ok]


@dataclass(frozen=True)
class ProviderStatus:
    """Read-only view of one provider for reporting."""

    name: str
    tags: tuple[str, ...]
    executable: str | None
    state: CheckState
    enabled: bool

    def to_dict(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "tags": list(self.tags),
            "executable": self.executable,
            "state": self.state.value,
            "enabled": self.enabled,
        }
