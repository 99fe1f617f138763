from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from .models import Flag, ProviderDef, StaticTable

# Keys describing the provider itself rather than its server configuration
_META_KEYS = {"enabled", "executable"}


@dataclass
class Settings:
    """Engine construction arguments read from a settings file."""

    providers: dict[str, ProviderDef] = field(default_factory=dict)
    global_config: dict[str, Any] = field(default_factory=dict)
    generic_providers: list[str] = field(default_factory=list)
    filetype_providers: dict[str, list[str]] = field(default_factory=dict)

    def engine_kwargs(self) -> dict[str, Any]:
        return {
            "providers": dict(self.providers),
            "global_config": dict(self.global_config),
            "generic_providers": list(self.generic_providers),
            "filetype_providers": {k: list(v) for k, v in self.filetype_providers.items()},
        }


def _coerce_dict(value: Any) -> dict[str, Any]:
    return value if isinstance(value, dict) else {}


def _coerce_str_list(value: Any) -> list[str]:
    if not isinstance(value, list):
        return []
    return [str(v).strip() for v in value if str(v).strip()]


def _provider_from_table(name: str, raw: dict[str, Any]) -> ProviderDef:
    executable = raw.get("executable")
    executable_str = str(executable).strip() if isinstance(executable, str) else None
    if executable_str == "":
        executable_str = None

    config = {k: v for k, v in raw.items() if k not in _META_KEYS}
    enabled = raw.get("enabled")
    tags = tuple(_coerce_str_list(raw.get("filetypes")))

    if enabled is False:
        source: Any = Flag(False)
    elif set(config) - {"filetypes"}:
        source = StaticTable(config)
    elif enabled is True:
        source = StaticTable(config) if config else Flag(True)
    else:
        source = None

    return ProviderDef(name=name, config=source, executable=executable_str, tags=tags)


def loads_settings(text: str) -> Settings:
    """
    Parse settings from TOML text.

    The schema is small: provider tables are data, activation is code.
    Non-table provider entries are skipped.
    """
    import tomllib

    data = tomllib.loads(text)

    providers_raw = data.get("providers", {})
    if not isinstance(providers_raw, dict):
        raise ValueError("providers must be a table")

    providers: dict[str, ProviderDef] = {}
    for name, raw in providers_raw.items():
        if not isinstance(raw, dict):
            continue
        providers[name] = _provider_from_table(name, raw)

    generic = data.get("generic", [])
    if not isinstance(generic, list):
        raise ValueError("generic must be a list of provider names")

    filetypes = {
        str(tag): _coerce_str_list(names)
        for tag, names in _coerce_dict(data.get("filetypes")).items()
    }

    return Settings(
        providers=providers,
        global_config=_coerce_dict(data.get("defaults")),
        generic_providers=_coerce_str_list(generic),
        filetype_providers=filetypes,
    )


def load_settings(path: Path) -> Settings:
    """Load settings from a TOML file."""
    return loads_settings(path.read_text(encoding="utf-8"))
