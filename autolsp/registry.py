"""
Provider registry: definitions plus the derived tag → providers index.

The index is built once, at construction. Malformed definitions are skipped
without complaint so a single bad entry never blocks the rest.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from typing import Any

from .models import ProviderDef

logger = logging.getLogger(__name__)


def parse_definitions(
    raw: Mapping[str, Any],
    executables: Mapping[str, str] | None = None,
) -> dict[str, ProviderDef]:
    """
    Normalize raw provider definitions.

    Args:
        raw: Provider name → definition (ProviderDef, mapping, callable, bool, or None)
        executables: Provider name → executable, used when a definition names none

    Returns:
        Provider name → ProviderDef, malformed entries omitted
    """
    executables = executables or {}
    providers: dict[str, ProviderDef] = {}
    for name, value in raw.items():
        provider = ProviderDef.from_raw(name, value, executable=executables.get(name))
        if provider is None:
            logger.debug("Skipping malformed provider definition %r", name)
            continue
        if provider.executable is None and name in executables:
            provider = ProviderDef(
                name=provider.name,
                config=provider.config,
                executable=executables[name],
                tags=provider.tags,
            )
        providers[name] = provider
    return providers


def build_tag_index(
    providers: Iterable[ProviderDef],
    base: Mapping[str, Iterable[str]] | None = None,
) -> dict[str, list[str]]:
    """
    Map each tag to the providers that declare it.

    Order is first-seen; a provider appears at most once per tag. ``base``
    seeds the index (e.g. the host's stock filetype mapping) and is copied,
    never mutated.
    """
    index: dict[str, list[str]] = {}
    for tag, names in (base or {}).items():
        bucket = index.setdefault(tag, [])
        for name in names:
            if name not in bucket:
                bucket.append(name)

    for provider in providers:
        for tag in provider.tags:
            bucket = index.setdefault(tag, [])
            if provider.name not in bucket:
                bucket.append(provider.name)
    return index


@dataclass
class Registry:
    """Provider definitions and the indexes derived from them."""

    providers: dict[str, ProviderDef] = field(default_factory=dict)
    tag_index: dict[str, list[str]] = field(default_factory=dict)
    generic_providers: list[str] = field(default_factory=list)

    @classmethod
    def build(
        cls,
        definitions: Mapping[str, Any],
        *,
        filetype_providers: Mapping[str, Iterable[str]] | None = None,
        executables: Mapping[str, str] | None = None,
        generic_providers: Iterable[str] = (),
    ) -> Registry:
        generic = list(dict.fromkeys(generic_providers))
        providers = parse_definitions(definitions, executables)
        # Providers only known through the base index or the generic list
        # still need an entry so their executable can be probed.
        for name in _referenced_names(filetype_providers, generic):
            if name not in providers:
                providers[name] = ProviderDef(name=name, executable=(executables or {}).get(name))
        return cls(
            providers=providers,
            tag_index=build_tag_index(providers.values(), base=filetype_providers),
            generic_providers=generic,
        )

    def get(self, name: str) -> ProviderDef:
        """Look up a provider, treating unknown names as config-less."""
        return self.providers.get(name) or ProviderDef(name=name)

    def providers_for(self, tag: str) -> list[str]:
        return list(self.tag_index.get(tag, ()))

    def tags_for(self, name: str) -> tuple[str, ...]:
        return tuple(tag for tag, names in self.tag_index.items() if name in names)


def _referenced_names(
    filetype_providers: Mapping[str, Iterable[str]] | None,
    generic_providers: list[str],
) -> list[str]:
    names: list[str] = []
    for tag_names in (filetype_providers or {}).values():
        names.extend(tag_names)
    names.extend(generic_providers)
    return list(dict.fromkeys(names))
