"""Tests for configuration resolution."""

from __future__ import annotations

import pytest

from autolsp.models import Flag, Producer, ProviderDef, StaticTable
from autolsp.resolve import UNAVAILABLE, GlobalDefaults, deep_merge, resolve_config


def _never(_command: str) -> bool:
    return False


def _always(_command: str) -> bool:
    return True


class TestDeepMerge:
    def test_override_wins_and_nested_tables_merge(self):
        base = {"a": 1, "nested": {"x": 1, "y": 2}, "list": [1, 2]}
        override = {"a": 2, "nested": {"y": 3}, "list": [9]}

        merged = deep_merge(base, override)

        assert merged == {"a": 2, "nested": {"x": 1, "y": 3}, "list": [9]}

    def test_inputs_are_not_mutated(self):
        base = {"nested": {"x": 1}}
        override = {"nested": {"y": 2}}

        merged = deep_merge(base, override)
        merged["nested"]["z"] = 3

        assert base == {"nested": {"x": 1}}
        assert override == {"nested": {"y": 2}}


class TestGlobalDefaults:
    def test_producer_is_memoized(self):
        calls = []

        def build():
            calls.append(1)
            return {"capabilities": {}}

        defaults = GlobalDefaults(build)
        assert calls == []

        assert defaults.get() == {"capabilities": {}}
        assert defaults.get() == {"capabilities": {}}
        assert calls == [1]

    def test_none_means_empty(self):
        assert GlobalDefaults().get() == {}


class TestResolveConfig:
    def test_producer_is_called(self):
        provider = ProviderDef(name="p", config=Producer(lambda: {"cmd": ["p"]}))
        assert resolve_config(provider, _never, GlobalDefaults()) == {"cmd": ["p"]}

    def test_producer_returning_none_is_unavailable(self):
        provider = ProviderDef(name="p", config=Producer(lambda: None))
        assert resolve_config(provider, _always, GlobalDefaults()) is UNAVAILABLE

    def test_producer_errors_propagate(self):
        def boom():
            raise RuntimeError("boom")

        with pytest.raises(RuntimeError):
            resolve_config(ProviderDef(name="p", config=Producer(boom)), _always, GlobalDefaults())

    def test_static_table_merged_over_defaults(self):
        provider = ProviderDef(name="p", config=StaticTable({"settings": {"b": 2}}))
        defaults = GlobalDefaults({"settings": {"a": 1}, "single_file_support": True})

        config = resolve_config(provider, _never, defaults)

        assert config == {"settings": {"a": 1, "b": 2}, "single_file_support": True}

    def test_flags(self):
        defaults = GlobalDefaults({"x": 1})
        assert resolve_config(ProviderDef(name="p", config=Flag(True)), _never, defaults) == {"x": 1}
        assert resolve_config(ProviderDef(name="p", config=Flag(False)), _always, defaults) is UNAVAILABLE

    def test_absent_config_depends_on_executable(self):
        provider = ProviderDef(name="p", executable="plsp")
        assert resolve_config(provider, _always, GlobalDefaults()) == {}
        assert resolve_config(provider, _never, GlobalDefaults()) is UNAVAILABLE

    def test_absent_config_without_executable_is_unavailable(self):
        assert resolve_config(ProviderDef(name="p"), _always, GlobalDefaults()) is UNAVAILABLE

    def test_executable_not_probed_when_config_given(self):
        probed = []

        def probe(command: str) -> bool:
            probed.append(command)
            return False

        provider = ProviderDef(name="p", config=StaticTable({}), executable="plsp")
        assert resolve_config(provider, probe, GlobalDefaults()) == {}
        assert probed == []

    def test_unavailable_is_falsy_singleton(self):
        assert not UNAVAILABLE
        assert repr(UNAVAILABLE) == "UNAVAILABLE"
