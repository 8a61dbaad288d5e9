"""Tests for core.config: global settings and verity.yaml parsing."""

from __future__ import annotations

import threading

import pytest
import yaml

from verity.core.config import (
    Configuration,
    apply_config_file,
    get_config,
    load_config,
    reset_config,
    set_config,
)
from verity.core.types import ConfigError
from verity.report.adapters import ConsoleAdapter, DefaultAdapter, MarkdownAdapter
from verity.report.listeners import StatisticsListener
from verity.report.observers import JsonObserver
from verity.report.registry import register_adapter


class TestConfiguration:
    def test_defaults(self):
        cfg = Configuration()
        assert cfg.throw_on_failure is True
        assert cfg.tolerance == 1e-6
        assert cfg.max_recursion_depth == 20
        assert cfg.colorize is False
        assert cfg.append_code_line is True
        assert cfg.max_details == 30
        assert isinstance(cfg.adapter, DefaultAdapter)
        assert cfg.listener is None and cfg.observer is None

    def test_clone_is_independent_but_shallow(self):
        cfg = Configuration(listener=StatisticsListener())
        clone = cfg.clone()
        clone.tolerance = 0.5
        assert cfg.tolerance == 1e-6
        assert clone.listener is cfg.listener
        assert clone.adapter is cfg.adapter

    @pytest.mark.parametrize(
        "changes",
        [
            {"tolerance": -1},
            {"tolerance": "small"},
            {"max_recursion_depth": 0},
            {"max_details": 1.5},
            {"adapter": object()},
            {"listener": "console"},
        ],
    )
    def test_validate_rejects(self, changes):
        with pytest.raises(ConfigError):
            Configuration(**changes).validate()


class TestGlobalConfig:
    def test_get_creates_default(self):
        assert isinstance(get_config(), Configuration)

    def test_set_updates_only_given(self):
        set_config(tolerance=0.01, colorize=True)
        cfg = get_config()
        assert cfg.tolerance == 0.01
        assert cfg.colorize is True
        assert cfg.max_recursion_depth == 20

    def test_set_false_is_applied(self):
        set_config(throw_on_failure=False)
        assert get_config().throw_on_failure is False

    def test_invalid_set_keeps_previous(self):
        set_config(tolerance=0.1)
        with pytest.raises(ConfigError):
            set_config(tolerance=-5)
        assert get_config().tolerance == 0.1

    def test_reset(self):
        set_config(max_details=3)
        reset_config()
        assert get_config().max_details == 30

    def test_concurrent_set(self):
        def worker(n):
            for _ in range(50):
                set_config(max_details=n)

        threads = [threading.Thread(target=worker, args=(n,)) for n in range(1, 5)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()
        assert get_config().max_details in (1, 2, 3, 4)


class TestLoadConfig:
    def test_full_file(self, tmp_path):
        path = tmp_path / "verity.yaml"
        path.write_text(
            yaml.dump(
                {
                    "throw_on_failure": False,
                    "tolerance": 0.001,
                    "max_recursion_depth": 8,
                    "colorize": True,
                    "append_code_line": False,
                    "max_details": 5,
                    "adapter": "console",
                    "listener": "statistics",
                    "observer": {"name": "json", "path": str(tmp_path / "out.json")},
                }
            )
        )
        cfg = load_config(path)
        assert cfg.throw_on_failure is False
        assert cfg.tolerance == 0.001
        assert cfg.max_recursion_depth == 8
        assert cfg.max_details == 5
        assert isinstance(cfg.adapter, ConsoleAdapter)
        assert isinstance(cfg.listener, StatisticsListener)
        assert isinstance(cfg.observer, JsonObserver)
        assert cfg.observer.path == tmp_path / "out.json"

    def test_adapter_with_options(self, tmp_path):
        path = tmp_path / "verity.yaml"
        report = tmp_path / "report.md"
        path.write_text(f"adapter:\n  name: markdown\n  path: {report}\n")
        cfg = load_config(path)
        assert isinstance(cfg.adapter, MarkdownAdapter)
        assert cfg.adapter.path == report

    def test_registered_adapter(self, tmp_path):
        class HostAdapter(DefaultAdapter):
            pass

        register_adapter("host", HostAdapter)
        path = tmp_path / "verity.yaml"
        path.write_text("adapter: host\n")
        assert isinstance(load_config(path).adapter, HostAdapter)

    def test_load_missing_file(self, tmp_path):
        with pytest.raises(ConfigError, match="not found"):
            load_config(tmp_path / "nonexistent.yaml")

    def test_load_invalid_yaml(self, tmp_path):
        bad = tmp_path / "bad.yaml"
        bad.write_text("[ invalid: yaml: {")
        with pytest.raises(ConfigError, match="Failed to parse"):
            load_config(bad)

    def test_load_non_dict(self, tmp_path):
        bad = tmp_path / "list.yaml"
        bad.write_text("- item1\n- item2\n")
        with pytest.raises(ConfigError, match="Expected a YAML mapping"):
            load_config(bad)

    def test_load_empty_file(self, tmp_path):
        empty = tmp_path / "empty.yaml"
        empty.write_text("")
        cfg = load_config(empty)
        assert cfg.tolerance == 1e-6
        assert isinstance(cfg.adapter, DefaultAdapter)

    def test_unknown_adapter(self, tmp_path):
        path = tmp_path / "verity.yaml"
        path.write_text("adapter: teletype\n")
        with pytest.raises(ConfigError, match="Unknown adapter 'teletype'"):
            load_config(path)

    def test_bad_component_shape(self, tmp_path):
        path = tmp_path / "verity.yaml"
        path.write_text("listener: [1, 2]\n")
        with pytest.raises(ConfigError, match="listener must be"):
            load_config(path)

    def test_invalid_value(self, tmp_path):
        path = tmp_path / "verity.yaml"
        path.write_text("max_details: -1\n")
        with pytest.raises(ConfigError, match="max_details"):
            load_config(path)

    def test_unknown_key_warns(self, tmp_path, caplog):
        path = tmp_path / "verity.yaml"
        path.write_text("colourise: true\n")
        with caplog.at_level("WARNING", logger="verity.core.config"):
            load_config(path)
        assert "colourise" in caplog.text

    def test_apply_config_file(self, tmp_path):
        path = tmp_path / "verity.yaml"
        path.write_text("tolerance: 0.5\n")
        apply_config_file(path)
        assert get_config().tolerance == 0.5
