import json

import pytest

from pathsel.config import (
    CONFIG_FILENAME,
    PathselConfig,
    default_use_default_excludes,
    load_config,
    save_config,
)


def test_save_and_load(tmp_path):
    config = PathselConfig(includes=["**/*.py"], excludes=["build/"], use_default_excludes=True)
    path = save_config(config, tmp_path)

    assert path == tmp_path.resolve() / CONFIG_FILENAME
    assert path.read_text(encoding="utf-8").endswith("\n")
    assert load_config(tmp_path) == config


def test_missing_keys_use_defaults(tmp_path):
    (tmp_path / CONFIG_FILENAME).write_text("{}")
    assert load_config(tmp_path) == PathselConfig()


def test_missing_file(tmp_path):
    with pytest.raises(FileNotFoundError, match="pathsel init"):
        load_config(tmp_path)


@pytest.mark.parametrize("payload", [[], {"includes": "*.py"}, {"excludes": [1]}])
def test_invalid_file(tmp_path, payload):
    (tmp_path / CONFIG_FILENAME).write_text(json.dumps(payload))
    with pytest.raises(ValueError):
        load_config(tmp_path)


@pytest.mark.parametrize("value, expected", [("1", True), ("Yes", True), ("off", False), ("", False)])
def test_default_excludes_from_env(monkeypatch, value, expected):
    monkeypatch.setenv("PATHSEL_DEFAULT_EXCLUDES", value)
    assert default_use_default_excludes() is expected
