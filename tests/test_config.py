# tests/test_config.py
import pytest

from ledger.config import ServerSettings
from utils.config import load_cfg


def test_defaults():
    s = ServerSettings()
    assert (s.host, s.port) == ("127.0.0.1", 8181)
    assert s.read_buffer_size == 16
    assert s.max_amount_len == 10
    assert s.initial_balance == 0.0


def test_from_cfg_missing_section_uses_defaults():
    assert ServerSettings.from_cfg({}) == ServerSettings()
    assert ServerSettings.from_cfg(None) == ServerSettings()


def test_load_cfg_resolves_env_placeholders(tmp_path, monkeypatch):
    monkeypatch.setenv("TEST_BALANCE_PORT", "9191")
    cfg_file = tmp_path / "config.yaml"
    cfg_file.write_text(
        "server:\n"
        "  host: 127.0.0.2\n"
        "  port: ${TEST_BALANCE_PORT}\n"
        "  initial_balance: 12.5\n",
        encoding="utf-8",
    )
    s = ServerSettings.from_cfg(load_cfg(str(cfg_file)))
    assert s.host == "127.0.0.2"
    assert s.port == 9191
    assert s.initial_balance == 12.5
    assert s.read_buffer_size == 16


def test_unset_placeholder_falls_back_to_default(tmp_path, monkeypatch):
    monkeypatch.delenv("TEST_BALANCE_UNSET", raising=False)
    cfg_file = tmp_path / "config.yaml"
    cfg_file.write_text("server:\n  port: ${TEST_BALANCE_UNSET}\n", encoding="utf-8")
    assert ServerSettings.from_cfg(load_cfg(str(cfg_file))).port == 8181


def test_empty_config_file(tmp_path):
    cfg_file = tmp_path / "config.yaml"
    cfg_file.write_text("", encoding="utf-8")
    assert load_cfg(str(cfg_file)) == {}


def test_repo_config_matches_defaults():
    assert ServerSettings.from_cfg(load_cfg()) == ServerSettings()


@pytest.mark.parametrize("kwargs", [
    {"read_buffer_size": 6},
    {"max_amount_len": 0},
    {"port": 70000},
    {"initial_balance": float("nan")},
])
def test_invalid_settings(kwargs):
    with pytest.raises(ValueError):
        ServerSettings(**kwargs)
