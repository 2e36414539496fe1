"""Tests for configuration loading."""

from __future__ import annotations

from pathlib import Path

import pytest

from spendboard import _resolve_config
from spendboard import config as spendboard_config
from spendboard.config import BaseConfig, DevConfig, _env_bool


@pytest.mark.parametrize(
    ("raw", "expected"),
    [("1", True), ("true", True), (" Yes ", True), ("on", True), ("0", False), ("no", False)],
)
def test_env_bool(monkeypatch, raw, expected):
    monkeypatch.setenv("SPENDBOARD_FLAG", raw)

    assert _env_bool("SPENDBOARD_FLAG") is expected


def test_env_bool_default(monkeypatch):
    monkeypatch.delenv("SPENDBOARD_FLAG", raising=False)

    assert _env_bool("SPENDBOARD_FLAG", default=True) is True


def test_defaults_build_sqlite_url_in_data_dir(tmp_path, monkeypatch):
    monkeypatch.setenv("SPENDBOARD_DATA_DIR", str(tmp_path / "data"))
    monkeypatch.delenv("SPENDBOARD_DATABASE_URL", raising=False)
    monkeypatch.delenv("SPENDBOARD_API_PREFIX", raising=False)

    config = BaseConfig()

    assert config.DATA_DIR == (tmp_path / "data").resolve()
    assert config.DATA_DIR.is_dir()
    assert config.DATABASE_URL == f"sqlite:///{config.DATA_DIR / 'spendboard.db'}"
    assert config.API_PREFIX == "/api"
    assert config.sqlalchemy_engine_options() == {"connect_args": {"check_same_thread": False}}


def test_environment_overrides(tmp_path, monkeypatch):
    monkeypatch.setenv("SPENDBOARD_DATA_DIR", str(tmp_path))
    monkeypatch.setenv("SPENDBOARD_DATABASE_URL", "postgresql://localhost/spendboard")
    monkeypatch.setenv("SPENDBOARD_API_PREFIX", "/v1")

    config = BaseConfig()

    assert config.DATABASE_URL == "postgresql://localhost/spendboard"
    assert config.API_PREFIX == "/v1"
    assert config.sqlalchemy_engine_options() == {}


def test_production_requires_secret_key(tmp_path, monkeypatch):
    monkeypatch.setenv("SPENDBOARD_DATA_DIR", str(tmp_path))
    monkeypatch.setenv("SPENDBOARD_DEV_MODE", "false")
    monkeypatch.delenv("SPENDBOARD_SECRET_KEY", raising=False)

    with pytest.raises(ValueError, match="SPENDBOARD_SECRET_KEY"):
        BaseConfig()

    monkeypatch.setenv("SPENDBOARD_SECRET_KEY", "s3cret")
    assert BaseConfig().SECRET_KEY == "s3cret"


def test_test_config_overrides(tmp_path, monkeypatch):
    monkeypatch.setenv("SPENDBOARD_DATA_DIR", str(tmp_path))

    config = spendboard_config.TestConfig(database_url="sqlite:///other.db", data_dir=tmp_path / "x")

    assert config.TESTING is True
    assert config.DATABASE_URL == "sqlite:///other.db"
    assert config.DATA_DIR == Path(tmp_path / "x")


def test_resolve_config_names():
    assert _resolve_config("development") is DevConfig
    assert _resolve_config("TESTING") is spendboard_config.TestConfig
    assert _resolve_config("unknown") is BaseConfig
    assert _resolve_config(None) is BaseConfig
