from __future__ import annotations

import os
from pathlib import Path

import pytest

from bucket_connector.config import (
    DEFAULT_BUCKET_NAME,
    Settings,
    config_path,
    connection_config,
    env_name_for,
    init_default_configs,
    load_settings,
    read_env_file,
)


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    for name in list(os.environ):
        if name.startswith("MEDIA_"):
            monkeypatch.delenv(name, raising=False)


def test_env_name_for_normalizes_scope_and_key() -> None:
    assert env_name_for("media.bucket_name") == "MEDIA_BUCKET_NAME"
    assert env_name_for("media-eu.bucket_key") == "MEDIA_EU_BUCKET_KEY"


def test_get_str_resolution_order(monkeypatch: pytest.MonkeyPatch) -> None:
    settings = Settings()
    settings.set_default("media.bucket_name", "default-bucket")
    assert settings.get_str("media.bucket_name") == "default-bucket"

    monkeypatch.setenv("MEDIA_BUCKET_NAME", "env-bucket")
    assert settings.get_str("media.bucket_name") == "env-bucket"

    settings.set("media.bucket_name", "explicit-bucket")
    assert settings.get_str("media.bucket_name") == "explicit-bucket"


def test_get_str_unknown_key_is_empty() -> None:
    assert Settings().get_str("media.nothing") == ""


def test_get_bool_and_float() -> None:
    settings = Settings(values={"media.secure": "Yes", "media.timeout": "2.5", "media.bad": "x"})

    assert settings.get_bool("media.secure") is True
    assert settings.get_bool("media.missing") is False
    assert settings.get_float("media.timeout", 5.0) == 2.5
    assert settings.get_float("media.bad", 5.0) == 5.0
    assert settings.get_float("media.missing", 5.0) == 5.0


def test_init_default_configs_registers_scoped_defaults() -> None:
    settings = Settings()
    init_default_configs(settings, "media")

    assert settings.get_str(config_path("media", "bucket_name")) == DEFAULT_BUCKET_NAME
    assert settings.get_str(config_path("media", "bucket_region")) == "us-west-1"
    assert settings.get_str(config_path("other", "bucket_name")) == ""


def test_connection_config_reads_scope(monkeypatch: pytest.MonkeyPatch) -> None:
    settings = Settings()
    init_default_configs(settings, "media")
    monkeypatch.setenv("MEDIA_BUCKET_ENDPOINT", "http://127.0.0.1:9000")
    monkeypatch.setenv("MEDIA_BUCKET_SECURE", "false")

    cfg = connection_config(settings, "media")

    assert cfg.endpoint == "http://127.0.0.1:9000"
    assert cfg.secure is False
    assert cfg.access_key == "ABCDE"
    assert cfg.session_token == ""
    assert cfg.timeout == 5.0


def test_read_env_file_parses_pairs(tmp_path: Path) -> None:
    env = tmp_path / ".env"
    env.write_text(
        "\ufeff# comentário\nMEDIA_BUCKET_NAME = new-bucket\nlinha invalida\n\nMEDIA_BUCKET_TOKEN=a=b\n=sem-nome\n",
        encoding="utf-8",
    )

    assert read_env_file(env) == {"MEDIA_BUCKET_NAME": "new-bucket", "MEDIA_BUCKET_TOKEN": "a=b"}


def test_read_env_file_missing_is_empty(tmp_path: Path) -> None:
    assert read_env_file(tmp_path / "absent.env") == {}


def test_load_settings_exports_env_file_over_environment(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("MEDIA_BUCKET_NAME", "old")
    monkeypatch.setenv("MEDIA_BUCKET_REGION", "old")
    env = tmp_path / "media.env"
    env.write_text("MEDIA_BUCKET_NAME=new-bucket\nMEDIA_BUCKET_REGION=sa-east-1\n", encoding="utf-8")

    settings = load_settings(env)

    assert settings.get_str("media.bucket_name") == "new-bucket"
    assert os.environ["MEDIA_BUCKET_REGION"] == "sa-east-1"


def test_load_settings_defaults_to_working_directory(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("MEDIA_BUCKET_NAME", "old")
    (tmp_path / ".env").write_text("MEDIA_BUCKET_NAME=from-cwd\n", encoding="utf-8")
    monkeypatch.chdir(tmp_path)

    settings = load_settings()

    assert settings.get_str("media.bucket_name") == "from-cwd"


def test_load_settings_missing_file_is_silent(tmp_path: Path) -> None:
    settings = load_settings(tmp_path / "absent.env")

    assert isinstance(settings, Settings)
