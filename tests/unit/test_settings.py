from __future__ import annotations

from pathlib import Path

import pytest
from pydantic import ValidationError

from extractpoints.exceptions import SettingsError
from extractpoints.settings import Settings, _is_missing_settings_error, ensure_env_file_exists, get_settings


def test_settings_load_from_env_file(tmp_path: Path, monkeypatch) -> None:
    env_file = tmp_path / ".env"
    env_payload = (
        f"APP_ENV={'test'}\n"
        f"LOG_LEVEL={'DEBUG'}\n"
        f"LOG_JSON={'false'}\n"
        f"RESOLVER_CONCURRENCY={4}\n"
        f"ISOLATE_MISSING_OCR={'true'}\n"
        f"RESOLVER_ENTRY_POINT_GROUP={'acme.resolvers'}\n"
        f"CHECKPOINT_DIR={'conf'}\n"
    )
    env_file.write_text(
        env_payload,
        encoding="utf-8",
    )
    monkeypatch.chdir(tmp_path)

    settings = Settings()

    assert settings.app_env == "test"
    assert settings.log_level == "DEBUG"
    assert settings.log_json is False
    assert settings.resolver_concurrency == 4
    assert settings.isolate_missing_ocr is True
    assert settings.resolver_entry_point_group == "acme.resolvers"
    assert settings.checkpoint_dir == "conf"


def test_settings_defaults(tmp_path: Path, monkeypatch) -> None:
    monkeypatch.chdir(tmp_path)

    settings = Settings()

    assert settings.resolver_concurrency == 1
    assert settings.isolate_missing_ocr is False
    assert settings.resolver_entry_point_group == "extractpoints.resolvers"
    assert settings.results_dir == "results"


def test_settings_rejects_non_positive_concurrency(monkeypatch) -> None:
    monkeypatch.setenv("RESOLVER_CONCURRENCY", "0")

    with pytest.raises(ValidationError):
        Settings()


def test_settings_accept_field_names() -> None:
    settings = Settings(resolver_concurrency=3, isolate_missing_ocr=True)

    assert settings.resolver_concurrency == 3
    assert settings.isolate_missing_ocr is True


def test_get_settings_uses_environment(monkeypatch) -> None:
    monkeypatch.setenv("APP_ENV", "ci")

    settings = get_settings()
    assert settings.app_env == "ci"
    assert get_settings() is settings


def test_get_settings_retries_after_env_template_on_missing(monkeypatch) -> None:
    attempts = {"count": 0}

    class _DummySettings:
        app_env = "ci"

    def _fake_settings():
        attempts["count"] += 1
        if attempts["count"] == 1:
            raise ValueError("missing")
        return _DummySettings()

    copied = {"done": 0}

    def _mark_env_copied(**kwargs: object) -> None:
        _ = kwargs
        copied["done"] += 1

    monkeypatch.setattr("extractpoints.settings.Settings", _fake_settings)
    monkeypatch.setattr("extractpoints.settings._is_missing_settings_error", lambda exc: True)
    monkeypatch.setattr("extractpoints.settings.ensure_env_file_exists", _mark_env_copied)

    settings = get_settings()
    assert copied["done"] == 1
    assert attempts["count"] == 2
    assert settings.app_env == "ci"


def test_get_settings_wraps_retry_error_on_missing(monkeypatch) -> None:
    def _fake_settings():
        raise ValueError("missing")

    monkeypatch.setattr("extractpoints.settings.Settings", _fake_settings)
    monkeypatch.setattr("extractpoints.settings._is_missing_settings_error", lambda exc: True)
    monkeypatch.setattr("extractpoints.settings.ensure_env_file_exists", lambda **kwargs: None)

    with pytest.raises(SettingsError, match="missing"):
        get_settings()


def test_get_settings_does_not_copy_env_on_non_missing(monkeypatch) -> None:
    def _raise_runtime_error():
        raise RuntimeError("boom")

    def _raise_assertion_error(**kwargs: object) -> None:
        _ = kwargs
        raise AssertionError("should not copy env")

    monkeypatch.setattr("extractpoints.settings.Settings", _raise_runtime_error)
    monkeypatch.setattr("extractpoints.settings._is_missing_settings_error", lambda exc: False)
    monkeypatch.setattr("extractpoints.settings.ensure_env_file_exists", _raise_assertion_error)

    with pytest.raises(SettingsError, match="boom"):
        get_settings()


def test_ensure_env_file_exists_copies_template(tmp_path: Path) -> None:
    template = tmp_path / ".env.template"
    env_file = tmp_path / ".env"
    template.write_text("RESOLVER_CONCURRENCY=2\n", encoding="utf-8")

    ensure_env_file_exists(env_path=env_file, template_path=template)

    assert env_file.exists()
    assert "RESOLVER_CONCURRENCY" in env_file.read_text(encoding="utf-8")


def test_ensure_env_file_exists_keeps_existing_env(tmp_path: Path) -> None:
    template = tmp_path / ".env.template"
    env_file = tmp_path / ".env"
    template.write_text("APP_ENV=template\n", encoding="utf-8")
    env_file.write_text("APP_ENV=local\n", encoding="utf-8")

    ensure_env_file_exists(env_path=env_file, template_path=template)

    assert env_file.read_text(encoding="utf-8") == "APP_ENV=local\n"


def test_is_missing_settings_error_only_matches_validation_errors() -> None:
    assert _is_missing_settings_error(RuntimeError("missing")) is False


def test_settings_normalize_log_level() -> None:
    assert Settings(log_level=" debug ").log_level == "DEBUG"


def test_settings_reject_unknown_log_level() -> None:
    with pytest.raises(ValidationError, match="Unknown log level"):
        Settings(log_level="chatty")


def test_settings_expose_directories_as_paths(tmp_path: Path) -> None:
    settings = Settings(checkpoint_dir=str(tmp_path / "conf"), results_dir=str(tmp_path / "out"))

    assert settings.checkpoint_path == tmp_path / "conf"
    assert settings.results_path == tmp_path / "out"


def test_every_setting_is_env_backed_and_templated() -> None:
    template = (Path(__file__).parents[2] / ".env.template").read_text(encoding="utf-8")

    for name, field in Settings.model_fields.items():
        assert field.validation_alias, name
        assert f"{field.validation_alias}=" in template, name
