from __future__ import annotations

import pytest
from pydantic import ValidationError

from core.config import AppSettings, parse_env_lines, write_user_env_vars


def _settings(**overrides) -> AppSettings:
    return AppSettings(_env_file=None, **overrides)


def test_service_url_falls_back_to_base():
    settings = _settings(api_base_url="http://gateway.test/", service_urls={"payments": "http://pay.test/"})

    assert settings.api_base_url == "http://gateway.test"
    assert settings.service_url("payments") == "http://pay.test"
    assert settings.service_url("auth") == "http://gateway.test"


def test_unknown_service_is_rejected():
    with pytest.raises(ValueError):
        _settings().service_url("billing")
    with pytest.raises(ValidationError):
        _settings(service_urls={"billing": "http://x.test"})


def test_env_prefix(monkeypatch):
    monkeypatch.setenv("COLISDESK_TENANT_ID", "tenant-env")
    monkeypatch.setenv("COLISDESK_SERVICE_URLS", '{"parcels": "http://parcels.test"}')

    settings = _settings()

    assert settings.tenant_id == "tenant-env"
    assert settings.service_url("parcels") == "http://parcels.test"


def test_refresh_defaults():
    settings = _settings()

    assert settings.token_refresh_buffer_seconds == 300
    assert settings.token_refresh_window_seconds == 600


def test_write_user_env_vars_merges(tmp_path):
    env_path = tmp_path / "cfg" / ".env"
    env_path.parent.mkdir()
    env_path.write_text("# old\nCOLISDESK_TENANT_ID='t-old'\nKEEP=1\n", encoding="utf-8")

    write_user_env_vars({"COLISDESK_TENANT_ID": "t-new", "COLISDESK_API_BASE_URL": None}, env_path)

    values = parse_env_lines(env_path.read_text(encoding="utf-8"))
    assert values == {"COLISDESK_TENANT_ID": "t-new", "KEEP": "1"}


def test_parse_env_lines_skips_noise():
    assert parse_env_lines("\n# c\nnoequals\n=x\nA = \"b\"\n") == {"A": "b"}


def test_write_user_env_vars_empty_value_removes_key(tmp_path):
    env_path = tmp_path / ".env"
    env_path.write_text("COLISDESK_TENANT_ID=t-old\nCOLISDESK_API_BASE_URL=http://old.test\n", encoding="utf-8")

    write_user_env_vars({"COLISDESK_TENANT_ID": "", "COLISDESK_API_BASE_URL": "http://new.test"}, env_path)

    values = parse_env_lines(env_path.read_text(encoding="utf-8"))
    assert values == {"COLISDESK_API_BASE_URL": "http://new.test"}
