from __future__ import annotations

import json

import pytest
from typer.testing import CliRunner

import core.config
from adapters.api.backoffice import Backoffice
from adapters.token_store import FileTokenStore
from cli.main import app
from core.config import parse_env_lines

from conftest import make_session, make_token, ok, request_json

runner = CliRunner()

USER = {"id": "u1", "email": "ops@example.com", "name": "Ops", "userType": "ADMIN", "tenantId": "tenant-1"}
PARCEL = {"id": "p1", "code": "COL-001", "recipientName": "Sara", "recipientPhone": "0600000000", "price": 35}


@pytest.fixture
def session_file(tmp_path, monkeypatch):
    path = tmp_path / "session.json"
    monkeypatch.setenv("COLISDESK_SESSION_FILE", str(path))
    monkeypatch.setenv("COLISDESK_API_BASE_URL", "http://api.test")
    return path


@pytest.fixture
def wired(session_file, backend, monkeypatch):
    """Hace que cada `Backoffice.from_settings()` de la CLI hable con `backend`."""

    build = Backoffice.from_settings.__func__

    def from_settings(cls, settings=None, **kwargs):
        kwargs.setdefault("transport", backend.transport)
        return build(cls, settings, **kwargs)

    monkeypatch.setattr(Backoffice, "from_settings", classmethod(from_settings))
    return backend


def test_sms_preview_renders_sample_values():
    result = runner.invoke(app, ["sms", "preview", "Hello {CLIENT_NAME}"])

    assert result.exit_code == 0
    assert "Hello John Doe" in result.output
    assert "{CLIENT_NAME}" in result.output


def test_sms_preview_fails_on_unknown_placeholder():
    result = runner.invoke(app, ["sms", "preview", "Hello {NICKNAME}"])

    assert result.exit_code == 1
    assert "Unknown placeholders" in result.output


def test_whoami_without_session(session_file):
    result = runner.invoke(app, ["whoami"])

    assert result.exit_code == 1
    assert "Not logged in" in result.output


def test_nav_for_stored_session(session_file):
    token = make_token(3600, email="ops@example.com", userType="SELLER", permissions=["parcels:read"])
    FileTokenStore(session_file).save(make_session(access_token=token))

    result = runner.invoke(app, ["nav", "--path", "/parcels"])

    assert result.exit_code == 0
    assert "All parcels" in result.output
    assert "Settings" not in result.output


def test_nav_without_session_is_empty(session_file):
    result = runner.invoke(app, ["nav"])

    assert result.exit_code == 1
    assert "No navigation entries" in result.output


def test_login_stores_session(wired, session_file):
    wired.add("POST", "/api/auth/login", ok({"user": USER, "token": make_token(3600), "refreshToken": "r1"}))

    result = runner.invoke(app, ["login", "ops@example.com", "--tenant", "tenant-9"], input="secret\n")

    assert result.exit_code == 0
    assert "Logged in as" in result.output
    sent = wired.calls("POST", "/api/auth/login")[0]
    assert sent.headers["X-Tenant-ID"] == "tenant-9"
    assert request_json(sent) == {"email": "ops@example.com", "password": "secret"}
    saved = FileTokenStore(session_file).load()
    assert saved.tenant_id == "tenant-9"
    assert saved.refresh_token == "r1"


def test_login_pending_account_exits_with_error(wired, session_file):
    wired.add("POST", "/api/auth/login", ok({"user": USER, "accountStatus": "PENDING", "requiresApproval": True}))

    result = runner.invoke(app, ["login", "ops@example.com"], input="secret\n")

    assert result.exit_code == 1
    assert "pending approval" in result.output
    assert not session_file.exists()


def test_login_bad_credentials(wired, session_file):
    wired.add("POST", "/api/auth/login", ok(status=401, message="Invalid credentials"))

    result = runner.invoke(app, ["login", "ops@example.com"], input="wrong\n")

    assert result.exit_code == 1
    assert "AUTH_ERROR" in result.output


def test_logout_clears_stored_session(wired, session_file):
    FileTokenStore(session_file).save(make_session())
    wired.add("POST", "/api/auth/logout", ok(None))

    result = runner.invoke(app, ["logout"])

    assert result.exit_code == 0
    assert "Session closed" in result.output
    assert not session_file.exists()
    assert len(wired.calls("POST", "/api/auth/logout")) == 1


def test_parcels_list_exports_json(wired, tmp_path):
    wired.add(
        "GET",
        "/api/parcels",
        ok([PARCEL], pagination={"page": 1, "limit": 20, "total": 1, "totalPages": 1}),
    )
    out = tmp_path / "exports" / "parcels.json"

    result = runner.invoke(app, ["parcels", "list", "--status", "NEW", "--json", str(out)])

    assert result.exit_code == 0
    assert "COL-001" in result.output
    assert dict(wired.requests[0].url.params)["statusCode"] == "NEW"
    data = json.loads(out.read_text(encoding="utf-8"))
    assert data["items"][0]["recipientName"] == "Sara"
    assert data["pagination"]["total"] == 1


def test_parcels_list_session_expired(wired, session_file):
    FileTokenStore(session_file).save(make_session(refresh_token=None))
    wired.add("GET", "/api/parcels", ok(status=401))

    result = runner.invoke(app, ["parcels", "list"])

    assert result.exit_code == 1
    assert "colisdesk login" in result.output
    assert not session_file.exists()


def test_doctor_setup_writes_and_clears_values(tmp_path, monkeypatch, session_file):
    env_path = tmp_path / "config" / ".env"
    env_path.parent.mkdir()
    env_path.write_text("COLISDESK_TENANT_ID=t-old\n", encoding="utf-8")
    monkeypatch.setattr(core.config, "get_user_env_file", lambda: env_path)

    result = runner.invoke(app, ["doctor", "setup"], input="http://gateway.test\n\n")

    assert result.exit_code == 0
    assert parse_env_lines(env_path.read_text(encoding="utf-8")) == {"COLISDESK_API_BASE_URL": "http://gateway.test"}


def test_doctor_setup_rejects_bad_url(tmp_path, monkeypatch, session_file):
    monkeypatch.setattr(core.config, "get_user_env_file", lambda: tmp_path / ".env")

    result = runner.invoke(app, ["doctor", "setup"], input="gateway.test\ntenant-1\n")

    assert result.exit_code != 0
    assert not (tmp_path / ".env").exists()


def test_doctor_run_reports_backend_health(wired):
    wired.add("GET", "/api/health", ok({"status": "ok"}))

    result = runner.invoke(app, ["doctor", "run"])

    assert result.exit_code == 0
    assert "Backend health" in result.output
    assert "NONE" in result.output
