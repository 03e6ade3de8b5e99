import json
import os
import stat
from pathlib import Path

import pytest

from eskiz_client import cli
from eskiz_client.client import DEFAULT_BASE_URL
from eskiz_client.config import EskizConfig

from conftest import BASE_URL, FakeHttp, FakeResponse, token_body


def write_config(path: Path, **data) -> Path:
    path.write_text(json.dumps(data), encoding="utf-8")
    return path


@pytest.fixture(autouse=True)
def clean_env(monkeypatch, tmp_path):
    for var in ("ESKIZ_CONFIG", "ESKIZ_EMAIL", "ESKIZ_PASSWORD", "LOG_LEVEL", "LOG_FILE"):
        monkeypatch.delenv(var, raising=False)
    monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path / "xdg"))


def test_config_defaults(tmp_path):
    path = write_config(tmp_path / "config.json", email="a@b.com", password="p")
    config = EskizConfig(str(path))

    assert config.email == "a@b.com"
    assert config.password == "p"
    assert config.base_url == DEFAULT_BASE_URL
    assert config.sender == "4546"
    assert config.callback_url is None
    creds = config.credentials()
    assert (creds.email, creds.password) == ("a@b.com", "p")


def test_config_env_overrides_credentials(tmp_path, monkeypatch):
    path = write_config(tmp_path / "config.json", email="file@b.com", password="file")
    monkeypatch.setenv("ESKIZ_EMAIL", "env@b.com")
    monkeypatch.setenv("ESKIZ_PASSWORD", "env")

    config = EskizConfig(str(path))

    assert (config.email, config.password) == ("env@b.com", "env")


def test_config_path_from_env(tmp_path, monkeypatch):
    path = write_config(tmp_path / "other.json", email="a@b.com", password="p", sender="ACME")
    monkeypatch.setenv("ESKIZ_CONFIG", str(path))

    assert EskizConfig().sender == "ACME"


def test_config_default_path_uses_xdg(tmp_path):
    config_dir = tmp_path / "xdg" / "eskiz_client"
    config_dir.mkdir(parents=True)
    write_config(config_dir / "config.json", email="a@b.com", password="p")

    assert EskizConfig().config_path == str(config_dir / "config.json")


def test_config_missing_file(tmp_path):
    with pytest.raises(FileNotFoundError):
        EskizConfig(str(tmp_path / "missing.json"))


def test_config_missing_required_field(tmp_path):
    path = write_config(tmp_path / "config.json", email="a@b.com")
    with pytest.raises(ValueError, match="password"):
        EskizConfig(str(path))


def test_cli_init_writes_private_config(tmp_path):
    config_dir = tmp_path / "cfg"
    rc = cli.main(["init", "--config-dir", str(config_dir), "--email", "a@b.com", "--password", "p"])

    assert rc == 0
    config_path = config_dir / "config.json"
    data = json.loads(config_path.read_text())
    assert data == {"email": "a@b.com", "password": "p", "base_url": DEFAULT_BASE_URL, "sender": "4546"}
    if os.name == "posix":
        assert stat.S_IMODE(config_path.stat().st_mode) == 0o600

    # Second run refuses to overwrite without --force
    assert cli.main(["init", "--config-dir", str(config_dir), "--email", "x", "--password", "y"]) == 1
    assert cli.main(["init", "--config-dir", str(config_dir), "--email", "x", "--password", "y", "--force"]) == 0


@pytest.fixture
def cli_http(monkeypatch, tmp_path):
    """Route the CLI's login() through a fake HTTP session"""
    http = FakeHttp({("POST", "/auth/login"): FakeResponse(200, token_body())})
    real_login = cli.login

    def fake_login(credentials, **kwargs):
        kwargs["http"] = http
        return real_login(credentials, **kwargs)

    monkeypatch.setattr(cli, "login", fake_login)
    monkeypatch.setattr(cli, "setup_logging", lambda **kwargs: None)
    write_config(tmp_path / "config.json", email="a@b.com", password="p",
                 base_url=BASE_URL, sender="ACME")
    return http


def test_cli_send(cli_http, tmp_path, capsys):
    cli_http.routes[("POST", "/message/sms/send")] = FakeResponse(200, {"id": "42", "status": "waiting"})

    rc = cli.main(["send", "hello", "--to", "998771234567", "--config", str(tmp_path / "config.json")])

    assert rc == 0
    assert "Message ID: 42" in capsys.readouterr().out
    sent = json.loads(cli_http.last["data"])
    assert sent == {"mobile_phone": "998771234567", "message": "hello", "from": "ACME"}
    assert cli_http.last["headers"]["Authorization"] == "Bearer T1"


def test_cli_limit_prints_json(cli_http, tmp_path, capsys):
    cli_http.routes[("GET", "/user/get-limit")] = FakeResponse(200, {"data": {"balance": 7}})

    rc = cli.main(["limit", "--config", str(tmp_path / "config.json")])

    assert rc == 0
    assert json.loads(capsys.readouterr().out) == {"data": {"balance": 7}}


def test_cli_profile_prints_json(cli_http, tmp_path, capsys):
    cli_http.routes[("GET", "/auth/user")] = FakeResponse(200, {"data": {"email": "a@b.com"}})

    assert cli.main(["profile", "--config", str(tmp_path / "config.json")]) == 0
    assert json.loads(capsys.readouterr().out)["data"]["email"] == "a@b.com"


def test_cli_test_reports_login_failure(cli_http, tmp_path, capsys):
    cli_http.routes[("POST", "/auth/login")] = FakeResponse(401, {"message": "Invalid credentials"})

    rc = cli.main(["test", "--config", str(tmp_path / "config.json")])

    assert rc == 1
    assert "Connection failed: unauthorized" in capsys.readouterr().err
    assert cli_http.closed


def test_cli_missing_config(tmp_path, capsys):
    rc = cli.main(["limit", "--config", str(tmp_path / "nope.json")])
    assert rc == 1
    assert "Config file not found" in capsys.readouterr().err


def test_config_rejects_unknown_log_level(tmp_path):
    path = write_config(tmp_path / "config.json", email="a@b.com", password="p", log_level="verbose")
    with pytest.raises(ValueError, match="log_level"):
        EskizConfig(str(path))


def test_config_accepts_lowercase_log_level(tmp_path):
    path = write_config(tmp_path / "config.json", email="a@b.com", password="p", log_level="debug")
    assert EskizConfig(str(path)).log_level == "debug"


def test_cli_bad_log_level_exits_cleanly(tmp_path, capsys):
    path = write_config(tmp_path / "config.json", email="a@b.com", password="p", log_level="verbose")

    assert cli.main(["limit", "--config", str(path)]) == 1
    assert "Invalid log_level" in capsys.readouterr().err
