import pytest

from superset_admin.config import settings


@pytest.fixture
def secrets_dir(monkeypatch, tmp_path):
    """Point /run/secrets at an empty temp directory."""
    real_path = settings.Path

    def fake_path(target):
        if str(target) == "/run/secrets":
            return tmp_path
        return real_path(target)

    monkeypatch.setattr(settings, "Path", fake_path)
    return tmp_path


@pytest.fixture
def superset_env(monkeypatch, secrets_dir):
    monkeypatch.setenv("SUPERSET_HOST", "http://superset:8088/")
    monkeypatch.setenv("SUPERSET_USERNAME", "admin")
    monkeypatch.setenv("SUPERSET_PASSWORD", "env-password")
    monkeypatch.delenv("SUPERSET_REQUEST_TIMEOUT", raising=False)
    monkeypatch.delenv("SUPERSET_VERIFY_TLS", raising=False)


def test_load_settings_from_env(superset_env):
    cfg = settings.load_settings()
    assert cfg.host == "http://superset:8088"
    assert cfg.username == "admin"
    assert cfg.password == "env-password"
    assert cfg.request_timeout == 30.0
    assert cfg.verify_tls is True


def test_password_reads_from_run_secrets(superset_env, secrets_dir):
    (secrets_dir / "superset_password").write_text("file-password\n")
    assert settings.load_settings().password == "file-password"


def test_empty_secret_file_falls_back_to_env(superset_env, secrets_dir):
    (secrets_dir / "superset_password").write_text("   ")
    assert settings.load_settings().password == "env-password"


@pytest.mark.parametrize("var", ["SUPERSET_HOST", "SUPERSET_USERNAME", "SUPERSET_PASSWORD"])
def test_missing_required_value(monkeypatch, superset_env, var):
    monkeypatch.delenv(var)
    with pytest.raises(RuntimeError, match=var):
        settings.load_settings()


def test_timeout_and_tls_overrides(monkeypatch, superset_env, caplog):
    monkeypatch.setenv("SUPERSET_REQUEST_TIMEOUT", "5")
    monkeypatch.setenv("SUPERSET_VERIFY_TLS", "false")
    with caplog.at_level("WARNING"):
        cfg = settings.load_settings()
    assert cfg.request_timeout == 5.0
    assert cfg.verify_tls is False
    assert "TLS verification disabled" in caplog.text


@pytest.mark.parametrize("raw", ["soon", "0", "-1"])
def test_invalid_timeout(monkeypatch, superset_env, raw):
    monkeypatch.setenv("SUPERSET_REQUEST_TIMEOUT", raw)
    with pytest.raises(RuntimeError, match="SUPERSET_REQUEST_TIMEOUT"):
        settings.load_settings()


def test_repr_masks_password(superset_env):
    text = repr(settings.load_settings())
    assert "env-password" not in text
    assert "password='***'" in text
