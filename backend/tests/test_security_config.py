import importlib
import os
import sys

import pytest

sys.path.append(os.path.abspath(os.path.join(os.path.dirname(__file__), "..")))

STRONG_SECRET = "0123456789abcdef0123456789abcdef0123456789abcdef0123456789abcdef"


def reload_config_module():
    config_module = sys.modules.get("chirpy.config")
    if config_module:
        config_module.get_settings.cache_clear()
        sys.modules.pop("chirpy.config", None)
    return importlib.import_module("chirpy.config")


@pytest.fixture(autouse=True)
def restore_config_module():
    original = sys.modules.get("chirpy.config")
    yield
    if original is not None:
        sys.modules["chirpy.config"] = original


def test_missing_secret_key_fails_closed(monkeypatch):
    monkeypatch.setenv("POLKA_KEY", "f271c81ff7084ee5b99a5091b42d486e")
    monkeypatch.setenv("SECRET_KEY", "")

    config_module = reload_config_module()

    with pytest.raises(Exception, match="secret_key|SECRET_KEY"):
        config_module.get_settings()


def test_weak_secret_key_fails_closed(monkeypatch):
    monkeypatch.setenv("POLKA_KEY", "f271c81ff7084ee5b99a5091b42d486e")
    monkeypatch.setenv("SECRET_KEY", "changeme-in-production")

    config_module = reload_config_module()

    with pytest.raises(Exception, match="secret_key|SECRET_KEY"):
        config_module.get_settings()


def test_missing_polka_key_fails_closed(monkeypatch):
    monkeypatch.setenv("SECRET_KEY", STRONG_SECRET)
    monkeypatch.setenv("POLKA_KEY", "")

    config_module = reload_config_module()

    with pytest.raises(Exception, match="polka_key|POLKA_KEY"):
        config_module.get_settings()


@pytest.mark.parametrize("ttl", ["0", "7200"])
def test_access_token_ttl_above_one_hour_fails(monkeypatch, ttl):
    monkeypatch.setenv("SECRET_KEY", STRONG_SECRET)
    monkeypatch.setenv("POLKA_KEY", "f271c81ff7084ee5b99a5091b42d486e")
    monkeypatch.setenv("ACCESS_TOKEN_EXPIRE_SECONDS", ttl)

    config_module = reload_config_module()

    with pytest.raises(Exception, match="ACCESS_TOKEN_EXPIRE_SECONDS"):
        config_module.get_settings()


def test_strong_secret_key_passes(monkeypatch):
    monkeypatch.setenv("SECRET_KEY", STRONG_SECRET)
    monkeypatch.setenv("POLKA_KEY", "f271c81ff7084ee5b99a5091b42d486e")

    config_module = reload_config_module()
    settings = config_module.get_settings()

    assert settings.secret_key == STRONG_SECRET
    assert settings.access_token_expire_seconds == 3600
    assert settings.refresh_token_expire_days == 60
    assert not hasattr(settings, "algorithm")
