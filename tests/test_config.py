import pytest
from pydantic import ValidationError

from sqlanalyst.config import FirebaseConfig, Settings

_FIREBASE_VALUES = {
    "FIREBASE_API_KEY": "k",
    "FIREBASE_AUTH_DOMAIN": "d",
    "FIREBASE_PROJECT_ID": "p",
    "FIREBASE_APP_ID": "a",
    "FIREBASE_STORAGE_BUCKET": "b",
    "FIREBASE_MESSAGING_SENDER_ID": "s",
    "FIREBASE_MEASUREMENT_ID": "G-123",
}


@pytest.fixture
def firebase_env(monkeypatch):
    for var, value in _FIREBASE_VALUES.items():
        monkeypatch.setenv(var, value)
    return monkeypatch


def test_missing_identity_settings_are_fatal(monkeypatch):
    for var in _FIREBASE_VALUES:
        monkeypatch.delenv(var, raising=False)
    with pytest.raises(ValidationError):
        FirebaseConfig(_env_file=None)


@pytest.mark.parametrize("missing", sorted(_FIREBASE_VALUES))
def test_each_identity_setting_is_required(firebase_env, missing):
    firebase_env.delenv(missing)
    with pytest.raises(ValidationError):
        FirebaseConfig(_env_file=None)


def test_firebase_config_reads_prefixed_environment(firebase_env):
    config = FirebaseConfig(_env_file=None)
    assert config.project_id == "p"
    assert config.storage_bucket == "b"
    assert config.messaging_sender_id == "s"
    assert config.measurement_id == "G-123"


def test_cors_origins_list():
    settings = Settings(cors_origins="http://a.test, http://b.test,", _env_file=None)
    assert settings.cors_origins_list == ["http://a.test", "http://b.test"]


def test_session_cookie_is_not_secure_by_default():
    assert Settings(_env_file=None).session_cookie_secure is False
    assert Settings(session_cookie_secure=True, _env_file=None).session_cookie_secure is True
