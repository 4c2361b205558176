from config.settings import Settings
from models.schema import DEFAULT_BASE_URL, DEFAULT_TIMEOUT_SECONDS


def test_settings_defaults(monkeypatch):
    for k in ("CHECKHIM_API_KEY", "CHECKHIM_BASE_URL", "CHECKHIM_TIMEOUT_SECONDS", "LOG_LEVEL"):
        monkeypatch.delenv(k, raising=False)
    s = Settings(_env_file=None)
    assert s.CHECKHIM_API_KEY == ""
    assert s.CHECKHIM_BASE_URL == DEFAULT_BASE_URL
    assert s.CHECKHIM_TIMEOUT_SECONDS == DEFAULT_TIMEOUT_SECONDS
    assert s.LOG_LEVEL == "INFO"


def test_settings_from_env(monkeypatch):
    monkeypatch.setenv("CHECKHIM_API_KEY", "env-key")
    monkeypatch.setenv("checkhim_base_url", "https://staging.checkhim.test")
    monkeypatch.setenv("CHECKHIM_TIMEOUT_SECONDS", "2.5")
    s = Settings(_env_file=None)
    assert s.CHECKHIM_API_KEY == "env-key"
    assert s.CHECKHIM_BASE_URL == "https://staging.checkhim.test"
    assert s.CHECKHIM_TIMEOUT_SECONDS == 2.5
