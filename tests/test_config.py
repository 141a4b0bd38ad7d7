from trustscore_agent.config import DEFAULT_USER_AGENT, PAGESPEED_ENDPOINT, Settings

ENV_VARS = (
    "GOOGLE_PAGESPEED_API_KEY",
    "PAGESPEED_ENDPOINT",
    "PAGESPEED_TIMEOUT_S",
    "PAGE_TIMEOUT_S",
    "SITEMAP_TIMEOUT_S",
    "TRUSTSCORE_USER_AGENT",
    "CRON_SECRET",
    "REAUDIT_PAUSE_S",
    "TRUSTSCORE_CORS_ORIGINS",
    "LOG_LEVEL",
)


def _clear(monkeypatch):
    for name in ENV_VARS:
        monkeypatch.delenv(name, raising=False)


def test_defaults(monkeypatch):
    _clear(monkeypatch)
    settings = Settings.from_env()
    assert settings == Settings()
    assert settings.pagespeed_endpoint == PAGESPEED_ENDPOINT
    assert settings.user_agent == DEFAULT_USER_AGENT
    assert settings.pagespeed_timeout_s == 60
    assert settings.cron_secret is None


def test_reads_environment(monkeypatch):
    _clear(monkeypatch)
    monkeypatch.setenv("GOOGLE_PAGESPEED_API_KEY", " abc ")
    monkeypatch.setenv("PAGE_TIMEOUT_S", "2.5")
    monkeypatch.setenv("CRON_SECRET", "s3cret")
    monkeypatch.setenv("TRUSTSCORE_CORS_ORIGINS", "https://a.example, https://b.example,")
    monkeypatch.setenv("LOG_LEVEL", "debug")

    settings = Settings.from_env()
    assert settings.pagespeed_api_key == "abc"
    assert settings.page_timeout_s == 2.5
    assert settings.cron_secret == "s3cret"
    assert settings.cors_origins == ("https://a.example", "https://b.example")
    assert settings.log_level == "DEBUG"


def test_bad_numbers_fall_back_to_defaults(monkeypatch):
    _clear(monkeypatch)
    monkeypatch.setenv("PAGESPEED_TIMEOUT_S", "soon")
    monkeypatch.setenv("REAUDIT_PAUSE_S", "-1")
    settings = Settings.from_env()
    assert settings.pagespeed_timeout_s == 60
    assert settings.reaudit_pause_s == 1.0
