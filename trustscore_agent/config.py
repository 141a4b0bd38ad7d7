from __future__ import annotations

import os
from dataclasses import dataclass

PAGESPEED_ENDPOINT = "https://www.googleapis.com/pagespeedonline/v5/runPagespeed"
DEFAULT_USER_AGENT = "Mozilla/5.0 (compatible; TrustScoreBot/1.0)"


def _env_float(name: str, default: float) -> float:
    raw = os.getenv(name, "").strip()
    if not raw:
        return default
    try:
        value = float(raw)
    except ValueError:
        return default
    return value if value >= 0 else default


def _env_str(name: str) -> str | None:
    value = os.getenv(name, "").strip()
    return value or None


@dataclass(frozen=True)
class Settings:
    pagespeed_api_key: str | None = None
    pagespeed_endpoint: str = PAGESPEED_ENDPOINT
    pagespeed_timeout_s: float = 60.0
    page_timeout_s: float = 10.0
    sitemap_timeout_s: float = 5.0
    user_agent: str = DEFAULT_USER_AGENT
    cron_secret: str | None = None
    reaudit_pause_s: float = 1.0
    cors_origins: tuple[str, ...] = ("http://localhost:3000",)
    log_level: str = "INFO"

    @classmethod
    def from_env(cls) -> "Settings":
        raw_origins = os.getenv("TRUSTSCORE_CORS_ORIGINS", "").strip()
        origins = tuple(o.strip() for o in raw_origins.split(",") if o.strip()) or cls.cors_origins
        return cls(
            pagespeed_api_key=_env_str("GOOGLE_PAGESPEED_API_KEY"),
            pagespeed_endpoint=_env_str("PAGESPEED_ENDPOINT") or PAGESPEED_ENDPOINT,
            pagespeed_timeout_s=_env_float("PAGESPEED_TIMEOUT_S", cls.pagespeed_timeout_s),
            page_timeout_s=_env_float("PAGE_TIMEOUT_S", cls.page_timeout_s),
            sitemap_timeout_s=_env_float("SITEMAP_TIMEOUT_S", cls.sitemap_timeout_s),
            user_agent=_env_str("TRUSTSCORE_USER_AGENT") or DEFAULT_USER_AGENT,
            cron_secret=_env_str("CRON_SECRET"),
            reaudit_pause_s=_env_float("REAUDIT_PAUSE_S", cls.reaudit_pause_s),
            cors_origins=origins,
            log_level=(_env_str("LOG_LEVEL") or "INFO").upper(),
        )
