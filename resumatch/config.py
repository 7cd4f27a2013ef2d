"""Runtime configuration, read from the environment once at start-up."""

from __future__ import annotations

import os
from collections.abc import Mapping

from pydantic import BaseModel, ConfigDict, Field

# Checked in this order; the first configured credential wins for the whole run.
PROVIDER_PRIORITY: tuple[str, ...] = ("groq", "openai", "gemini")

_PROVIDER_ENV_KEYS: dict[str, str] = {
    "groq": "GROQ_API_KEY",
    "openai": "OPENAI_API_KEY",
    "gemini": "GOOGLE_API_KEY",
}


def _clean(value: str | None) -> str:
    return (value or "").strip()


def _number(env: Mapping[str, str], key: str, default: float) -> float:
    raw = _clean(env.get(key))
    if not raw:
        return default
    try:
        value = float(raw)
    except ValueError:
        return default
    return value if value > 0 else default


class Settings(BaseModel):
    """Explicit configuration handed to the gateway and the job sources."""

    model_config = ConfigDict(frozen=True)

    provider_keys: dict[str, str] = Field(default_factory=dict)
    jsearch_api_key: str = ""
    adzuna_app_id: str = ""
    adzuna_app_key: str = ""
    llm_timeout: float = 30.0
    source_timeout: float = 15.0
    max_workers: int = 10
    log_level: str = "INFO"

    @classmethod
    def from_env(cls, env: Mapping[str, str] | None = None) -> Settings:
        """Build settings from *env* (defaults to ``os.environ``)."""
        env = os.environ if env is None else env
        provider_keys = {
            provider: key
            for provider, var in _PROVIDER_ENV_KEYS.items()
            if (key := _clean(env.get(var)))
        }
        return cls(
            provider_keys=provider_keys,
            jsearch_api_key=_clean(env.get("JSEARCH_API_KEY")),
            adzuna_app_id=_clean(env.get("ADZUNA_APP_ID")),
            adzuna_app_key=_clean(env.get("ADZUNA_APP_KEY")),
            llm_timeout=_number(env, "RESUMATCH_LLM_TIMEOUT", 30.0),
            source_timeout=_number(env, "RESUMATCH_SOURCE_TIMEOUT", 15.0),
            max_workers=int(_number(env, "RESUMATCH_MAX_WORKERS", 10)),
            log_level=_clean(env.get("LOG_LEVEL")).upper() or "INFO",
        )

    @property
    def active_provider(self) -> str | None:
        """First provider in priority order that has a credential, if any."""
        for provider in PROVIDER_PRIORITY:
            if self.provider_keys.get(provider):
                return provider
        return None

    @property
    def has_adzuna(self) -> bool:
        return bool(self.adzuna_app_id and self.adzuna_app_key)
