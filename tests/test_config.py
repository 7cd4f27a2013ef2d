"""Tests for resumatch.config — provider selection and environment parsing."""

from resumatch.config import Settings


class TestSettingsFromEnv:
    def test_empty_environment(self):
        settings = Settings.from_env({})
        assert settings.provider_keys == {}
        assert settings.active_provider is None
        assert settings.has_adzuna is False
        assert settings.llm_timeout == 30.0
        assert settings.source_timeout == 15.0
        assert settings.max_workers == 10
        assert settings.log_level == "INFO"

    def test_priority_groq_over_others(self):
        env = {"GROQ_API_KEY": "g", "OPENAI_API_KEY": "o", "GOOGLE_API_KEY": "k"}
        assert Settings.from_env(env).active_provider == "groq"

    def test_priority_openai_over_gemini(self):
        env = {"OPENAI_API_KEY": "o", "GOOGLE_API_KEY": "k"}
        assert Settings.from_env(env).active_provider == "openai"

    def test_gemini_only(self):
        assert Settings.from_env({"GOOGLE_API_KEY": "k"}).active_provider == "gemini"

    def test_blank_credentials_count_as_absent(self):
        env = {"GROQ_API_KEY": "   ", "OPENAI_API_KEY": "o"}
        assert Settings.from_env(env).active_provider == "openai"

    def test_adzuna_needs_both_values(self):
        assert Settings.from_env({"ADZUNA_APP_ID": "id"}).has_adzuna is False
        assert Settings.from_env({"ADZUNA_APP_ID": "id", "ADZUNA_APP_KEY": "key"}).has_adzuna is True

    def test_numeric_overrides(self):
        env = {
            "RESUMATCH_LLM_TIMEOUT": "12.5",
            "RESUMATCH_SOURCE_TIMEOUT": "5",
            "RESUMATCH_MAX_WORKERS": "4",
            "LOG_LEVEL": "debug",
        }
        settings = Settings.from_env(env)
        assert settings.llm_timeout == 12.5
        assert settings.source_timeout == 5.0
        assert settings.max_workers == 4
        assert settings.log_level == "DEBUG"

    def test_invalid_numbers_fall_back_to_defaults(self):
        settings = Settings.from_env({"RESUMATCH_LLM_TIMEOUT": "soon", "RESUMATCH_MAX_WORKERS": "-3"})
        assert settings.llm_timeout == 30.0
        assert settings.max_workers == 10
