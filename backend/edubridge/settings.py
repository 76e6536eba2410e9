from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic import Field

class Settings(BaseSettings):
	# Same-origin proxy served by routers/translate.py
	translate_proxy_url: str = Field(default="http://localhost:8000/api/translate", validation_alias="TRANSLATE_PROXY_URL")
	# Public LibreTranslate endpoint (self-host for privacy/rate limits)
	libretranslate_url: str = Field(default="https://libretranslate.com/translate", validation_alias="LIBRETRANSLATE_URL")
	libretranslate_api_key: str | None = Field(default=None, validation_alias="LIBRETRANSLATE_API_KEY")
	# Upstream used by the proxy route
	mymemory_url: str = Field(default="https://api.mymemory.translated.net/get", validation_alias="MYMEMORY_URL")
	# Per backend call; a timeout counts as a failure and moves to the next backend
	translate_timeout_seconds: float = Field(default=8.0, validation_alias="TRANSLATE_TIMEOUT_SECONDS")

	# Cache tiers
	local_cache_enabled: bool = Field(default=True, validation_alias="LOCAL_CACHE_ENABLED")
	local_cache_path: str = Field(default="./translation_cache.json", validation_alias="LOCAL_CACHE_PATH")
	remote_cache_enabled: bool = Field(default=True, validation_alias="REMOTE_CACHE_ENABLED")

	# Static quiz banks (quiz_i18n_<lang>.json)
	quiz_dir: str = Field(default="./quiz", validation_alias="QUIZ_DIR")

	# Optional Gemini translation for the proxy route
	gemini_api_key: str | None = Field(default=None, validation_alias="GEMINI_API_KEY")
	gemini_model: str = Field(default="gemini-2.5-flash-lite", validation_alias="GEMINI_MODEL")

	# OpenRouter fallback configuration (optional)
	openrouter_api_key: str | None = Field(default=None, validation_alias="OPENROUTER_API_KEY")
	openrouter_model: str = Field(default="x-ai/grok-4-fast:free", validation_alias="OPENROUTER_MODEL")
	openrouter_base_url: str = Field(default="https://openrouter.ai/api/v1/chat/completions", validation_alias="OPENROUTER_BASE_URL")
	openrouter_referer: str = Field(default="https://localhost", validation_alias="OPENROUTER_HTTP_REFERER")
	openrouter_title: str = Field(default="EduBridge", validation_alias="OPENROUTER_TITLE")

	log_level: str = Field(default="INFO", validation_alias="LOG_LEVEL")

	# Database (shared remote translation dictionary)
	database_url: str | None = Field(default=None, validation_alias="DATABASE_URL")

	# pydantic-settings v2 style config
	model_config = SettingsConfigDict(env_file=".env", extra="ignore")

settings = Settings()
