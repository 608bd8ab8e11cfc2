from pydantic import BaseModel, Field
import os

TRUTHY = {"1", "true", "yes", "on"}
FALSY = {"0", "false", "no", "off"}

# Secret each LLM provider needs before a task may run.
PROVIDER_SECRETS = {
    "anthropic": "ANTHROPIC_API_KEY",
    "openai": "OPENAI_API_KEY",
}


def _env(key: str, default=None):
    return lambda: os.getenv(key, default)


class Settings(BaseModel):
    database_url: str = Field(default_factory=_env(
        "DATABASE_URL", "jdbc:trino://localhost:8080/postgresql/public?user=agent"))
    restricted_context: str | None = Field(default_factory=_env("RESTRICTED_CONTEXT"))
    deployment_target: str | None = Field(default_factory=_env("VERCEL"))
    environment: str = Field(default_factory=lambda: os.getenv("APP_ENV") or os.getenv("NODE_ENV") or "development")
    llm_provider: str = Field(default_factory=_env("LLM_PROVIDER", "anthropic"))
    llm_model: str = Field(default_factory=_env("LLM_MODEL", "claude-3-5-sonnet-20241022"))
    anthropic_api_key: str | None = Field(default_factory=_env("ANTHROPIC_API_KEY"))
    anthropic_base_url: str = Field(default_factory=_env("ANTHROPIC_BASE_URL", "https://api.anthropic.com"))
    openai_api_key: str | None = Field(default_factory=_env("OPENAI_API_KEY"))
    ollama_base_url: str = Field(default_factory=_env("OLLAMA_BASE_URL", "http://localhost:11434"))
    llm_timeout_seconds: int = Field(default_factory=lambda: int(os.getenv("LLM_TIMEOUT_SECONDS", 120)))
    llm_max_tokens: int = Field(default_factory=lambda: int(os.getenv("LLM_MAX_TOKENS", 2048)))
    log_level: str = Field(default_factory=_env("LOG_LEVEL", "INFO"))

    def is_restricted_execution_context(self) -> bool:
        """True when direct database sockets are disallowed (serverless target or production)."""
        flag = (self.restricted_context or "").strip().lower()
        if flag in TRUTHY:
            return True
        if flag in FALSY:
            return False
        if self.deployment_target:
            return True
        return self.environment.strip().lower() == "production"

    def missing_credential_name(self) -> str | None:
        secret = PROVIDER_SECRETS.get(self.provider)
        if secret is None:
            return None
        value = self.anthropic_api_key if secret == "ANTHROPIC_API_KEY" else self.openai_api_key
        return None if value else secret

    def has_model_credentials(self) -> bool:
        return self.missing_credential_name() is None

    @property
    def provider(self) -> str:
        return self.llm_provider.strip().lower()
