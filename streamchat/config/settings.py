# streamchat/config/settings.py
from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic import SecretStr, ValidationError, model_validator
from pathlib import Path
import logging
from typing import Optional, Dict

from streamchat.agent.structs import ProviderDescriptor
from streamchat.exceptions.config import ConfigError

logger = logging.getLogger("Settings")

REQUIRED_ENDPOINT = "chat"


def parse_api_table(raw: str) -> Dict[str, str]:
    """
    Parse ``APIS`` into a name -> path table.

    Format is comma-separated ``name:path`` pairs, e.g.
    ``chat:/v1/chat/completions,list:/v1/models``. Malformed entries are
    skipped with a warning.
    """
    apis: Dict[str, str] = {}
    for entry in raw.split(","):
        entry = entry.strip()
        if not entry:
            continue
        name, sep, path = entry.partition(":")
        name, path = name.strip(), path.strip()
        if not sep:
            logger.warning(
                "API entry missing path in APIS: '%s'. Requires 'key:path' format.",
                entry,
            )
            continue
        if not name or not path:
            logger.warning("Skipping malformed API entry in APIS: '%s'", entry)
            continue
        apis[name] = path
    return apis


class Settings(BaseSettings):
    # === Environment Variables (same names as the .env examples) ===
    api_key: SecretStr
    api_url_base: str
    apis: str
    model: str
    model_provider: str = ""
    system_prompt: str = ""
    max_context_tokens: int = 32000
    request_timeout: float = 420.0
    log_level: str = "WARNING"
    log_file: Optional[Path] = None

    # === Computed Fields ===
    endpoints: Optional[Dict[str, str]] = None

    # === Pydantic V2 Configuration ===
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        # NO prefix - clean names match exactly
        extra="ignore",
        case_sensitive=False,
        protected_namespaces=(),
    )

    # === Model Validator ===

    @model_validator(mode="after")
    def validate_and_compute(self) -> "Settings":
        """Validate and compute derived fields."""

        # 1. Required values must not be blank
        if not self.api_key.get_secret_value().strip():
            raise ConfigError("API_KEY environment variable not set.", field_name="api_key")
        if not self.api_url_base.strip():
            raise ConfigError(
                "API_URL_BASE environment variable not set.", field_name="api_url_base"
            )
        if not self.model.strip():
            raise ConfigError("MODEL environment variable not set.", field_name="model")

        # Trailing slash removed so paths from APIS can be appended directly
        self.api_url_base = self.api_url_base.strip().rstrip("/")

        # 2. Endpoint table
        self.endpoints = parse_api_table(self.apis)
        if REQUIRED_ENDPOINT not in self.endpoints:
            raise ConfigError(
                "APIS environment variable must contain a 'chat' endpoint "
                "(e.g., 'chat:/v1/chat/completions').",
                field_name="apis",
                invalid_value=self.apis,
            )

        # 3. Budget and timeout
        if self.max_context_tokens <= 0:
            raise ConfigError(
                f"MAX_CONTEXT_TOKENS must be positive. Got: {self.max_context_tokens}",
                field_name="max_context_tokens",
                invalid_value=self.max_context_tokens,
            )
        if self.request_timeout <= 0:
            raise ConfigError(
                f"REQUEST_TIMEOUT must be positive. Got: {self.request_timeout}",
                field_name="request_timeout",
                invalid_value=self.request_timeout,
            )

        # 4. Validate log level
        if self.log_level.upper() not in logging._nameToLevel:
            raise ConfigError(f"Invalid log level: {self.log_level}", field_name="log_level")
        self.log_level = self.log_level.upper()

        return self

    def provider_descriptor(self) -> ProviderDescriptor:
        """Immutable view handed to the transport and to commands."""
        return ProviderDescriptor(
            provider=self.model_provider,
            url_base=self.api_url_base,
            api_key=self.api_key,
            apis=dict(self.endpoints or {}),
            model=self.model,
        )


def load_settings(env_file: Optional[Path] = Path(".env")) -> Settings:
    """
    Build Settings from the environment and an optional .env file.

    Raises:
        ConfigError: If a required variable is missing or a value is invalid
    """
    if env_file is not None and not env_file.exists():
        logger.warning(
            "No .env file found at %s, using environment variables directly.", env_file
        )
        env_file = None

    try:
        return Settings(_env_file=env_file)
    except ValidationError as e:
        missing = [
            str(err["loc"][0]).upper() for err in e.errors() if err.get("type") == "missing"
        ]
        if missing:
            raise ConfigError(
                f"Missing required environment variable(s): {', '.join(missing)}"
            ) from e
        raise ConfigError(f"Invalid configuration: {e}") from e
