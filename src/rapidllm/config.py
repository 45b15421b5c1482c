"""Settings loaded from the environment, plus the fixed config root under the user's home."""

from __future__ import annotations

from pathlib import Path

from pydantic import AliasChoices, Field, SecretStr, ValidationError, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from rapidllm.errors import ConfigurationError, CredentialError
from rapidllm.logger import logger

DEFAULT_ENDPOINT = "https://openrouter.ai/api/v1/chat/completions"
DEFAULT_MODEL = "thudm/glm-4-32b:free"
DEFAULT_CHARACTER_LIMIT = 16384
API_KEY_ENV = "OPENROUTER_API_KEY"


def default_config_dir() -> Path:
    """Return `~/.config/rapidllm` for the current user."""
    return Path.home() / ".config" / "rapidllm"


class Settings(BaseSettings):
    """Runtime settings for `rlm`. Snapshots are immutable."""

    model_config = SettingsConfigDict(env_prefix="RAPIDLLM_", extra="ignore", frozen=True, populate_by_name=True)

    api_key: SecretStr | None = Field(default=None, validation_alias=AliasChoices(API_KEY_ENV, "RAPIDLLM_API_KEY"))
    endpoint: str = DEFAULT_ENDPOINT
    default_model: str = DEFAULT_MODEL
    character_limit: int = Field(default=DEFAULT_CHARACTER_LIMIT, gt=0)
    config_dir: Path = Field(default_factory=default_config_dir)

    @field_validator("config_dir", mode="after")
    @classmethod
    def expand_config_dir(cls, path: Path) -> Path:
        return path.expanduser()

    @property
    def prompts_root(self) -> Path:
        return self.config_dir / "prompts"

    @property
    def api_key_file(self) -> Path:
        return self.config_dir / "openrouter" / "api_key"


def load_settings(**overrides) -> Settings:
    """Build a settings snapshot from the environment, applying explicit overrides on top."""
    try:
        return Settings(**{key: value for key, value in overrides.items() if value is not None})
    except ValidationError as exc:
        raise ConfigurationError(f"Invalid settings: {exc}") from exc
    except RuntimeError as exc:
        # Path.home() fails when no home directory can be determined.
        raise ConfigurationError(str(exc)) from exc


def get_api_key(settings: Settings) -> str:
    """Return the API credential.

    The environment variable wins. Without it, the key file under the config
    directory is read and stripped.

    Raises:
        CredentialError: If neither source yields a non-empty key.
    """
    if settings.api_key is not None:
        key = settings.api_key.get_secret_value().strip()
        if not key:
            raise CredentialError(f"{API_KEY_ENV} is set but empty")
        return key

    path = settings.api_key_file
    try:
        key = path.read_text(encoding="utf-8").strip()
    except FileNotFoundError:
        raise CredentialError(f"{API_KEY_ENV} is not set and {path} does not exist") from None
    except (OSError, UnicodeDecodeError) as exc:
        raise CredentialError(f"Could not read {path}: {exc}") from exc

    if not key:
        raise CredentialError(f"{path} is empty")

    logger.debug(f"Read API key from {path}")
    return key
