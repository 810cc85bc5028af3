"""
Configuration management for the MCS builder
"""

import os
from pathlib import Path
from typing import Dict, Literal, Optional

from dotenv import dotenv_values, set_key
from pydantic import Field, SecretStr
from pydantic_settings import BaseSettings

from .logging_config import get_logger

logger = get_logger(__name__)

API_KEY_ENV = "CLAUDE_API_KEY"
MODEL_ENV = "CLAUDE_MODEL"
DEFAULT_MODEL = "claude-3-5-sonnet-20240620"
DEFAULT_CONFIG_DIR = Path.home() / ".config" / "mcs_builder"

# Keys kept in the persisted settings file
PERSISTED_KEYS = ("api_key", "model")


class BuilderConfig(BaseSettings):
    """Configuration for the Claude client, command store and execution engine"""

    # Claude API configuration
    api_key: Optional[SecretStr] = Field(default=None, description="Anthropic API key")
    model: str = Field(default=DEFAULT_MODEL, description="Claude model identifier")
    api_url: str = Field(default="https://api.anthropic.com/v1/messages", description="Messages endpoint")
    anthropic_version: str = Field(default="2023-06-01", description="Value of the anthropic-version header")
    max_tokens: int = Field(default=8192, description="Maximum tokens in a model reply")
    connect_timeout_s: float = Field(default=30.0, description="HTTP connect timeout in seconds")
    request_timeout_s: float = Field(default=60.0, description="Overall HTTP request timeout in seconds")

    # Build configuration
    build_mode: Literal["text", "blocks"] = Field(
        default="text", description="Request style: 'text' (generate_mcs) or 'blocks' (place_blocks)"
    )
    max_rounds: int = Field(default=5, ge=1, description="Maximum API rounds per build")
    continuation_tail_chars: int = Field(default=200, description="Trailing reply text carried into a continuation")

    # Execution configuration
    command_delay_ms: int = Field(default=5, ge=0, description="Pause between world commands in milliseconds")
    progress_interval: int = Field(default=100, ge=1, description="Report progress every N commands")
    placement_progress_interval: int = Field(default=50, ge=1, description="Report progress every N placements")
    max_concurrent_runs: int = Field(default=4, ge=1, description="Maximum executions running at once")

    # Storage configuration
    mcs_dir: str = Field(default="mcs_files", description="Directory for stored MCS command files")
    config_dir: str = Field(default=str(DEFAULT_CONFIG_DIR), description="Directory of the persisted settings file")

    # Minecraft server configuration
    rcon_host: str = Field(default="localhost", description="Minecraft RCON host")
    rcon_port: int = Field(default=25575, description="Minecraft RCON port")
    rcon_password: Optional[SecretStr] = Field(default=None, description="Minecraft RCON password")
    minecraft_version: str = Field(default="1.21.1", description="Minecraft data version for block lookups")

    # Logging configuration
    log_level: str = Field(default="INFO", description="Logging level (DEBUG, INFO, WARNING, ERROR)")
    log_file: Optional[str] = Field(default=None, description="Log file name (None for timestamped name)")
    log_dir: str = Field(default="logs", description="Directory for log files")
    log_json_format: bool = Field(default=False, description="Use JSON format for console logs")

    class Config:
        env_file = ".env"
        env_prefix = "CLAUDE_"
        case_sensitive = False
        extra = "ignore"

    def get_api_key(self) -> Optional[str]:
        """Current API key, the environment variable taking precedence at read time"""
        env_key = os.getenv(API_KEY_ENV)
        if env_key:
            return env_key
        if self.api_key is None:
            return None
        return self.api_key.get_secret_value() or None

    def get_model(self) -> str:
        """Current model identifier, the environment variable taking precedence"""
        return os.getenv(MODEL_ENV) or self.model


class SettingsStore:
    """Key-value settings file holding the API key and model"""

    def __init__(self, config_dir: Optional[str] = None):
        self.config_dir = Path(config_dir) if config_dir else DEFAULT_CONFIG_DIR
        self.path = self.config_dir / "config.env"

    def ensure_exists(self) -> None:
        """Create the settings file, seeded from the environment, if it is missing"""
        if self.path.exists():
            return

        self.config_dir.mkdir(parents=True, exist_ok=True)
        env_key = os.getenv(API_KEY_ENV, "")
        env_model = os.getenv(MODEL_ENV, DEFAULT_MODEL)

        self.path.write_text(
            "# MCS builder configuration\n"
            f"# You can also set {API_KEY_ENV} and {MODEL_ENV} environment variables\n",
            encoding="utf-8",
        )
        set_key(str(self.path), "api_key", env_key, quote_mode="never")
        set_key(str(self.path), "model", env_model, quote_mode="never")

        if env_key:
            logger.info("Created config file with API key from environment variable", path=str(self.path))
        else:
            logger.info(
                f"Created default config file (API key not set - use the key command or set {API_KEY_ENV})",
                path=str(self.path),
            )

    def load(self) -> Dict[str, str]:
        """Read persisted values, ignoring keys this store does not manage"""
        if not self.path.exists():
            return {}
        values = dotenv_values(self.path)
        return {key: value for key, value in values.items() if key in PERSISTED_KEYS and value}

    def save(self, key: str, value: str) -> None:
        if key not in PERSISTED_KEYS:
            raise KeyError(f"Unknown setting: {key}")
        self.ensure_exists()
        set_key(str(self.path), key, value, quote_mode="never")
        logger.info("Saved setting to config file", key=key, path=str(self.path))

    def save_api_key(self, api_key: str) -> None:
        self.save("api_key", api_key)


def load_config(config_dir: Optional[str] = None, **overrides) -> BuilderConfig:
    """Build the configuration: defaults < persisted settings < environment < overrides

    Args:
        config_dir: Directory of the persisted settings file
        **overrides: Explicit field values (e.g. from command line flags)

    Returns:
        BuilderConfig instance
    """
    directory = config_dir or os.getenv("CLAUDE_CONFIG_DIR") or str(DEFAULT_CONFIG_DIR)
    store = SettingsStore(directory)
    store.ensure_exists()

    stored = store.load()
    # Environment values must win over the persisted file
    values = {
        key: value for key, value in stored.items() if not os.getenv(f"CLAUDE_{key.upper()}")
    }
    values["config_dir"] = directory
    values.update(overrides)

    config = BuilderConfig(**values)
    if config.get_api_key():
        source = "environment" if os.getenv(API_KEY_ENV) else "config file"
        logger.info("Loaded Claude API key", source=source)
    else:
        logger.warning(
            f"Claude API key not found in config file or environment. "
            f"Set it with the key command or the {API_KEY_ENV} environment variable."
        )
    return config
