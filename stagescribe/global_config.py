"""Global configuration management for stagescribe.

Handles user-level configuration stored in ~/.stagescribe/:
- config.yaml: Provider, model, prompt and diff settings
- credentials: API keys for LLM providers (KEY=value lines)
"""

import os
import stat
from pathlib import Path
from typing import Any, Dict, Optional

import yaml
from dotenv import dotenv_values, set_key

from stagescribe.config import (
    DEFAULT_EXCLUDE_PATTERNS,
    DEFAULT_LANGUAGE,
    DEFAULT_MAX_TOKENS,
    DEFAULT_ON_EMPTY,
    DEFAULT_PROVIDER,
    DEFAULT_SHAPE,
    DEFAULT_TEMPERATURE,
    DEFAULT_TEMPLATE,
    CallShape,
    LLMProvider,
)


class GlobalConfigError(Exception):
    """Raised when there's an error with global configuration."""
    pass


_CONFIG_DIR = Path.home() / ".stagescribe"

_CREDENTIALS_HEADER = (
    "# stagescribe API credentials\n"
    "# Format: PROVIDER_API_KEY=your_key_here\n"
)


def get_global_config_dir() -> Path:
    """Get the global configuration directory (~/.stagescribe/)."""
    return _CONFIG_DIR


def ensure_global_config_dir() -> Path:
    """Create the global configuration directory if needed and return it."""
    config_dir = get_global_config_dir()
    config_dir.mkdir(parents=True, exist_ok=True)
    return config_dir


def get_config_file_path() -> Path:
    return get_global_config_dir() / "config.yaml"


def get_credentials_file_path() -> Path:
    return get_global_config_dir() / "credentials"


def load_global_config() -> Dict[str, Any]:
    """Load global configuration from ~/.stagescribe/config.yaml.

    Returns:
        Dictionary with configuration values. Empty dict if file doesn't exist.

    Raises:
        GlobalConfigError: If the file cannot be read or is not a mapping.
    """
    config_file = get_config_file_path()

    if not config_file.exists():
        return {}

    try:
        with open(config_file, "r") as f:
            config = yaml.safe_load(f) or {}
    except (OSError, yaml.YAMLError) as e:
        raise GlobalConfigError(f"Failed to load config from {config_file}: {e}")

    if not isinstance(config, dict):
        raise GlobalConfigError(f"Config file {config_file} must contain a mapping")
    return config


def save_global_config(config: Dict[str, Any]) -> None:
    """Save global configuration to ~/.stagescribe/config.yaml."""
    ensure_global_config_dir()
    config_file = get_config_file_path()

    try:
        with open(config_file, "w") as f:
            yaml.safe_dump(config, f, default_flow_style=False, sort_keys=False)
    except (OSError, yaml.YAMLError) as e:
        raise GlobalConfigError(f"Failed to save config to {config_file}: {e}")


def load_credentials() -> Dict[str, str]:
    """Load API keys from ~/.stagescribe/credentials.

    Returns:
        Dictionary mapping environment variable names to API keys.
    """
    credentials_file = get_credentials_file_path()

    if not credentials_file.exists():
        return {}

    try:
        values = dotenv_values(credentials_file)
    except OSError as e:
        raise GlobalConfigError(f"Failed to load credentials from {credentials_file}: {e}")

    return {key: value for key, value in values.items() if value}


def save_credential(env_var: str, api_key: str) -> None:
    """Save or update an API key in the credentials file.

    The file is readable and writable by the owner only.

    Args:
        env_var: Environment variable name (e.g., "OPENAI_API_KEY").
        api_key: The API key value.
    """
    ensure_global_config_dir()
    credentials_file = get_credentials_file_path()

    try:
        if not credentials_file.exists():
            credentials_file.write_text(_CREDENTIALS_HEADER)
        set_key(credentials_file, env_var, api_key, quote_mode="never")
        os.chmod(credentials_file, stat.S_IRUSR | stat.S_IWUSR)
    except OSError as e:
        raise GlobalConfigError(f"Failed to save credential: {e}")


def get_credential(env_var: str) -> Optional[str]:
    """Get an API key from the credentials file, or None if absent."""
    return load_credentials().get(env_var)


def set_provider_and_model(provider: LLMProvider, model: str, shape: Optional[CallShape] = None) -> None:
    """Set the active provider, model and (optionally) call shape."""
    config = load_global_config()
    config["provider"] = provider.value
    config["model"] = model
    if shape is not None:
        config["shape"] = shape.value
    save_global_config(config)


def initialize_default_config() -> bool:
    """Write config.yaml with default values if it doesn't exist.

    Returns:
        True if a new file was written.
    """
    if is_configured():
        return False

    default_config = {
        "provider": DEFAULT_PROVIDER.value,
        "shape": DEFAULT_SHAPE.value,
        "max_tokens": DEFAULT_MAX_TOKENS,
        "temperature": DEFAULT_TEMPERATURE,
        "template": DEFAULT_TEMPLATE,
        "language": DEFAULT_LANGUAGE,
        "file_headers": True,
        "on_empty": DEFAULT_ON_EMPTY.value,
        "exclude": list(DEFAULT_EXCLUDE_PATTERNS),
    }

    save_global_config(default_config)
    return True


def is_configured() -> bool:
    """Check whether ~/.stagescribe/config.yaml exists."""
    return get_config_file_path().exists()
