"""API key lookup for LLM providers.

A credential provider is any callable that returns the API key or None.
The default one checks, in order:
1. Environment variable (after loading a .env file from the working directory)
2. ~/.stagescribe/credentials
"""

import logging
import os
from typing import Callable, Optional

from dotenv import load_dotenv

from stagescribe import global_config
from stagescribe.config import API_KEY_ENV_VARS, LLMProvider

logger = logging.getLogger(__name__)

CredentialProvider = Callable[[], Optional[str]]


class EnvironmentCredentials:
    """Resolve the API key of one provider from the environment or credentials file."""

    def __init__(self, provider: LLMProvider, load_env_file: bool = True):
        self.provider = provider
        self.env_var = API_KEY_ENV_VARS[provider]
        self.load_env_file = load_env_file

    def __call__(self) -> Optional[str]:
        if self.load_env_file:
            load_dotenv()

        api_key = os.getenv(self.env_var)
        if api_key:
            logger.debug("Using %s from environment", self.env_var)
            return api_key

        api_key = global_config.get_credential(self.env_var)
        if api_key:
            logger.debug("Using %s from %s", self.env_var, global_config.get_credentials_file_path())
            return api_key

        return None


def missing_key_message(provider: LLMProvider) -> str:
    """Explain how to provide the API key for a provider."""
    env_var = API_KEY_ENV_VARS[provider]
    return (
        f"{provider.value} API key not found. Set it using:\n"
        f"  1. Environment variable: export {env_var}=your_key_here\n"
        f"  2. Run: stagescribe config set-key {provider.value}\n"
        f"  3. Manually add {env_var}=... to ~/.stagescribe/credentials"
    )
