import os
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, Optional, Union

import dotenv

from .errors import ConfigurationError

DEFAULT_BASE_URL = "https://api.anthropic.com/v1/messages"
DEFAULT_API_KEY_ENV = "CLAUDE_TOKEN"
# API standard edition, does not influence model versions
DEFAULT_API_VERSION = "2023-06-01"
# Allows for 128k output tokens on newer models
DEFAULT_BETA = "output-128k-2025-02-19"
DEFAULT_TIMEOUT = 600.0


@dataclass(frozen=True)
class Settings:
    """
    Client configuration, built once and handed to the Client.

    Attributes:
        api_key: Explicit credential. When unset, the variable named by
                 ``api_key_env`` is read at call time.
        api_key_env: Environment variable holding the credential.
        base_url: Messages endpoint.
        api_version: Value of the ``anthropic-version`` header.
        beta: Value of the ``anthropic-beta`` header (omitted when empty).
        timeout: Timeout in seconds handed to the HTTP transport.
    """
    api_key: Optional[str] = None
    api_key_env: str = DEFAULT_API_KEY_ENV
    base_url: str = DEFAULT_BASE_URL
    api_version: str = DEFAULT_API_VERSION
    beta: Optional[str] = DEFAULT_BETA
    timeout: Optional[float] = DEFAULT_TIMEOUT

    @classmethod
    def from_env(
        cls,
        env_file: Optional[Union[str, Path]] = None,
        **overrides,
    ) -> "Settings":
        """
        Load settings from the process environment.

        A ``.env`` file is loaded first (without overriding variables that are
        already set). Recognised variables: the credential variable
        (``CLAUDE_TOKEN`` by default), ``ASK_LLM_BASE_URL`` and
        ``ASK_LLM_TIMEOUT``.

        Args:
            env_file: Path of the .env file. Defaults to searching upwards
                      from the working directory.
            **overrides: Field values that take precedence over the environment.

        Raises:
            ConfigurationError: If ASK_LLM_TIMEOUT is not a number.
        """
        dotenv.load_dotenv(env_file or dotenv.find_dotenv(usecwd=True))

        values: Dict[str, object] = {}
        api_key_env = overrides.get("api_key_env", DEFAULT_API_KEY_ENV)
        if os.environ.get(api_key_env):
            values["api_key"] = os.environ[api_key_env]
        if os.environ.get("ASK_LLM_BASE_URL"):
            values["base_url"] = os.environ["ASK_LLM_BASE_URL"]
        if os.environ.get("ASK_LLM_TIMEOUT"):
            raw_timeout = os.environ["ASK_LLM_TIMEOUT"]
            try:
                values["timeout"] = float(raw_timeout)
            except ValueError:
                raise ConfigurationError(f"ASK_LLM_TIMEOUT must be a number, got {raw_timeout!r}") from None

        values.update(overrides)
        return cls(**values)

    def resolve_api_key(self) -> str:
        """
        Return the credential, reading the environment if none was given.

        Raises:
            ConfigurationError: If no credential is available.
        """
        api_key = self.api_key or os.environ.get(self.api_key_env)
        if not api_key:
            raise ConfigurationError(f"{self.api_key_env} environment variable not set")
        return api_key

    def headers(self) -> Dict[str, str]:
        """
        Build the request headers, including the credential.

        Raises:
            ConfigurationError: If no credential is available.
        """
        headers = {
            "x-api-key": self.resolve_api_key(),
            "anthropic-version": self.api_version,
            "content-type": "application/json",
        }
        if self.beta:
            headers["anthropic-beta"] = self.beta
        return headers
