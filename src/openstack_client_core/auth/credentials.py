"""Resolve OpenStack settings from explicit values, the environment and .env files.

Resolution order (highest to lowest priority):
1. Explicitly provided value
2. Environment variable (including values loaded from a .env file)
3. Default value

Example:
    ```python
    from openstack_client_core.auth import CredentialResolver

    resolver = CredentialResolver()
    auth_url = resolver.resolve(env_var_name="OS_AUTH_URL", required=True)
    project = resolver.resolve_any("OS_TENANT_ID", "OS_PROJECT_ID")
    ```

Credentials are never logged in full; only the source is.
"""

import logging
import os
from threading import Lock

from dotenv import load_dotenv

from openstack_client_core.auth.exceptions import (
    MissingAnyoneOfEnvironmentVariablesError,
    MissingEnvironmentVariableError,
)

logger = logging.getLogger(__name__)


class CredentialResolver:
    """Resolve settings from multiple sources with priority ordering.

    Args:
        dotenv_path: Path to a .env file. If None, python-dotenv searches
            parent directories.
        load_dotenv: Whether to load a .env file at all.

    Attributes:
        _dotenv_loaded: Whether .env file has been loaded.
        _dotenv_lock: Thread lock for safe dotenv loading.
    """

    def __init__(self, dotenv_path: str | None = None, load_dotenv: bool = True):
        self._dotenv_loaded = False
        self._dotenv_lock = Lock()
        self._dotenv_path = dotenv_path

        if load_dotenv:
            self._ensure_dotenv_loaded()

    def _ensure_dotenv_loaded(self) -> None:
        if self._dotenv_loaded:
            return

        with self._dotenv_lock:
            if self._dotenv_loaded:
                return

            # Variables already in the environment win over the file
            load_dotenv(dotenv_path=self._dotenv_path, override=False)
            self._dotenv_loaded = True
            logger.debug("Loaded .env file for credential resolution")

    def resolve(
        self,
        *,
        value: str | None = None,
        env_var_name: str | None = None,
        default: str | None = None,
        required: bool = False,
    ) -> str | None:
        """Resolve one setting.

        Empty environment variables count as unset.

        Args:
            value: Explicit value; wins over everything else
            env_var_name: Environment variable to read
            default: Value used when nothing else is set
            required: Raise when nothing resolves

        Raises:
            MissingEnvironmentVariableError: if required and not found
        """
        result = None
        source = None

        if value is not None:
            result = value
            source = "explicit parameter"
        elif env_var_name and os.environ.get(env_var_name):
            result = os.environ[env_var_name]
            source = f"environment variable '{env_var_name}'"
        elif default is not None:
            result = default
            source = "default value"

        if result is not None:
            logger.debug(f"Resolved {env_var_name or 'setting'} from {source}: ***")

        if required and result is None:
            raise MissingEnvironmentVariableError(env_var_name or "<unnamed>")

        return result

    def resolve_any(self, *env_var_names: str, required: bool = False) -> str | None:
        """Return the first non-empty variable among ``env_var_names``.

        Raises:
            MissingAnyoneOfEnvironmentVariablesError: if required and none is set
        """
        for name in env_var_names:
            result = self.resolve(env_var_name=name)
            if result is not None:
                return result

        if required:
            raise MissingAnyoneOfEnvironmentVariablesError(*env_var_names)
        return None
