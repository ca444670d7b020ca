"""Configuration and identity options.

This module provides:
- Multi-source setting resolution (value → env → .env → default)
- AuthOptions built from the standard ``OS_*`` environment variables

Example:
    ```python
    from openstack_client_core.auth import auth_options_from_env

    options = auth_options_from_env()
    body = options.to_token_v2_create_map()
    ```
"""

from openstack_client_core.auth.credentials import CredentialResolver
from openstack_client_core.auth.exceptions import (
    CredentialError,
    MissingAnyoneOfEnvironmentVariablesError,
    MissingEnvironmentVariableError,
)
from openstack_client_core.auth.options import AuthOptions, auth_options_from_env

__all__ = [
    "AuthOptions",
    "CredentialError",
    "CredentialResolver",
    "MissingAnyoneOfEnvironmentVariablesError",
    "MissingEnvironmentVariableError",
    "auth_options_from_env",
]
