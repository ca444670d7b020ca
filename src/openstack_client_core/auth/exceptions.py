"""Exceptions raised while resolving configuration from the environment.

Example:
    ```python
    from openstack_client_core.auth.exceptions import MissingEnvironmentVariableError

    if not auth_url:
        raise MissingEnvironmentVariableError("OS_AUTH_URL")
    ```
"""


class CredentialError(Exception):
    """Base exception for configuration and credential errors.

    All credential-specific exceptions inherit from this class,
    making it easy to catch any credential-related error.
    """

    pass


class MissingEnvironmentVariableError(CredentialError):
    """Raised when a required environment variable is not set.

    Attributes:
        env_var_name: The environment variable that was checked.
    """

    def __init__(self, env_var_name: str):
        super().__init__(f"Missing environment variable [{env_var_name}]")
        self.env_var_name = env_var_name


class MissingAnyoneOfEnvironmentVariablesError(CredentialError):
    """Raised when none of a set of alternative environment variables is set.

    Example:
        ```python
        try:
            user = resolver.resolve_any("OS_USERID", "OS_USERNAME", required=True)
        except MissingAnyoneOfEnvironmentVariablesError as e:
            print(f"Set one of: {', '.join(e.env_var_names)}")
        ```
    """

    def __init__(self, *env_var_names: str):
        super().__init__(f"Missing one of the following environment variables [{', '.join(env_var_names)}]")
        self.env_var_names = env_var_names
