"""Identity options and their standard ``OS_*`` environment variables."""

from dataclasses import dataclass
from typing import Any

from openstack_client_core.auth.credentials import CredentialResolver
from openstack_client_core.auth.exceptions import (
    MissingAnyoneOfEnvironmentVariablesError,
    MissingEnvironmentVariableError,
)
from openstack_client_core.params import build_request_body, opt


@dataclass
class AuthOptions:
    """Credentials and scope used to obtain a keystone token.

    Not every field applies to every identity API version; the token request
    builders pick the ones they support.
    """

    identity_endpoint: str = ""
    username: str = ""
    user_id: str = ""
    password: str = ""
    passcode: str = ""
    tenant_id: str = ""
    tenant_name: str = ""
    domain_id: str = ""
    domain_name: str = ""
    application_credential_id: str = ""
    application_credential_name: str = ""
    application_credential_secret: str = ""
    system_scope: bool = False
    allow_reauth: bool = False
    token_id: str = ""

    def to_token_v2_create_map(self) -> dict[str, Any]:
        """Build the identity v2 ``POST /tokens`` body.

        Raises:
            MissingInputError: if neither a username/password pair nor a token is given
        """
        request = _TokenV2Request(tenant_id=self.tenant_id, tenant_name=self.tenant_name)
        if self.username:
            request.password_credentials = _PasswordCredentials(username=self.username, password=self.password)
        elif self.token_id:
            request.token_credentials = _TokenCredentials(id=self.token_id)
        return build_request_body(request, "auth")


@dataclass
class _PasswordCredentials:
    username: str = opt(json="username", required=True)
    password: str = opt(json="password", required=True)


@dataclass
class _TokenCredentials:
    id: str = opt(json="id", required=True)


@dataclass
class _TokenV2Request:
    password_credentials: _PasswordCredentials | None = opt(json="passwordCredentials", xor="token_credentials")
    tenant_id: str = opt(json="tenantId")
    tenant_name: str = opt(json="tenantName")
    token_credentials: _TokenCredentials | None = opt(json="token", xor="password_credentials")


def auth_options_from_env(resolver: CredentialResolver | None = None) -> AuthOptions:
    """Build AuthOptions from the standard ``OS_*`` environment variables.

    ``OS_PROJECT_ID`` and ``OS_PROJECT_NAME`` take precedence over the older
    ``OS_TENANT_ID`` and ``OS_TENANT_NAME``.

    Raises:
        MissingEnvironmentVariableError: if OS_AUTH_URL (or another mandatory
            variable for the chosen auth method) is missing
        MissingAnyoneOfEnvironmentVariablesError: if no alternative of a
            mandatory group is set
    """
    resolver = resolver or CredentialResolver()

    def env(name: str) -> str:
        return resolver.resolve(env_var_name=name) or ""

    auth_url = resolver.resolve(env_var_name="OS_AUTH_URL", required=True)
    username = env("OS_USERNAME")
    user_id = env("OS_USERID")
    password = env("OS_PASSWORD")
    passcode = env("OS_PASSCODE")
    tenant_id = resolver.resolve_any("OS_PROJECT_ID", "OS_TENANT_ID") or ""
    tenant_name = resolver.resolve_any("OS_PROJECT_NAME", "OS_TENANT_NAME") or ""
    domain_id = env("OS_DOMAIN_ID")
    domain_name = env("OS_DOMAIN_NAME")
    app_cred_id = env("OS_APPLICATION_CREDENTIAL_ID")
    app_cred_name = env("OS_APPLICATION_CREDENTIAL_NAME")
    app_cred_secret = env("OS_APPLICATION_CREDENTIAL_SECRET")
    system_scope = env("OS_SYSTEM_SCOPE")

    # An application credential ID or secret replaces the user
    if not user_id and not username and not app_cred_id and not app_cred_secret:
        raise MissingAnyoneOfEnvironmentVariablesError("OS_USERID", "OS_USERNAME")

    if not password and not passcode and not app_cred_id and not app_cred_name:
        raise MissingAnyoneOfEnvironmentVariablesError("OS_PASSWORD", "OS_PASSCODE")

    if (app_cred_id or app_cred_name) and not app_cred_secret:
        raise MissingEnvironmentVariableError("OS_APPLICATION_CREDENTIAL_SECRET")

    if not domain_id and not domain_name and not tenant_id and tenant_name:
        raise MissingEnvironmentVariableError("OS_PROJECT_ID")

    if not app_cred_id and app_cred_name and app_cred_secret:
        if not user_id and not username:
            raise MissingAnyoneOfEnvironmentVariablesError("OS_USERID", "OS_USERNAME")
        if username and not domain_id and not domain_name:
            raise MissingAnyoneOfEnvironmentVariablesError("OS_DOMAIN_ID", "OS_DOMAIN_NAME")

    return AuthOptions(
        identity_endpoint=auth_url,
        username=username,
        user_id=user_id,
        password=password,
        passcode=passcode,
        tenant_id=tenant_id,
        tenant_name=tenant_name,
        domain_id=domain_id,
        domain_name=domain_name,
        application_credential_id=app_cred_id,
        application_credential_name=app_cred_name,
        application_credential_secret=app_cred_secret,
        system_scope=system_scope == "all",
    )
