"""Ready-made token resolvers for HttpClient.

A token resolver is a callable taking no arguments that returns the bearer
token to send, either directly or as an awaitable. HttpClient calls it once
per request, so resolvers that read the environment or a file pick up
rotated tokens without rebuilding the client.

Example:
    ```python
    from request_facade import HttpClient
    from request_facade.auth import env_token_resolver

    client = HttpClient(token_resolver=env_token_resolver("API_TOKEN"))
    ```
"""

from collections.abc import Awaitable, Callable
from pathlib import Path

from request_facade.auth.credentials import CredentialResolver

TokenResolver = Callable[[], Awaitable[str] | str]


def static_token_resolver(token: str) -> TokenResolver:
    """Return a resolver that always yields the same token."""

    async def resolve() -> str:
        return token

    return resolve


def env_token_resolver(
    env_var_name: str,
    *,
    default: str | None = None,
    resolver: CredentialResolver | None = None,
) -> TokenResolver:
    """Return a resolver reading the token from an environment variable.

    Args:
        env_var_name: Environment variable holding the token
        default: Token to use when the variable is not set
        resolver: CredentialResolver to use (default: a new one loading .env)

    Raises (when called):
        CredentialNotFoundError: The variable is not set and there is no default.
    """
    credentials = resolver or CredentialResolver()

    async def resolve() -> str:
        return credentials.resolve(env_var_name=env_var_name, default=default, required=True)

    return resolve


def file_token_resolver(
    *,
    file_path: str | Path | None = None,
    env_var_name: str | None = None,
    resolver: CredentialResolver | None = None,
) -> TokenResolver:
    """Return a resolver reading the token from a file on every call.

    Args:
        file_path: File holding the token
        env_var_name: Environment variable holding the file path
        resolver: CredentialResolver to use (default: a new one loading .env)

    Raises (when called):
        CredentialFileError: The file cannot be read.
    """
    credentials = resolver or CredentialResolver()

    async def resolve() -> str:
        return credentials.resolve_from_file(file_path=file_path, env_var_name=env_var_name, required=True)

    return resolve
