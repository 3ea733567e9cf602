"""Bearer token resolvers and credential resolution.

This module provides:
- Token resolvers for HttpClient (static, environment variable, file)
- Multi-source credential resolution (value → env → .env → default)

Example:
    ```python
    from request_facade import HttpClient
    from request_facade.auth import file_token_resolver

    client = HttpClient(token_resolver=file_token_resolver(file_path="~/.config/myapp/token"))
    ```
"""

from request_facade.auth.credentials import CredentialResolver
from request_facade.auth.exceptions import (
    CredentialError,
    CredentialFileError,
    CredentialNotFoundError,
)
from request_facade.auth.tokens import (
    TokenResolver,
    env_token_resolver,
    file_token_resolver,
    static_token_resolver,
)

__all__ = [
    "CredentialError",
    "CredentialFileError",
    "CredentialNotFoundError",
    "CredentialResolver",
    "TokenResolver",
    "env_token_resolver",
    "file_token_resolver",
    "static_token_resolver",
]
