"""Tests for credential resolution exceptions."""

import pytest

from request_facade.auth.exceptions import (
    CredentialError,
    CredentialFileError,
    CredentialNotFoundError,
)


class TestCredentialNotFoundError:
    """Test CredentialNotFoundError exception."""

    def test_is_credential_error(self):
        with pytest.raises(CredentialError):
            raise CredentialNotFoundError("Test error")

    def test_env_var_name_attribute(self):
        error = CredentialNotFoundError("Missing", env_var_name="API_TOKEN")

        assert error.env_var_name == "API_TOKEN"
        assert str(error) == "Missing"

    def test_env_var_name_defaults_to_none(self):
        assert CredentialNotFoundError("Missing").env_var_name is None


class TestCredentialFileError:
    """Test CredentialFileError exception."""

    def test_is_credential_error(self):
        with pytest.raises(CredentialError):
            raise CredentialFileError("Cannot read file")

    def test_is_not_a_not_found_error(self):
        assert not issubclass(CredentialFileError, CredentialNotFoundError)
