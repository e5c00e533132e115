"""
blobstage credentials and error types.

Resolves SharedKey credentials for the default and secondary storage
accounts and defines the exception hierarchy shared by all subcommands.
"""

from blobstage.auth.exceptions import (
    BlobStageError,
    ConfigurationError,
    MissingCredentialError,
    CloudOperationError,
    ContainerCreationError,
    ContainerDeletionError,
    SignatureError,
    InvalidSignatureWindowError,
    ManifestError,
)
from blobstage.auth.credentials import (
    AccountType,
    StorageAccountCredentials,
    resolve_credentials,
    ACCOUNT_NAME_ENV_VAR,
    ACCOUNT_KEY_ENV_VAR,
)

__all__ = [
    # Exceptions
    "BlobStageError",
    "ConfigurationError",
    "MissingCredentialError",
    "CloudOperationError",
    "ContainerCreationError",
    "ContainerDeletionError",
    "SignatureError",
    "InvalidSignatureWindowError",
    "ManifestError",
    # Credentials
    "AccountType",
    "StorageAccountCredentials",
    "resolve_credentials",
    "ACCOUNT_NAME_ENV_VAR",
    "ACCOUNT_KEY_ENV_VAR",
]
