"""
Storage account credential resolution.

Credentials come from environment variables. Two logical accounts exist,
distinguished by a variable-name prefix:

- DEFAULT:   AZURE_STORAGE_ACCOUNT_NAME / AZURE_STORAGE_ACCOUNT_KEY
- SECONDARY: SECONDARY_AZURE_STORAGE_ACCOUNT_NAME / SECONDARY_AZURE_STORAGE_ACCOUNT_KEY
"""

import logging
import os
from dataclasses import dataclass
from enum import Enum
from typing import Dict, List, Mapping, Optional

from blobstage.auth.exceptions import MissingCredentialError

logger = logging.getLogger(__name__)

ACCOUNT_NAME_ENV_VAR = "AZURE_STORAGE_ACCOUNT_NAME"
ACCOUNT_KEY_ENV_VAR = "AZURE_STORAGE_ACCOUNT_KEY"

DEFAULT_ENDPOINT_SUFFIX = "blob.core.windows.net"


class AccountType(str, Enum):
    """Logical storage accounts, valued by their environment prefix."""
    DEFAULT = ""
    SECONDARY = "SECONDARY_"
    
    @property
    def prefix(self) -> str:
        return self.value
    
    @property
    def name_variable(self) -> str:
        return self.prefix + ACCOUNT_NAME_ENV_VAR
    
    @property
    def key_variable(self) -> str:
        return self.prefix + ACCOUNT_KEY_ENV_VAR


@dataclass(frozen=True)
class StorageAccountCredentials:
    """SharedKey credentials for one storage account."""
    
    account_type: AccountType
    account_name: str
    account_key: str  # Base64-encoded
    
    def __repr__(self) -> str:
        return (
            f"StorageAccountCredentials(account_type={self.account_type.name}, "
            f"account_name={self.account_name!r}, account_key='***')"
        )
    
    def account_url(self, endpoint_suffix: str = DEFAULT_ENDPOINT_SUFFIX) -> str:
        """Blob service endpoint for this account."""
        return f"https://{self.account_name}.{endpoint_suffix}/"
    
    def as_credential(self) -> Dict[str, str]:
        """Credential mapping accepted by the Azure blob clients."""
        return {"account_name": self.account_name, "account_key": self.account_key}


def resolve_credentials(
    account_type: AccountType,
    environ: Optional[Mapping[str, str]] = None
) -> StorageAccountCredentials:
    """
    Resolve credentials for an account from the environment.
    
    Args:
        account_type: Which logical account to resolve
        environ: Environment mapping (defaults to os.environ)
    
    Returns:
        StorageAccountCredentials with non-empty name and key
    
    Raises:
        MissingCredentialError: Naming every variable that is unset or empty
    """
    if environ is None:
        environ = os.environ
    
    account_name = environ.get(account_type.name_variable, "")
    account_key = environ.get(account_type.key_variable, "")
    
    missing: List[str] = []
    if not account_name:
        missing.append(account_type.name_variable)
    if not account_key:
        missing.append(account_type.key_variable)
    
    if missing:
        logger.debug(f"Credential lookup failed for {account_type.name} account: {missing}")
        raise MissingCredentialError(missing)
    
    return StorageAccountCredentials(
        account_type=account_type,
        account_name=account_name,
        account_key=account_key,
    )
