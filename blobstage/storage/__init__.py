"""
Azure Blob Storage helpers: naming, clients and shared access signatures.
"""

from blobstage.storage.naming import (
    generate_container_name,
    container_name_from_url,
    unsigned_url,
    MIN_CONTAINER_NAME_LENGTH,
    MAX_CONTAINER_NAME_LENGTH,
)
from blobstage.storage.client import (
    build_service_client,
    create_container,
    delete_container,
)
from blobstage.storage.sas import (
    SignatureWindow,
    full_container_permissions,
    mint_container_sas,
    parse_signature_window,
)

__all__ = [
    "generate_container_name",
    "container_name_from_url",
    "unsigned_url",
    "MIN_CONTAINER_NAME_LENGTH",
    "MAX_CONTAINER_NAME_LENGTH",
    "build_service_client",
    "create_container",
    "delete_container",
    "SignatureWindow",
    "full_container_permissions",
    "mint_container_sas",
    "parse_signature_window",
]
