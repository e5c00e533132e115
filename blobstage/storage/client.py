"""
Blob service client construction and container lifecycle calls.

Each call is attempted once; the SDK retry policy is switched off.
"""

import logging
from typing import Callable

from azure.core.exceptions import AzureError
from azure.storage.blob import BlobServiceClient, ContainerClient

from blobstage.auth.credentials import DEFAULT_ENDPOINT_SUFFIX, StorageAccountCredentials
from blobstage.auth.exceptions import ContainerCreationError, ContainerDeletionError

logger = logging.getLogger(__name__)

ServiceClientFactory = Callable[[StorageAccountCredentials, str], BlobServiceClient]


def build_service_client(
    credentials: StorageAccountCredentials,
    endpoint_suffix: str = DEFAULT_ENDPOINT_SUFFIX
) -> BlobServiceClient:
    """Create a SharedKey-authenticated service client for an account."""
    account_url = credentials.account_url(endpoint_suffix)
    logger.debug(f"Creating blob service client for {account_url}")
    return BlobServiceClient(
        account_url=account_url,
        credential=credentials.as_credential(),
        retry_total=0,
    )


def _status_text(exc: AzureError) -> str:
    status_code = getattr(exc, "status_code", None)
    if status_code is None:
        return str(exc.message or exc)
    return f"{status_code} {exc.reason}"


def create_container(service_client: BlobServiceClient, container_name: str) -> ContainerClient:
    """
    Create a new container.
    
    Args:
        service_client: Client for the owning account
        container_name: Name of the container to create
    
    Returns:
        ContainerClient for the created container
    
    Raises:
        ContainerCreationError: If the service does not report success
    """
    container_client = service_client.get_container_client(container_name)
    try:
        container_client.create_container()
    except AzureError as exc:
        raise ContainerCreationError(container_name, _status_text(exc)) from exc
    
    logger.info(f"Created container: {container_name}")
    return container_client


def delete_container(service_client: BlobServiceClient, container_name: str) -> None:
    """
    Delete a container.
    
    Raises:
        ContainerDeletionError: If the service rejects the delete
    """
    try:
        service_client.delete_container(container_name)
    except AzureError as exc:
        raise ContainerDeletionError(container_name, _status_text(exc)) from exc
    
    logger.info(f"Deleted container: {container_name}")
