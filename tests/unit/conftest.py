"""
Shared fixtures: storage account environment and an in-memory blob service.
"""

import base64
from typing import Dict, Set, Tuple

import pytest
from azure.core.exceptions import HttpResponseError, ResourceExistsError, ResourceNotFoundError

DEFAULT_ACCOUNT = "defaultacct"
SECONDARY_ACCOUNT = "secondaryacct"
DEFAULT_KEY = base64.b64encode(b"default-account-key-1234567890123456").decode()
SECONDARY_KEY = base64.b64encode(b"secondary-account-key-12345678901234").decode()


class FakeContainerClient:
    """Container client backed by a FakeBlobService."""
    
    def __init__(self, service: "FakeBlobService", account_name: str, container_name: str):
        self._service = service
        self.account_name = account_name
        self.container_name = container_name
        self.url = f"https://{account_name}.blob.core.windows.net/{container_name}"
    
    def create_container(self):
        key = (self.account_name, self.container_name)
        if self._service.fail_create:
            error = HttpResponseError(message="Server failed to create the container")
            error.status_code = 500
            error.reason = "Internal Server Error"
            raise error
        if key in self._service.containers:
            raise ResourceExistsError(message="The specified container already exists.")
        self._service.containers.add(key)
        self._service.created.append(key)
        return {}
    
    def delete_container(self):
        key = (self.account_name, self.container_name)
        if key not in self._service.containers:
            raise ResourceNotFoundError(message="The specified container does not exist.")
        self._service.containers.remove(key)
        self._service.deleted.append(key)


class FakeServiceClient:
    """BlobServiceClient stand-in for one account."""
    
    def __init__(self, service: "FakeBlobService", account_name: str):
        self._service = service
        self.account_name = account_name
    
    def get_container_client(self, container_name: str) -> FakeContainerClient:
        return FakeContainerClient(self._service, self.account_name, container_name)
    
    def delete_container(self, container_name: str) -> None:
        self.get_container_client(container_name).delete_container()


class FakeBlobService:
    """In-memory blob service shared by every account."""
    
    def __init__(self):
        self.containers: Set[Tuple[str, str]] = set()
        self.created = []
        self.deleted = []
        self.fail_create = False
        self.endpoint_suffixes = []
    
    def factory(self, credentials, endpoint_suffix):
        self.endpoint_suffixes.append(endpoint_suffix)
        return FakeServiceClient(self, credentials.account_name)


@pytest.fixture
def blob_service():
    """Fresh in-memory blob service."""
    return FakeBlobService()


@pytest.fixture
def storage_env() -> Dict[str, str]:
    """Environment with both storage accounts configured."""
    return {
        "AZURE_STORAGE_ACCOUNT_NAME": DEFAULT_ACCOUNT,
        "AZURE_STORAGE_ACCOUNT_KEY": DEFAULT_KEY,
        "SECONDARY_AZURE_STORAGE_ACCOUNT_NAME": SECONDARY_ACCOUNT,
        "SECONDARY_AZURE_STORAGE_ACCOUNT_KEY": SECONDARY_KEY,
    }
