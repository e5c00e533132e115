"""
Benchmark location provisioner.

Stages the four benchmark locations

    A (local) --upload--> B (container) --server-side copy--> C (container) --download--> D (local)

by creating containers, signing them, and writing the manifest each stage
of the benchmark driver reads. Location A is produced outside this tool.
"""

import logging
import random
from datetime import datetime, timezone
from pathlib import Path
from typing import Callable, List, Mapping, Optional, Tuple

from azure.core.exceptions import AzureError
from azure.storage.blob import BlobServiceClient, ContainerClient

from blobstage.auth.credentials import AccountType, StorageAccountCredentials, resolve_credentials
from blobstage.auth.exceptions import BlobStageError, ConfigurationError
from blobstage.core.config_manager import BlobStageConfig
from blobstage.core.logging_config import log_with_context
from blobstage.manifest import (
    LOCATION_B_MANIFEST,
    LOCATION_C_MANIFEST,
    LOCATION_D_MANIFEST,
    PUBLISH_RESULTS_MANIFEST,
    write_manifest,
)
from blobstage.storage.client import (
    ServiceClientFactory,
    build_service_client,
    create_container,
    delete_container,
)
from blobstage.storage.naming import container_name_from_url, generate_container_name, unsigned_url
from blobstage.storage.sas import SASSigner, SignatureWindow, mint_container_sas

logger = logging.getLogger(__name__)

Clock = Callable[[], datetime]


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


class Provisioner:
    """
    Creates, signs and tears down benchmark containers.
    
    All collaborators are injected so the provisioner can run against fakes:
    the environment mapping credentials are read from, the random source for
    container names, the clock, the service client factory and the SAS signer.
    """
    
    def __init__(
        self,
        config: Optional[BlobStageConfig] = None,
        environ: Optional[Mapping[str, str]] = None,
        rng: Optional[random.Random] = None,
        clock: Optional[Clock] = None,
        client_factory: Optional[ServiceClientFactory] = None,
        signer: Optional[SASSigner] = None,
    ):
        self.config = config or BlobStageConfig()
        self._environ = environ
        self._rng = rng or random.Random()
        self._clock = clock or _utc_now
        self._client_factory = client_factory or build_service_client
        self._signer = signer
    
    # ------------------------------------------------------------------
    # Shared steps
    # ------------------------------------------------------------------
    
    def _credentials(self, account_type: AccountType) -> StorageAccountCredentials:
        return resolve_credentials(account_type, self._environ)
    
    def _service_client(self, credentials: StorageAccountCredentials) -> BlobServiceClient:
        return self._client_factory(credentials, self.config.storage.endpoint_suffix)
    
    def _window(self, hours: int) -> SignatureWindow:
        return SignatureWindow.from_hours(self._clock(), hours)
    
    def _manifest_path(self, template: str, **fields: str) -> Path:
        return Path(self.config.output_dir) / template.format(**fields)
    
    def _new_container_name(self) -> str:
        return generate_container_name(self._rng, self.config.storage.max_container_name_length)
    
    def _sign(
        self,
        credentials: StorageAccountCredentials,
        container_client: ContainerClient,
        container_name: str,
        window: SignatureWindow,
    ) -> str:
        signed_url = mint_container_sas(
            credentials,
            container_name,
            container_client.url,
            window,
            signer=self._signer,
        )
        log_with_context(
            logger,
            logging.DEBUG,
            f"Signed container {container_name}",
            account=credentials.account_type.name,
            start=window.start.isoformat(),
            expiry=window.expiry.isoformat(),
        )
        return signed_url
    
    def _discard_container(self, container_client: ContainerClient, container_name: str) -> None:
        """Delete a container this run created, after a later step failed."""
        try:
            container_client.delete_container()
        except AzureError as exc:
            logger.error(f"Failed to clean up container {container_name}: {exc}")
        else:
            logger.warning(f"Cleaned up container {container_name} after failure")
    
    def _create_and_sign(
        self,
        credentials: StorageAccountCredentials,
        window: SignatureWindow,
    ) -> Tuple[ContainerClient, str, str]:
        """Create a fresh container and sign it, deleting it again if signing fails."""
        service_client = self._service_client(credentials)
        container_name = self._new_container_name()
        container_client = create_container(service_client, container_name)
        
        try:
            signed_url = self._sign(credentials, container_client, container_name, window)
        except Exception:
            self._discard_container(container_client, container_name)
            raise
        return container_client, container_name, signed_url
    
    def _write_or_discard(
        self,
        path: Path,
        rows: List[List[str]],
        container_client: ContainerClient,
        container_name: str,
    ) -> Path:
        try:
            return write_manifest(path, rows)
        except Exception:
            self._discard_container(container_client, container_name)
            raise
    
    # ------------------------------------------------------------------
    # Operations
    # ------------------------------------------------------------------
    
    def create_location_b(self, local_path: str, hours: int, version: str) -> Path:
        """
        Provision location B: a fresh container under the default account.
        
        Manifest rows: [local_path], [signed container URL].
        """
        credentials = self._credentials(AccountType.DEFAULT)
        window = self._window(hours)
        
        container_client, container_name, signed_url = self._create_and_sign(credentials, window)
        
        path = self._manifest_path(LOCATION_B_MANIFEST, version=version)
        rows = [[local_path], [signed_url]]
        self._write_or_discard(path, rows, container_client, container_name)
        logger.info(f"Location B ready: container {container_name}, manifest {path}")
        return path
    
    def create_location_c(self, source_container_url: str, hours: int, version: str) -> Path:
        """
        Provision location C: sign the source container under the default
        account and create a destination container under the secondary
        account, for a server-side copy between the two.
        
        Manifest rows: [signed source URL], [signed destination URL].
        """
        source_name = self._require_container_name(source_container_url)
        source_credentials = self._credentials(AccountType.DEFAULT)
        dest_credentials = self._credentials(AccountType.SECONDARY)
        window = self._window(hours)
        
        source_client = self._service_client(source_credentials).get_container_client(source_name)
        source_url = self._sign(source_credentials, source_client, source_name, window)
        
        dest_client, dest_name, dest_url = self._create_and_sign(dest_credentials, window)
        
        path = self._manifest_path(LOCATION_C_MANIFEST, version=version)
        rows = [[source_url], [dest_url]]
        self._write_or_discard(path, rows, dest_client, dest_name)
        logger.info(f"Location C ready: {source_name} -> {dest_name}, manifest {path}")
        return path
    
    def create_location_d(
        self,
        source_container_url: str,
        hours: int,
        local_path: str,
        version: str,
    ) -> Path:
        """
        Provision location D: sign the container to download from.
        
        The container is addressed through the configured client account
        (default account unless configured otherwise) and signed with the
        secondary account's key.
        
        Manifest rows: [signed container URL], [local_path].
        """
        source_name = self._require_container_name(source_container_url)
        client_credentials = self._credentials(self.config.storage.location_d_client_account)
        signing_credentials = self._credentials(AccountType.SECONDARY)
        window = self._window(hours)
        
        if client_credentials.account_name != signing_credentials.account_name:
            logger.warning(
                f"locD signs with account {signing_credentials.account_name} "
                f"a URL on account {client_credentials.account_name}"
            )
        
        container_client = self._service_client(client_credentials).get_container_client(source_name)
        signed_url = self._sign(signing_credentials, container_client, source_name, window)
        
        path = self._manifest_path(LOCATION_D_MANIFEST, version=version)
        write_manifest(path, [[signed_url], [local_path]])
        logger.info(f"Location D ready: container {source_name}, manifest {path}")
        return path
    
    def delete_container(self, account_type: AccountType, container_url: str) -> bool:
        """
        Best-effort teardown of a container.
        
        Failures are logged, never raised.
        
        Returns:
            True if the container was deleted
        """
        try:
            container_name = self._require_container_name(container_url)
            credentials = self._credentials(account_type)
            delete_container(self._service_client(credentials), container_name)
        except BlobStageError as exc:
            logger.error(f"Failed to delete the container at {unsigned_url(container_url)}: {exc.message}")
            return False
        
        return True
    
    def publish_results(self, local_path: str, container_name: str, hours: int) -> Path:
        """
        Sign an existing reporting container for uploading result CSVs.
        
        Manifest rows: [<local_path>/*.csv], [signed container URL].
        """
        credentials = self._credentials(AccountType.DEFAULT)
        window = self._window(hours)
        
        container_client = self._service_client(credentials).get_container_client(container_name)
        signed_url = self._sign(credentials, container_client, container_name, window)
        
        path = self._manifest_path(PUBLISH_RESULTS_MANIFEST)
        write_manifest(path, [[local_path + "/*.csv"], [signed_url]])
        logger.info(f"Results publishing location ready: container {container_name}, manifest {path}")
        return path
    
    @staticmethod
    def _require_container_name(container_url: str) -> str:
        container_name = container_name_from_url(container_url)
        if not container_name:
            raise ConfigurationError(f"No container name in URL: {unsigned_url(container_url)}")
        return container_name
