"""
Exceptions for blobstage.

Every failure that should stop a subcommand derives from BlobStageError so
the CLI can report it uniformly.
"""

from typing import Iterable, Optional


class BlobStageError(Exception):
    """Base exception for blobstage errors."""
    
    def __init__(self, message: str, error_code: str = "BlobStageError"):
        self.message = message
        self.error_code = error_code
        super().__init__(message)


class ConfigurationError(BlobStageError):
    """Raised when local configuration is missing or invalid."""
    
    def __init__(self, message: str, error_code: str = "InvalidConfiguration"):
        super().__init__(message, error_code)


class MissingCredentialError(ConfigurationError):
    """Raised when a storage account environment variable is unset or empty."""
    
    def __init__(self, variables: Iterable[str]):
        self.variables = tuple(variables)
        names = " and/or ".join(self.variables)
        super().__init__(
            f"Required environment variable not set: {names}",
            "MissingCredential"
        )


class CloudOperationError(BlobStageError):
    """Raised when the storage service rejects a request."""
    
    def __init__(
        self,
        message: str,
        status: Optional[str] = None,
        error_code: str = "CloudOperationFailed"
    ):
        self.status = status
        super().__init__(message, error_code)


class ContainerCreationError(CloudOperationError):
    """Raised when a container could not be created."""
    
    def __init__(self, container_name: str, status: Optional[str] = None):
        self.container_name = container_name
        super().__init__(
            f"Could not create container {container_name}: {status}",
            status,
            "ContainerCreationFailed"
        )


class ContainerDeletionError(CloudOperationError):
    """Raised when a container could not be deleted."""
    
    def __init__(self, container_name: str, status: Optional[str] = None):
        self.container_name = container_name
        super().__init__(
            f"Failed to delete the container {container_name}: {status}",
            status,
            "ContainerDeletionFailed"
        )


class SignatureError(BlobStageError):
    """Raised when a shared access signature cannot be generated."""
    
    def __init__(self, message: str, error_code: str = "SignatureFailed"):
        super().__init__(message, error_code)


class InvalidSignatureWindowError(SignatureError):
    """Raised when a signature would expire at or before its start time."""
    
    def __init__(self, message: str = "Signature expiry must be after its start"):
        super().__init__(message, "InvalidSignatureWindow")


class ManifestError(BlobStageError):
    """Raised when a manifest file cannot be written."""
    
    def __init__(self, message: str):
        super().__init__(message, "ManifestFailed")
