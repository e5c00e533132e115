"""
Tests for blobstage exceptions.
"""

import pytest

from blobstage.auth.exceptions import (
    BlobStageError,
    CloudOperationError,
    ConfigurationError,
    ContainerCreationError,
    ContainerDeletionError,
    InvalidSignatureWindowError,
    ManifestError,
    MissingCredentialError,
    SignatureError,
)


class TestExceptionHierarchy:
    """Every failure is a BlobStageError with an error code."""
    
    @pytest.mark.parametrize("error,error_code", [
        (ConfigurationError("bad"), "InvalidConfiguration"),
        (MissingCredentialError(["A"]), "MissingCredential"),
        (CloudOperationError("bad"), "CloudOperationFailed"),
        (ContainerCreationError("bench", "409 Conflict"), "ContainerCreationFailed"),
        (ContainerDeletionError("bench", "404 Not Found"), "ContainerDeletionFailed"),
        (SignatureError("bad"), "SignatureFailed"),
        (InvalidSignatureWindowError(), "InvalidSignatureWindow"),
        (ManifestError("bad"), "ManifestFailed"),
    ])
    def test_error_codes(self, error, error_code):
        assert isinstance(error, BlobStageError)
        assert error.error_code == error_code
        assert str(error) == error.message
    
    def test_missing_credential_names_all_variables(self):
        error = MissingCredentialError(["SECONDARY_AZURE_STORAGE_ACCOUNT_NAME", "SECONDARY_AZURE_STORAGE_ACCOUNT_KEY"])
        
        assert error.message == (
            "Required environment variable not set: "
            "SECONDARY_AZURE_STORAGE_ACCOUNT_NAME and/or SECONDARY_AZURE_STORAGE_ACCOUNT_KEY"
        )
    
    def test_container_creation_error_carries_status(self):
        error = ContainerCreationError("bench", "409 Conflict")
        
        assert isinstance(error, CloudOperationError)
        assert error.status == "409 Conflict"
        assert error.container_name == "bench"
        assert error.message == "Could not create container bench: 409 Conflict"
