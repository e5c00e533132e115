"""Container SAS (Shared Access Signature) generation.

This module turns a container reference and a validity window into a signed
container URL granting read, add, create, write, delete and list access.
"""

from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Callable, Optional, Tuple
from urllib.parse import parse_qs, urlparse

from azure.storage.blob import ContainerSasPermissions, generate_container_sas

from blobstage.auth.credentials import StorageAccountCredentials
from blobstage.auth.exceptions import InvalidSignatureWindowError, SignatureError

SAS_TIME_FORMAT = "%Y-%m-%dT%H:%M:%SZ"

# Signature over (account_name, container_name, account_key=, permission=, start=, expiry=)
SASSigner = Callable[..., str]


def full_container_permissions() -> ContainerSasPermissions:
    """Permissions needed to upload, copy, download and clean up a container."""
    return ContainerSasPermissions(
        read=True,
        add=True,
        create=True,
        write=True,
        delete=True,
        list=True,
    )


def to_utc(value: datetime) -> datetime:
    """Normalize a datetime to UTC.

    Naive values are interpreted as local time, aware values are converted.
    """
    return value.astimezone(timezone.utc)


@dataclass(frozen=True)
class SignatureWindow:
    """Validity window of a signature, always in UTC."""

    start: datetime
    expiry: datetime

    def __post_init__(self):
        """Normalize both ends to UTC and reject empty windows."""
        object.__setattr__(self, "start", to_utc(self.start))
        object.__setattr__(self, "expiry", to_utc(self.expiry))
        # SAS times are encoded with second precision
        if self.expiry.replace(microsecond=0) <= self.start.replace(microsecond=0):
            raise InvalidSignatureWindowError(
                f"Signature expiry {self.expiry.strftime(SAS_TIME_FORMAT)} must be "
                f"after its start {self.start.strftime(SAS_TIME_FORMAT)}"
            )

    @classmethod
    def from_hours(cls, start: datetime, hours: int) -> "SignatureWindow":
        """Window of `hours` hours beginning at `start`."""
        return cls(start=start, expiry=start + timedelta(hours=hours))


def mint_container_sas(
    credentials: StorageAccountCredentials,
    container_name: str,
    container_url: str,
    window: SignatureWindow,
    signer: Optional[SASSigner] = None,
) -> str:
    """Sign a container URL.

    Args:
        credentials: Account whose key signs the token
        container_name: Container the token is scoped to
        container_url: Container URL the token is appended to
        window: Validity window
        signer: SAS generator (defaults to azure.storage.blob.generate_container_sas)

    Returns:
        The container URL with the SAS query string attached

    Raises:
        SignatureError: If the token cannot be generated
    """
    if signer is None:
        signer = generate_container_sas

    try:
        token = signer(
            account_name=credentials.account_name,
            container_name=container_name,
            account_key=credentials.account_key,
            permission=full_container_permissions(),
            start=window.start,
            expiry=window.expiry,
        )
    except (ValueError, TypeError) as exc:
        raise SignatureError(
            f"Failed to sign container {container_name}: {exc}"
        ) from exc

    return f"{container_url.rstrip('/')}?{token}"


def parse_signature_window(signed_url: str) -> Tuple[Optional[datetime], Optional[datetime]]:
    """Read the encoded start (st) and expiry (se) back out of a signed URL."""
    params = parse_qs(urlparse(signed_url).query)

    def get_time(key: str) -> Optional[datetime]:
        values = params.get(key, [])
        if not values:
            return None
        return datetime.strptime(values[0], SAS_TIME_FORMAT).replace(tzinfo=timezone.utc)

    return get_time("st"), get_time("se")
