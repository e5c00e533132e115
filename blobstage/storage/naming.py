"""
Container naming helpers.

Generates throwaway container names and extracts container names from
container URLs.
"""

import ipaddress
import random
import string
from typing import Optional
from urllib.parse import unquote, urlparse

from blobstage.auth.exceptions import ConfigurationError

MIN_CONTAINER_NAME_LENGTH = 3
MAX_CONTAINER_NAME_LENGTH = 15

ALLOWED_CHARS = string.ascii_lowercase


def generate_container_name(
    rng: Optional[random.Random] = None,
    max_length: int = MAX_CONTAINER_NAME_LENGTH
) -> str:
    """
    Generate a random container name.
    
    The length is drawn uniformly from [3, max_length] and every character
    uniformly from the 26 lowercase ASCII letters.
    
    Args:
        rng: Random source (a fresh process-local one when omitted)
        max_length: Upper bound on the name length, inclusive
    
    Returns:
        A valid Azure container name
    """
    if max_length < MIN_CONTAINER_NAME_LENGTH:
        raise ValueError(
            f"max_length must be at least {MIN_CONTAINER_NAME_LENGTH}, got {max_length}"
        )
    if rng is None:
        rng = random.Random()
    
    length = rng.randint(MIN_CONTAINER_NAME_LENGTH, max_length)
    return "".join(rng.choice(ALLOWED_CHARS) for _ in range(length))


def _is_ip_style_host(host: str) -> bool:
    # Emulator and IP endpoints carry the account name as the first path segment
    if host == "localhost":
        return True
    try:
        ipaddress.ip_address(host)
        return True
    except ValueError:
        return False


def unsigned_url(container_url: str) -> str:
    """The URL with any query string (and so any SAS token) removed."""
    return container_url.split("?", 1)[0]


def container_name_from_url(container_url: str) -> str:
    """
    Extract the container name from a container (or blob) URL.
    
    Handles both https://<account>.blob.core.windows.net/<container>[/blob]
    and IP-style http://127.0.0.1:10000/<account>/<container>[/blob] URLs.
    Any SAS query string is ignored. Returns an empty string when the URL
    names no container.
    
    Raises:
        ConfigurationError: If the URL cannot be parsed
    """
    try:
        parsed = urlparse(container_url)
        hostname = parsed.hostname
    except ValueError as exc:
        raise ConfigurationError(
            f"Invalid container URL {unsigned_url(container_url)}: {exc}"
        ) from exc
    segments = [s for s in parsed.path.split("/") if s]
    
    if hostname and _is_ip_style_host(hostname):
        segments = segments[1:]
    
    if not segments:
        return ""
    return unquote(segments[0])
