"""
Manifest writer.

A manifest is a single-column CSV file, one value per row, read by the
benchmark driver to learn where each stage's data lives.
"""

import csv
import logging
from pathlib import Path
from typing import Sequence, Union

from blobstage.auth.exceptions import ManifestError

logger = logging.getLogger(__name__)

LOCATION_B_MANIFEST = "locationB{version}.csv"
LOCATION_C_MANIFEST = "locationC{version}.csv"
LOCATION_D_MANIFEST = "locationD{version}.csv"
PUBLISH_RESULTS_MANIFEST = "publishResultsLocation.csv"


def write_manifest(path: Union[str, Path], rows: Sequence[Sequence[str]]) -> Path:
    """
    Write manifest rows to a CSV file.
    
    Only the first field of each row is written; any further fields are
    dropped.
    
    Args:
        path: Target file, overwritten if it exists
        rows: Ordered rows; must not be empty
    
    Returns:
        Path of the written file
    
    Raises:
        ManifestError: If rows is empty, a row has no fields, or the file
            cannot be written
    """
    path = Path(path)
    
    if not rows:
        raise ManifestError(f"Empty data! Refusing to write manifest {path}")
    for index, row in enumerate(rows):
        if isinstance(row, str) or len(row) == 0:
            raise ManifestError(f"Manifest row {index} must be a non-empty sequence of values")
        if len(row) > 1:
            logger.debug(f"Manifest row {index} has {len(row)} fields; only the first is written")
    
    try:
        with open(path, "w", newline="", encoding="utf-8") as f:
            writer = csv.writer(f)
            for row in rows:
                writer.writerow([row[0]])
    except OSError as exc:
        raise ManifestError(f"Could not write manifest {path}: {exc}") from exc
    
    logger.info(f"Wrote manifest {path} ({len(rows)} rows)")
    return path
