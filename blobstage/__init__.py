"""
blobstage: benchmark container provisioning for Azure Blob Storage

Creates, signs and tears down the containers a blob data-movement benchmark
copies through, and writes the manifests describing each location.
"""

__version__ = "0.1.0"

from .provisioner import Provisioner

__all__ = ["Provisioner", "__version__"]
