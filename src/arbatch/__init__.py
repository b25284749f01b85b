"""
arbatch: bundled uploads of image + manifest asset pairs to Arweave.

This package implements:
- Size-bounded grouping of asset file pairs into bundles
- Signed, content-addressed data items for images and manifests
- One signed bundle transaction per group, submitted in order
- SQLite cache of uploaded manifest links
"""

__version__ = "0.1.0"

from .config import ArbatchConfig, load_config
from .signer import ArweaveSigner
from .uploader import BundleResult, BundleUploader, make_bundle_upload_generator

__all__ = [
    'ArbatchConfig',
    'load_config',
    'ArweaveSigner',
    'BundleResult',
    'BundleUploader',
    'make_bundle_upload_generator',
]
