"""
Asset file pairs and the read-only filesystem access around them.

An asset file pair is an image plus its JSON manifest sharing the same
extension-less key, e.g. key '0' -> '/assets/0.png' and '/assets/0.json'.
"""

import os
import json
from dataclasses import dataclass
from typing import Any, Dict, Iterable, List

from .errors import AssetReadError, ManifestParseError


@dataclass(frozen=True)
class FilePair:
    key: str
    image: str
    manifest: str


def make_file_pairs(
    dirname: str,
    assets: Iterable[str],
    image_extension: str = ".png",
) -> List[FilePair]:
    return [
        FilePair(
            key=asset,
            image=os.path.join(dirname, f"{asset}{image_extension}"),
            manifest=os.path.join(dirname, f"{asset}.json"),
        )
        for asset in assets
    ]


def _asset_sort_key(key: str):
    return (0, int(key), "") if key.isdecimal() else (1, 0, key)


def discover_assets(dirname: str, image_extension: str = ".png") -> List[str]:
    """
    List the keys in dirname that have both an image and a manifest.

    Numeric keys come first in numeric order, then the rest sorted by name.
    """
    try:
        names = os.listdir(dirname)
    except OSError as e:
        raise AssetReadError(dirname, e.strerror or str(e)) from e

    manifests = {n[: -len(".json")] for n in names if n.endswith(".json")}
    images = {
        n[: -len(image_extension)] for n in names if n.endswith(image_extension)
    }
    return sorted(manifests & images, key=_asset_sort_key)


def file_size(path: str) -> int:
    try:
        return os.stat(path).st_size
    except OSError as e:
        raise AssetReadError(path, e.strerror or str(e)) from e


def file_pair_size(pair: FilePair) -> int:
    """Combined on-disk size of the image and manifest files."""
    return file_size(pair.image) + file_size(pair.manifest)


def read_image(pair: FilePair) -> bytes:
    try:
        with open(pair.image, "rb") as f:
            return f.read()
    except OSError as e:
        raise AssetReadError(pair.image, e.strerror or str(e)) from e


def read_manifest(pair: FilePair) -> Dict[str, Any]:
    try:
        with open(pair.manifest, "rb") as f:
            raw = f.read()
    except OSError as e:
        raise AssetReadError(pair.manifest, e.strerror or str(e)) from e

    try:
        manifest = json.loads(raw.decode("utf-8"))
    except (UnicodeDecodeError, ValueError) as e:
        raise ManifestParseError(pair.manifest, str(e)) from e

    if not isinstance(manifest, dict):
        raise ManifestParseError(pair.manifest, "expected a JSON object")
    return manifest
