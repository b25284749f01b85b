import json
import logging
from dataclasses import dataclass
from typing import Any, Dict

from ar import DataItem

from .assets import FilePair, read_image, read_manifest
from .config import ArbatchConfig
from .data_item import create_data, sign_data_item
from .signer import ArweaveSigner

logger = logging.getLogger(__name__)


@dataclass
class ProcessedFilePair:
    key: str
    image_item: DataItem
    manifest_item: DataItem
    manifest_link: str
    manifest: Dict[str, Any]


def update_manifest(
    manifest: Dict[str, Any], image_link: str, image_content_type: str
) -> Dict[str, Any]:
    """Point the manifest's image and file listing at the uploaded image."""
    manifest["image"] = image_link
    properties = manifest.get("properties")
    if not isinstance(properties, dict):
        properties = {}
        manifest["properties"] = properties
    properties["files"] = [{"type": image_content_type, "uri": image_link}]
    return manifest


def process_file_pair(
    pair: FilePair,
    signer: ArweaveSigner,
    config: ArbatchConfig,
) -> ProcessedFilePair:
    """
    Turn a file pair into two signed data items.

    The image item is signed first: the manifest embeds the image link,
    which only exists once the image item has its id.
    """
    logger.debug("Processing File Pair %s", pair.key)

    image_item = create_data(read_image(pair), config.bundle.image_tags)
    image_link = config.network.link_for(sign_data_item(image_item, signer))

    manifest = update_manifest(
        read_manifest(pair), image_link, config.bundle.image_content_type
    )
    manifest_item = create_data(json.dumps(manifest), config.bundle.manifest_tags)
    manifest_link = config.network.link_for(sign_data_item(manifest_item, signer))

    logger.info("Processed File Pair %s", pair.key)
    return ProcessedFilePair(
        key=pair.key,
        image_item=image_item,
        manifest_item=manifest_item,
        manifest_link=manifest_link,
        manifest=manifest,
    )
