"""
ANS-104 bundles and the format 2 transaction carrying them.

The bundle is streamed to a file so the transaction can compute its chunk
merkle root and upload chunks without holding the whole bundle in memory.
"""

import logging
from typing import BinaryIO, List

from ar import Bundle, DataItem, Transaction

from .data_item import is_signed, sign_data_item
from .signer import ArweaveSigner

logger = logging.getLogger(__name__)

BUNDLE_TAGS = [
    ("Bundle-Format", "binary"),
    ("Bundle-Version", "2.0.0"),
]


def bundle_and_sign(items: List[DataItem], signer: ArweaveSigner) -> Bundle:
    """Sign any unsigned item and aggregate all items, in order, into a bundle."""
    for item in items:
        if not is_signed(item):
            sign_data_item(item, signer)
    logger.debug("Bundled %d data item(s)", len(items))
    return Bundle(list(items))


def write_bundle(bundle: Bundle, out: BinaryIO) -> int:
    """Write the binary bundle to out and return its size in bytes."""
    size = out.write(bundle.header.tobytes())
    for item in bundle.dataitems:
        size += out.write(item.tobytes())
    return size


def bundle_to_transaction(bundle_file, wallet) -> Transaction:
    """
    Build an unsigned transaction over a written bundle file.

    The anchor is fetched through the wallet's peer; the reward through the
    transaction's peer when it is signed.
    """
    bundle_file.seek(0)
    tx = Transaction(wallet, file_handler=bundle_file, file_path=bundle_file.name)
    tx.peer = wallet.peer
    for name, value in BUNDLE_TAGS:
        tx.add_tag(name, value)
    return tx
