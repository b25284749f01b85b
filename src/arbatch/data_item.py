"""
Signed, content-addressed records (ANS-104 data items).

A data item wraps either raw image bytes or a serialized manifest. Its id
is derived from its signature, so it only exists once the item is signed.
"""

from typing import Dict, List, Union

from ar import ANS104DataItemHeader, DataItem
from ar.utils import create_tag

from .errors import SigningError
from .signer import ArweaveSigner


def create_data(data: Union[bytes, str], tags: List[Dict[str, str]]) -> DataItem:
    if isinstance(data, str):
        data = data.encode("utf-8")
    header = ANS104DataItemHeader(
        tags=[create_tag(tag["name"], tag["value"], True) for tag in tags]
    )
    return DataItem(header=header, data=data)


def is_signed(item: DataItem) -> bool:
    return bool(item.header.raw_signature)


def sign_data_item(item: DataItem, signer: ArweaveSigner) -> str:
    """Sign in place and return the resulting id."""
    try:
        return item.sign(signer.rsa)
    except (TypeError, ValueError) as e:
        raise SigningError(f"Signing data item failed: {e}") from e
