import logging
from dataclasses import dataclass
from typing import Sequence

from .assets import FilePair, file_pair_size
from .errors import OversizePairError

logger = logging.getLogger(__name__)


@dataclass
class BundleRange:
    """
    The number of leading file pairs to include in the next bundle, and
    their total size in bytes.
    """

    count: int = 0
    total_bytes: int = 0


def get_bundle_range(file_pairs: Sequence[FilePair], limit_bytes: int) -> BundleRange:
    """
    Compute the longest prefix of file_pairs whose cumulated size stays
    strictly under limit_bytes.

    Raises OversizePairError when the very first pair alone reaches the
    limit, since no bundle could ever carry it.
    """
    total = 0
    count = 0
    for pair in file_pairs:
        pair_size = file_pair_size(pair)

        if total + pair_size >= limit_bytes:
            if count == 0:
                raise OversizePairError(pair.key, pair_size, limit_bytes)
            break

        total += pair_size
        count += 1

    return BundleRange(count=count, total_bytes=total)
