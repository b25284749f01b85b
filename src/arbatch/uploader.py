"""
Incremental bundle upload.

BundleUploader consumes a list of pending file pairs one bundle at a time:

  compute range -> take pairs off the pending list -> process each pair
  -> sign and submit the bundle -> hand back the bookkeeping

Each call to next_bundle() fully resolves one bundle before returning, so
the caller can persist cache entries between bundles. Stopping early simply
leaves the remaining pairs unprocessed.

Pairs taken off the pending list are never put back. If a pair fails, the
whole bundle fails and its pairs are lost for this run; the caller rebuilds
the pending list from the cache on the next run.
"""

import enum
import logging
import tempfile
from dataclasses import dataclass, field
from typing import Any, Dict, Iterator, List, Optional, Sequence, Tuple

from ar import DataItem

from .assets import FilePair, make_file_pairs
from .bundle import bundle_and_sign, write_bundle
from .bundle_range import get_bundle_range
from .config import ArbatchConfig
from .errors import UploaderFailedError
from .network import ArweaveClient
from .signer import ArweaveSigner
from .transform import process_file_pair

logger = logging.getLogger(__name__)


@dataclass
class BundleResult:
    """Per-bundle bookkeeping; index i of every list describes the same pair."""

    cache_keys: List[str] = field(default_factory=list)
    manifest_links: List[str] = field(default_factory=list)
    updated_manifests: List[Dict[str, Any]] = field(default_factory=list)

    @classmethod
    def empty(cls) -> "BundleResult":
        return cls()

    def items(self) -> Iterator[Tuple[str, str]]:
        return zip(self.cache_keys, self.manifest_links)

    def __len__(self) -> int:
        return len(self.cache_keys)


class DriverState(enum.Enum):
    IDLE = "idle"
    RANGE_COMPUTED = "range_computed"
    PAIRS_TRANSFORMED = "pairs_transformed"
    BUNDLE_SUBMITTED = "bundle_submitted"
    EXHAUSTED = "exhausted"
    FAILED = "failed"


def submit_bundle(
    data_items: List[DataItem],
    signer: ArweaveSigner,
    client: ArweaveClient,
) -> str:
    """
    Sign all data items into one bundle transaction and post it.

    The bundle is written once to a temporary file; the transaction reads
    its chunks back from there.
    """
    bundle = bundle_and_sign(data_items, signer)

    with tempfile.NamedTemporaryFile(prefix="arbatch-", suffix=".bundle") as bundle_file:
        size = write_bundle(bundle, bundle_file)
        bundle_file.flush()

        tx = client.prepare_transaction(bundle_file, signer)
        logger.info("Uploading bundle %s (%d bytes)...", tx.id, size)
        client.post_transaction(tx)

    logger.info("Bundle uploaded!")
    return tx.id


class BundleUploader:
    """Pull-based producer of one BundleResult per uploaded bundle."""

    def __init__(
        self,
        file_pairs: Sequence[FilePair],
        signer: ArweaveSigner,
        client: ArweaveClient,
        config: ArbatchConfig,
    ):
        self.pending: List[FilePair] = list(file_pairs)
        self.signer = signer
        self.client = client
        self.config = config
        self.state = DriverState.IDLE
        self.bundles_uploaded = 0
        self._started = False
        self._failure: Optional[BaseException] = None

    @property
    def pending_count(self) -> int:
        return len(self.pending)

    def __iter__(self) -> Iterator[BundleResult]:
        return self

    def __next__(self) -> BundleResult:
        result = self.next_bundle()
        if result is None:
            raise StopIteration
        return result

    # ------------------------------------------------------------------

    def next_bundle(self) -> Optional[BundleResult]:
        """
        Upload the next bundle and return its bookkeeping.

        The first call returns an empty result before anything is uploaded.
        Returns None once every pending pair has been consumed.
        """
        if self.state is DriverState.FAILED:
            raise UploaderFailedError(self._failure)

        if not self._started:
            self._started = True
            return BundleResult.empty()

        if self.state is DriverState.EXHAUSTED:
            return None

        if not self.pending:
            self.state = DriverState.EXHAUSTED
            logger.info("All file pairs processed (%d bundle(s))", self.bundles_uploaded)
            return None

        try:
            result = self._upload_next_range()
        except Exception as e:
            self.state = DriverState.FAILED
            self._failure = e
            logger.error("Bundle upload failed: %s", e)
            raise

        self.state = DriverState.IDLE
        return result

    def _upload_next_range(self) -> BundleResult:
        bundle_range = get_bundle_range(self.pending, self.config.bundle.size_byte_limit)
        self.state = DriverState.RANGE_COMPUTED
        logger.info(
            "Computed Bundle range, including %d file pair(s) totaling %d bytes.",
            bundle_range.count,
            bundle_range.total_bytes,
        )

        bundle_pairs = self.pending[: bundle_range.count]
        del self.pending[: bundle_range.count]

        result = BundleResult()
        data_items: List[DataItem] = []
        for pair in bundle_pairs:
            processed = process_file_pair(pair, self.signer, self.config)
            result.cache_keys.append(processed.key)
            result.manifest_links.append(processed.manifest_link)
            result.updated_manifests.append(processed.manifest)
            data_items.extend([processed.image_item, processed.manifest_item])
        self.state = DriverState.PAIRS_TRANSFORMED

        logger.debug("Bundling...")
        submit_bundle(data_items, self.signer, self.client)
        self.state = DriverState.BUNDLE_SUBMITTED
        self.bundles_uploaded += 1
        return result


def make_bundle_upload_generator(
    dirname: str,
    assets: Sequence[str],
    signer: ArweaveSigner,
    client: ArweaveClient,
    config: ArbatchConfig,
) -> BundleUploader:
    """Build an uploader over the asset file pairs found in dirname."""
    file_pairs = make_file_pairs(dirname, assets, config.bundle.image_extension)
    return BundleUploader(file_pairs, signer, client, config)
