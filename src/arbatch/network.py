import logging
from typing import Optional

from ar import ArweaveException, Peer, Transaction

from .bundle import bundle_to_transaction
from .config import NetworkConfig
from .errors import SigningError, SubmissionError
from .signer import ArweaveSigner

logger = logging.getLogger(__name__)


def _submission_error(action: str, exc: ArweaveException) -> SubmissionError:
    status_code = None
    if len(exc.args) > 1 and isinstance(exc.args[1], int):
        status_code = exc.args[1]
    return SubmissionError(f"{action} failed: {exc.args[0] if exc.args else exc}", status_code)


class ArweaveClient:
    """
    Gateway access for bundle transactions: anchor and price lookups while
    signing, then the transaction header followed by its data chunks.

    Every gateway failure surfaces as SubmissionError; nothing is retried.
    """

    def __init__(self, config: NetworkConfig, peer: Optional[Peer] = None):
        self.config = config
        self._owns_peer = peer is None
        self.peer = peer or Peer(config.base_url, timeout=config.timeout_sec, retries=0)

    def __enter__(self) -> "ArweaveClient":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    def close(self) -> None:
        if self._owns_peer:
            self.peer.session.close()

    # ------------------------------------------------------------------

    def prepare_transaction(self, bundle_file, signer: ArweaveSigner) -> Transaction:
        """Build and sign the transaction carrying a written bundle file."""
        signer.wallet.peer = self.peer
        try:
            tx = bundle_to_transaction(bundle_file, signer.wallet)
            tx.sign()
        except ArweaveException as e:
            raise _submission_error("Preparing transaction", e) from e
        except (TypeError, ValueError) as e:
            raise SigningError(f"Signing transaction failed: {e}") from e
        return tx

    def post_transaction(self, tx: Transaction) -> None:
        """Post the transaction header, then upload every data chunk in order."""
        chunk_count = len(tx.chunks["chunks"])
        try:
            self.peer.send_tx(tx.json_data)
            for idx in range(chunk_count):
                self.peer.send_chunk(tx.get_chunk(idx))
        except ArweaveException as e:
            raise _submission_error(f"Posting transaction {tx.id}", e) from e
        logger.debug("Transaction %s accepted with %d chunk(s)", tx.id, chunk_count)
