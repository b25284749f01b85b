import json

import pytest
from ar import ArweaveNetworkException
from ar.utils import b64dec, b64enc

from arbatch.signer import ArweaveSigner

ANCHOR = b64enc(b"\x01" * 32)


class FakePeer:
    """Stands in for an Arweave gateway; records what gets uploaded."""

    def __init__(self):
        self.sent_txs = []
        self.sent_chunks = []
        self.fail_on_send = False
        self.fail_on_anchor = False

    def tx_anchor(self):
        if self.fail_on_anchor:
            raise ArweaveNetworkException("Service Unavailable", 503, None, None)
        return ANCHOR

    def price(self, bytes=0, target_address=None):
        return str(bytes * 10)

    def send_tx(self, json_data):
        if self.fail_on_send:
            raise ArweaveNetworkException("Service Unavailable", 503, None, None)
        self.sent_txs.append(json.loads(json_data))
        return "OK"

    def send_chunk(self, json_data):
        self.sent_chunks.append(json_data)
        return "OK"

    def uploaded_data(self, tx_json):
        """Reassemble a transaction's data from the chunks sent for it."""
        chunks = [c for c in self.sent_chunks if c["data_root"] == tx_json["data_root"]]
        chunks.sort(key=lambda c: int(c["offset"]))
        return b"".join(b64dec(c["chunk"]) for c in chunks)


@pytest.fixture(scope="session")
def signer():
    # RSA-4096 generation is slow; share one wallet across the run.
    return ArweaveSigner.generate()


@pytest.fixture
def fake_peer():
    return FakePeer()
