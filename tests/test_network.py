import pytest
from ar import ArweaveException, Bundle
from ar.utils import b64dec, b64enc

from arbatch.bundle import bundle_and_sign, write_bundle
from arbatch.config import NetworkConfig
from arbatch.data_item import create_data
from arbatch.errors import SubmissionError
from arbatch.network import ArweaveClient

ANCHOR = b64enc(b"\x01" * 32)

TAGS = [{"name": "App-Name", "value": "test"}]


@pytest.fixture
def bundle_file(signer, tmp_path):
    bundle = bundle_and_sign([create_data(b"hello", TAGS)], signer)
    f = open(tmp_path / "one.bundle", "w+b")
    write_bundle(bundle, f)
    f.flush()
    yield f
    f.close()


def test_header_is_posted_before_chunks(bundle_file, signer, fake_peer):
    client = ArweaveClient(NetworkConfig(), peer=fake_peer)

    tx = client.prepare_transaction(bundle_file, signer)
    client.post_transaction(tx)

    assert len(fake_peer.sent_txs) == 1
    posted = fake_peer.sent_txs[0]
    assert posted["id"] == tx.id
    assert posted["format"] == 2
    assert posted["last_tx"] == ANCHOR
    assert posted["data"] == ""
    assert [(b64dec(t["name"]), b64dec(t["value"])) for t in posted["tags"]] == [
        (b"Bundle-Format", b"binary"),
        (b"Bundle-Version", b"2.0.0"),
    ]

    assert len(fake_peer.sent_chunks) == 1
    bundle_file.seek(0)
    assert fake_peer.uploaded_data(posted) == bundle_file.read()


def test_large_bundle_is_uploaded_in_chunks(signer, tmp_path, fake_peer):
    payload = bytes(range(256)) * 2400
    bundle = bundle_and_sign([create_data(payload, TAGS)], signer)
    with open(tmp_path / "big.bundle", "w+b") as f:
        size = write_bundle(bundle, f)
        f.flush()
        client = ArweaveClient(NetworkConfig(), peer=fake_peer)

        client.post_transaction(client.prepare_transaction(f, signer))

    assert len(fake_peer.sent_chunks) == 3
    assert all(c["data_size"] == str(size) for c in fake_peer.sent_chunks)
    uploaded = fake_peer.uploaded_data(fake_peer.sent_txs[0])
    assert len(uploaded) == size
    assert Bundle.frombytes(uploaded).dataitems[0].data == payload


def test_gateway_failure_becomes_submission_error(bundle_file, signer, fake_peer):
    client = ArweaveClient(NetworkConfig(), peer=fake_peer)
    tx = client.prepare_transaction(bundle_file, signer)
    fake_peer.fail_on_send = True

    with pytest.raises(SubmissionError) as exc_info:
        client.post_transaction(tx)

    assert exc_info.value.status_code == 503
    assert fake_peer.sent_chunks == []


def test_rejected_transaction_has_no_status_code(bundle_file, signer, fake_peer):
    def reject(json_data):
        raise ArweaveException("Transaction verification failed.")

    fake_peer.send_tx = reject
    client = ArweaveClient(NetworkConfig(), peer=fake_peer)
    tx = client.prepare_transaction(bundle_file, signer)

    with pytest.raises(SubmissionError) as exc_info:
        client.post_transaction(tx)

    assert exc_info.value.status_code is None
    assert "verification failed" in str(exc_info.value)


def test_anchor_failure_happens_before_anything_is_posted(bundle_file, signer, fake_peer):
    fake_peer.fail_on_anchor = True
    client = ArweaveClient(NetworkConfig(), peer=fake_peer)

    with pytest.raises(SubmissionError) as exc_info:
        client.prepare_transaction(bundle_file, signer)

    assert exc_info.value.status_code == 503
    assert fake_peer.sent_txs == []


def test_default_peer_uses_network_config():
    config = NetworkConfig(host="gateway.example", port=1984, protocol="http", timeout_sec=5)

    with ArweaveClient(config) as client:
        assert client.peer.api_url == "http://gateway.example:1984"
        assert client.peer.timeout == 5


def test_injected_peer_is_not_closed(fake_peer):
    with ArweaveClient(NetworkConfig(), peer=fake_peer) as client:
        assert client.peer is fake_peer


def test_links_and_base_url():
    config = NetworkConfig()

    assert config.base_url == "https://arweave.net:443"
    assert config.link_for("abc") == "https://arweave.net/abc"
