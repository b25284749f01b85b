import json

import pytest

from arbatch import transform
from arbatch.assets import FilePair
from arbatch.config import ArbatchConfig
from arbatch.data_item import sign_data_item
from arbatch.errors import AssetReadError, ManifestParseError
from arbatch.transform import process_file_pair, update_manifest


def write_asset(tmp_path, key, manifest):
    (tmp_path / f"{key}.png").write_bytes(b"\x89PNG fake image " + key.encode())
    manifest_path = tmp_path / f"{key}.json"
    if isinstance(manifest, str):
        manifest_path.write_text(manifest)
    else:
        manifest_path.write_text(json.dumps(manifest))
    return FilePair(key=key, image=str(tmp_path / f"{key}.png"), manifest=str(manifest_path))


def sample_manifest(key):
    return {
        "name": f"Asset #{key}",
        "image": f"{key}.png",
        "properties": {
            "files": [
                {"uri": f"{key}.png", "type": "image/png"},
                {"uri": f"{key}.mp4", "type": "video/mp4"},
            ],
            "creators": [{"address": "abc", "share": 100}],
        },
    }


def test_process_file_pair_links_manifest_to_image(tmp_path, signer):
    pair = write_asset(tmp_path, "0", sample_manifest("0"))
    config = ArbatchConfig()

    processed = process_file_pair(pair, signer, config)

    image_link = f"https://arweave.net/{processed.image_item.header.id}"
    assert processed.key == "0"
    assert processed.manifest["image"] == image_link
    assert processed.manifest["properties"]["files"] == [
        {"type": "image/png", "uri": image_link}
    ]
    # untouched fields survive
    assert processed.manifest["name"] == "Asset #0"
    assert processed.manifest["properties"]["creators"][0]["share"] == 100

    assert processed.manifest_link == f"https://arweave.net/{processed.manifest_item.header.id}"
    assert json.loads(processed.manifest_item.data) == processed.manifest
    assert processed.image_item.data == (tmp_path / "0.png").read_bytes()


def test_data_items_are_signed_and_tagged(tmp_path, signer):
    pair = write_asset(tmp_path, "1", sample_manifest("1"))

    processed = process_file_pair(pair, signer, ArbatchConfig())

    assert processed.image_item.verify()
    assert processed.manifest_item.verify()
    assert processed.image_item.header.tags == [
        {"name": b"App-Name", "value": b"Metaplex Candy Machine"},
        {"name": b"Content-Type", "value": b"image/png"},
    ]
    assert processed.manifest_item.header.tags[-1] == {
        "name": b"Content-Type",
        "value": b"application/json",
    }


def test_image_is_signed_before_manifest(tmp_path, signer, monkeypatch):
    signed = []

    def recording_sign(item, signer):
        item_id = sign_data_item(item, signer)
        signed.append(item.data)
        return item_id

    monkeypatch.setattr(transform, "sign_data_item", recording_sign)
    pair = write_asset(tmp_path, "2", sample_manifest("2"))

    processed = process_file_pair(pair, signer, ArbatchConfig())

    assert signed == [processed.image_item.data, processed.manifest_item.data]
    # the manifest was serialized with the link of the already signed image
    image_link = f"https://arweave.net/{processed.image_item.header.id}"
    assert json.loads(signed[1])["image"] == image_link


def test_manifest_without_properties_gets_file_listing():
    manifest = update_manifest({"name": "bare"}, "https://arweave.net/x", "image/png")

    assert manifest["properties"]["files"] == [
        {"type": "image/png", "uri": "https://arweave.net/x"}
    ]
    assert manifest["image"] == "https://arweave.net/x"


def test_custom_network_host_in_links(tmp_path, signer):
    pair = write_asset(tmp_path, "3", sample_manifest("3"))
    config = ArbatchConfig()
    config.network.host = "gateway.example"

    processed = process_file_pair(pair, signer, config)

    assert processed.manifest["image"].startswith("https://gateway.example/")
    assert processed.manifest_link.startswith("https://gateway.example/")


def test_malformed_manifest_raises_parse_error(tmp_path, signer):
    pair = write_asset(tmp_path, "4", '{"name": "broken",')

    with pytest.raises(ManifestParseError) as exc_info:
        process_file_pair(pair, signer, ArbatchConfig())
    assert exc_info.value.path == pair.manifest


def test_non_object_manifest_raises_parse_error(tmp_path, signer):
    pair = write_asset(tmp_path, "5", "[1, 2, 3]")

    with pytest.raises(ManifestParseError):
        process_file_pair(pair, signer, ArbatchConfig())


def test_missing_image_raises_read_error(tmp_path, signer):
    pair = write_asset(tmp_path, "6", sample_manifest("6"))
    (tmp_path / "6.png").unlink()

    with pytest.raises(AssetReadError):
        process_file_pair(pair, signer, ArbatchConfig())
