import dataclasses
import json
from datetime import datetime, timedelta, timezone

import pytest

from chainlab.basic import Block, compute_hash, format_timestamp, main

FIXED = datetime(2024, 1, 2, 3, 4, 5, tzinfo=timezone.utc)


def _block(**overrides):
    fields = dict(index=1, timestamp=FIXED, data="Alice -> Bob 1 Tokens", previous_hash="0", nonce=0)
    fields.update(overrides)
    digest = compute_hash(**fields)
    return Block(hash=digest, **fields)


def test_format_timestamp_whole_seconds():
    assert format_timestamp(FIXED) == "2024-01-02 03:04:05 UTC"


def test_format_timestamp_milliseconds():
    assert format_timestamp(FIXED.replace(microsecond=123000)) == "2024-01-02 03:04:05.123 UTC"


def test_format_timestamp_converts_to_utc():
    local = FIXED.astimezone(timezone(timedelta(hours=5)))
    assert format_timestamp(local) == format_timestamp(FIXED)


def test_compute_hash_is_deterministic_hex():
    first = compute_hash(1, FIXED, "x", "0", 0)
    assert first == compute_hash(1, FIXED, "x", "0", 0)
    assert len(first) == 64
    assert first == first.lower()


@pytest.mark.parametrize(
    "change",
    [
        {"index": 2},
        {"timestamp": FIXED + timedelta(seconds=1)},
        {"data": "other"},
        {"previous_hash": "1"},
        {"nonce": 1},
    ],
)
def test_compute_hash_depends_on_every_field(change):
    base = dict(index=1, timestamp=FIXED, data="x", previous_hash="0", nonce=0)
    changed = {**base, **change}
    assert compute_hash(**base) != compute_hash(**changed)


def test_create_fills_hash_and_is_valid():
    block = Block.create(1, "payload", "abc")
    assert block.index == 1
    assert block.nonce == 0
    assert block.previous_hash == "abc"
    assert block.hash == compute_hash(1, block.timestamp, "payload", "abc", 0)
    assert block.is_valid()


def test_genesis_block():
    genesis = Block.genesis()
    assert genesis.index == 0
    assert genesis.data == "Genesis Block"
    assert genesis.previous_hash == "0"
    assert genesis.is_valid()


def test_tampering_invalidates_block():
    block = _block()
    modified = dataclasses.replace(block, data="Bob -> Alice 2 Tokens")
    assert block.is_valid()
    assert not modified.is_valid()


def test_describe_lists_fields():
    block = _block()
    lines = block.describe().splitlines()
    assert lines[0] == "Index: 1"
    assert lines[1] == f"Timestamp: {format_timestamp(FIXED)}"
    assert lines[2] == "Data: Alice -> Bob 1 Tokens"
    assert lines[4] == f"Hash: {block.hash}"
    assert lines[5] == "Nonce: 0"


def test_to_dict_timestamp_format():
    assert _block().to_dict()["timestamp"] == "2024-01-02T03:04:05Z"


def test_dict_round_trip_keeps_validity():
    block = _block(timestamp=FIXED.replace(microsecond=654321))
    restored = Block.from_dict(block.to_dict())
    assert restored == block
    assert restored.is_valid()


def test_json_round_trip_and_key_order():
    block = _block()
    text = block.to_json()
    parsed = json.loads(text)
    assert list(parsed) == ["index", "timestamp", "data", "previous_hash", "hash", "nonce"]
    assert Block.from_dict(parsed) == block


def test_from_dict_accepts_offset_and_nanoseconds():
    data = _block().to_dict()
    data["timestamp"] = "2024-01-02T08:04:05.000000000+05:00"
    assert Block.from_dict(data).timestamp == FIXED


def test_from_dict_missing_field():
    data = _block().to_dict()
    del data["hash"]
    with pytest.raises(ValueError):
        Block.from_dict(data)


def test_from_dict_bad_timestamp():
    data = _block().to_dict()
    data["timestamp"] = "yesterday"
    with pytest.raises(ValueError):
        Block.from_dict(data)


def test_from_dict_bad_index():
    data = _block().to_dict()
    data["index"] = -1
    with pytest.raises(ValueError):
        Block.from_dict(data)


def test_main_demonstrates_validation(capsys):
    assert main([]) == 0
    out = capsys.readouterr().out
    assert "Block 1 is valid: true" in out
    assert "Block 3 is valid: true" in out
    assert "Original block 2: true" in out
    assert "Modified block: false" in out
    assert '"data": "Charlie -> Diana 3 Tokens"' in out