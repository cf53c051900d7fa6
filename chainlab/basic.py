"""A simple hash-linked block with validation and JSON serialisation."""

from __future__ import annotations

import dataclasses
import hashlib
import json
import re
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Any, Sequence

_RFC3339 = re.compile(
    r"^(\d{4})-(\d{2})-(\d{2})[Tt ](\d{2}):(\d{2}):(\d{2})"
    r"(?:\.(\d+))?(Z|z|[+-]\d{2}:\d{2})$"
)


def _as_utc(timestamp: datetime) -> datetime:
    if timestamp.tzinfo is None:
        return timestamp.replace(tzinfo=timezone.utc)
    return timestamp.astimezone(timezone.utc)


def _fraction(microsecond: int) -> str:
    if microsecond == 0:
        return ""
    if microsecond % 1000 == 0:
        return f".{microsecond // 1000:03d}"
    return f".{microsecond:06d}"


def format_timestamp(timestamp: datetime) -> str:
    """Render a timestamp as ``YYYY-MM-DD HH:MM:SS[.fff] UTC``."""
    ts = _as_utc(timestamp)
    return f"{ts:%Y-%m-%d %H:%M:%S}{_fraction(ts.microsecond)} UTC"


def _to_rfc3339(timestamp: datetime) -> str:
    ts = _as_utc(timestamp)
    return f"{ts:%Y-%m-%dT%H:%M:%S}{_fraction(ts.microsecond)}Z"


def _parse_rfc3339(text: str) -> datetime:
    match = _RFC3339.match(text)
    if match is None:
        raise ValueError(f"invalid timestamp: {text!r}")
    year, month, day, hour, minute, second, frac, offset = match.groups()
    micro = int((frac or "0")[:6].ljust(6, "0"))
    if offset in ("Z", "z"):
        tz = timezone.utc
    else:
        sign = 1 if offset[0] == "+" else -1
        hours, minutes = int(offset[1:3]), int(offset[4:6])
        tz = timezone(sign * timedelta(hours=hours, minutes=minutes))
    moment = datetime(
        int(year), int(month), int(day), int(hour), int(minute), int(second), micro, tzinfo=tz
    )
    return moment.astimezone(timezone.utc)


def compute_hash(
    index: int, timestamp: datetime, data: str, previous_hash: str, nonce: int
) -> str:
    """Hash the concatenated block fields with SHA-256, as lowercase hex."""
    content = f"{index}{format_timestamp(timestamp)}{data}{previous_hash}{nonce}"
    return hashlib.sha256(content.encode("utf-8")).hexdigest()


@dataclass
class Block:
    """One block of a chain, linked to its predecessor by hash."""

    index: int
    timestamp: datetime
    data: str
    previous_hash: str
    hash: str
    nonce: int = 0

    @classmethod
    def create(cls, index: int, data: str, previous_hash: str) -> "Block":
        """Build a block stamped with the current time and its hash filled in."""
        timestamp = datetime.now(timezone.utc)
        nonce = 0
        digest = compute_hash(index, timestamp, data, previous_hash, nonce)
        return cls(index, timestamp, data, previous_hash, digest, nonce)

    @classmethod
    def genesis(cls) -> "Block":
        """Build the first block of a chain."""
        return cls.create(0, "Genesis Block", "0")

    def is_valid(self) -> bool:
        """Whether the stored hash matches the block's contents."""
        expected = compute_hash(
            self.index, self.timestamp, self.data, self.previous_hash, self.nonce
        )
        return expected == self.hash

    def describe(self) -> str:
        """Return a multi-line description of the block."""
        return "\n".join(
            [
                f"Index: {self.index}",
                f"Timestamp: {format_timestamp(self.timestamp)}",
                f"Data: {self.data}",
                f"Previous Hash: {self.previous_hash}",
                f"Hash: {self.hash}",
                f"Nonce: {self.nonce}",
            ]
        )

    def to_dict(self) -> dict[str, Any]:
        """Return the block as a JSON-ready mapping."""
        return {
            "index": self.index,
            "timestamp": _to_rfc3339(self.timestamp),
            "data": self.data,
            "previous_hash": self.previous_hash,
            "hash": self.hash,
            "nonce": self.nonce,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Block":
        """Rebuild a block from a mapping produced by :meth:`to_dict`."""
        try:
            index = data["index"]
            timestamp = data["timestamp"]
            text = data["data"]
            previous_hash = data["previous_hash"]
            digest = data["hash"]
            nonce = data["nonce"]
        except KeyError as exc:
            raise ValueError(f"missing field {exc.args[0]!r}") from None
        for name, value in (("index", index), ("nonce", nonce)):
            if isinstance(value, bool) or not isinstance(value, int) or value < 0:
                raise ValueError(f"field {name!r} must be a non-negative integer")
        for name, value in (
            ("timestamp", timestamp),
            ("data", text),
            ("previous_hash", previous_hash),
            ("hash", digest),
        ):
            if not isinstance(value, str):
                raise ValueError(f"field {name!r} must be a string")
        return cls(index, _parse_rfc3339(timestamp), text, previous_hash, digest, nonce)

    def to_json(self) -> str:
        """Serialise the block as indented JSON."""
        return json.dumps(self.to_dict(), indent=2, ensure_ascii=False)


def main(argv: Sequence[str] | None = None) -> int:
    """Build a short chain, show it, and demonstrate tamper detection."""
    print("===Program to simulate a blockchain===\n")

    genesis = Block.genesis()
    print(genesis.describe())

    block_1 = Block.create(1, "Alice -> Bob 1 Tokens", genesis.hash)
    print(block_1.describe())

    block_2 = Block.create(2, "Bob -> Alice 2 Tokens", block_1.hash)
    print(block_2.describe())

    block_3 = Block.create(3, "Charlie -> Diana 3 Tokens", block_2.hash)
    print(block_3.describe())

    print("\n===Serializing JSON block 3===\n")
    print(f"JSON: {block_3.to_json()}")

    print("\n===Validation===\n")
    for number, block in ((1, block_1), (2, block_2), (3, block_3)):
        print(f"Block {number} is valid: {str(block.is_valid()).lower()}")

    print("\n===Inmutability===\n")
    modified = dataclasses.replace(block_2, data="Alice -> Bob 1 Tokens")
    print(f"Original block 2: {str(block_2.is_valid()).lower()}")
    print(f"Modified block: {str(modified.is_valid()).lower()}")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())