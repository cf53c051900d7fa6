"""A validated, searchable blockchain that can be saved to and loaded from JSON."""

from __future__ import annotations

import json
import logging
import sys
from dataclasses import dataclass, field
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Sequence

from chainlab.basic import Block, compute_hash

logger = logging.getLogger(__name__)

DEFAULT_FILE = "blockchain.json"


class BlockchainError(Exception):
    """Base class for every error raised by the ledger."""


class InvalidIndexError(BlockchainError):
    """A new block does not carry the index that follows the last block."""

    def __init__(self, expected: int, found: int) -> None:
        super().__init__(f"Invalid index: expected {expected}, found {found}")
        self.expected = expected
        self.found = found


class InvalidPreviousHashError(BlockchainError):
    """A new block does not point at the hash of the last block."""

    def __init__(self, expected: str, found: str) -> None:
        super().__init__(f"Invalid previous hash: expected {expected}, found {found}")
        self.expected = expected
        self.found = found


class InvalidHashError(BlockchainError):
    """A new block's stored hash does not match its contents."""

    def __init__(self, last_hash: str, block_hash: str) -> None:
        super().__init__(f"Invalid hash: last_hash {last_hash}, block_hash {block_hash}")
        self.last_hash = last_hash
        self.block_hash = block_hash


class InvalidBlockError(BlockchainError):
    """A block or chain is unusable for the reason given in ``message``."""

    def __init__(self, index: int, message: str) -> None:
        super().__init__(f"Invalid block: {index}: {message}")
        self.index = index
        self.message = message


def _short_time(timestamp: datetime) -> str:
    ts = timestamp.astimezone(timezone.utc) if timestamp.tzinfo else timestamp
    return ts.strftime("%Y-%m-%d %H:%M:%S UTC")


def format_block(block: Block) -> str:
    """Return a boxed, multi-line summary of a block."""
    return "\n".join(
        [
            f"┌─ BLOQUE {block.index} ─────────────────────────────────────",
            f"| Timestamp: {_short_time(block.timestamp)}",
            f"| Data: {block.data}",
            f"| Previous Hash: {block.previous_hash[:16]}",
            f"| Hash: {block.hash[:16]}",
            f"| Valid: {'✓' if block.is_valid() else '✗'}",
            "└─────────────────────────────────────────────────",
        ]
    )


def _initial_chain() -> list[Block]:
    return [Block.genesis()]


@dataclass
class Blockchain:
    """An ordered list of hash-linked blocks, starting with a genesis block."""

    chain: list[Block] = field(default_factory=_initial_chain)
    difficulty: int = 2

    def last_block(self) -> Block | None:
        """The most recent block, or ``None`` for an empty chain."""
        return self.chain[-1] if self.chain else None

    def _require_last(self) -> Block:
        last = self.last_block()
        if last is None:
            raise InvalidBlockError(0, "No blocks in chain")
        return last

    def add_block(self, data: str) -> Block:
        """Append a new block holding ``data`` and return it."""
        last = self._require_last()
        index = last.index + 1
        timestamp = datetime.now(timezone.utc)
        nonce = 0
        digest = compute_hash(index, timestamp, data, last.hash, nonce)
        block = Block(index, timestamp, data, last.hash, digest, nonce)
        self.validate_new_block(block)
        self.chain.append(block)
        return block

    def validate_new_block(self, block: Block) -> None:
        """Raise if ``block`` cannot follow the current last block."""
        last = self._require_last()
        if block.index != last.index + 1:
            raise InvalidIndexError(last.index + 1, block.index)
        if block.previous_hash != last.hash:
            raise InvalidPreviousHashError(last.hash, block.previous_hash)
        if not block.is_valid():
            raise InvalidHashError(last.hash, block.hash)

    def is_chain_valid(self) -> bool:
        """Whether every block is intact and linked to its predecessor."""
        for previous, current in zip(self.chain, self.chain[1:]):
            if not current.is_valid():
                logger.warning("Invalid block at index %s", current.index)
                return False
            if current.previous_hash != previous.hash:
                logger.warning("Previous hash mismatch at block %s", current.index)
                return False
        return True

    def search_blocks(self, text: str) -> list[Block]:
        """Blocks whose data contains ``text``, ignoring case."""
        needle = text.lower()
        return [block for block in self.chain if needle in block.data.lower()]

    def statistics(self) -> tuple[int, str, str]:
        """Chain length and the formatted times of the first and last blocks."""
        if not self.chain:
            raise InvalidBlockError(0, "Chain is empty")
        return (
            len(self.chain),
            _short_time(self.chain[0].timestamp),
            _short_time(self.chain[-1].timestamp),
        )

    def format_chain(self) -> str:
        """Return every block's summary under a heading."""
        return "\n".join(
            ["===Complete Blockchain===\n", *(format_block(block) for block in self.chain)]
        )

    def to_dict(self) -> dict[str, Any]:
        """Return the chain as a JSON-ready mapping."""
        return {
            "chain": [block.to_dict() for block in self.chain],
            "difficulty": self.difficulty,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Blockchain":
        """Rebuild a chain from a mapping produced by :meth:`to_dict`."""
        if not isinstance(data, dict):
            raise ValueError("blockchain must be an object")
        try:
            raw_chain = data["chain"]
            difficulty = data["difficulty"]
        except KeyError as exc:
            raise ValueError(f"missing field {exc.args[0]!r}") from None
        if not isinstance(raw_chain, list):
            raise ValueError("field 'chain' must be a list")
        if isinstance(difficulty, bool) or not isinstance(difficulty, int) or difficulty < 0:
            raise ValueError("field 'difficulty' must be a non-negative integer")
        blocks = []
        for raw in raw_chain:
            if not isinstance(raw, dict):
                raise ValueError("every block must be an object")
            blocks.append(Block.from_dict(raw))
        return cls(chain=blocks, difficulty=difficulty)

    def save_file(self, path: str | Path) -> None:
        """Write the chain to ``path`` as indented JSON."""
        text = json.dumps(self.to_dict(), indent=2, ensure_ascii=False)
        try:
            Path(path).write_text(text, encoding="utf-8")
        except OSError as exc:
            raise BlockchainError(f"IO error: {exc}") from exc

    @classmethod
    def load_file(cls, path: str | Path) -> "Blockchain":
        """Read a chain from ``path`` and check that it is valid."""
        try:
            content = Path(path).read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as exc:
            raise BlockchainError(f"IO error: {exc}") from exc
        try:
            blockchain = cls.from_dict(json.loads(content))
        except ValueError as exc:
            raise BlockchainError(f"JSON error: {exc}") from exc
        if not blockchain.is_chain_valid():
            raise InvalidBlockError(0, "Invalid blockchain")
        return blockchain


def _read(prompt: str) -> str | None:
    print(prompt)
    line = sys.stdin.readline()
    return line.strip() if line else None


def main(argv: Sequence[str] | None = None) -> int:
    """Run the interactive ledger menu on standard input."""
    print("===Program to simulate a blockchain===\n")
    blockchain = Blockchain()

    print("\n===Interactive Menu===\n")
    for option in (
        "1. Add block",
        "2. Show blockchain",
        "3. Validate blockchain",
        "4. Search blocks",
        "5. Statistics",
        "6. Save blockchain",
        "7. Load blockchain",
        "8. Exit",
    ):
        print(f"{option}\n")

    while True:
        choice = _read("Enter your choice: ")
        if choice is None:
            break
        if choice == "1":
            data = _read("Enter block data: ")
            if data is None:
                break
            try:
                blockchain.add_block(data)
                print("Block added successfully!")
            except BlockchainError as exc:
                print(f"Error adding block: {exc}")
        elif choice == "2":
            print(blockchain.format_chain())
        elif choice == "3":
            if blockchain.is_chain_valid():
                print("Blockchain is valid!")
            else:
                print("Blockchain is invalid!")
        elif choice == "4":
            text = _read("Enter search text: ")
            if text is None:
                break
            found = blockchain.search_blocks(text)
            if not found:
                print("No blocks found with this text")
            for block in found:
                print(format_block(block))
        elif choice == "5":
            try:
                length, start, end = blockchain.statistics()
                print(f"Blockchain length: {length}")
                print(f"Start time: {start}")
                print(f"End time: {end}")
            except BlockchainError as exc:
                print(f"Error getting statistics: {exc}")
        elif choice == "6":
            try:
                blockchain.save_file(DEFAULT_FILE)
                print(f"Blockchain saved to {DEFAULT_FILE}")
            except BlockchainError as exc:
                print(f"Error saving blockchain: {exc}")
        elif choice == "7":
            try:
                blockchain = Blockchain.load_file(DEFAULT_FILE)
                print(f"Blockchain loaded from {DEFAULT_FILE}")
                print("Blockchain loaded successfully!")
            except BlockchainError as exc:
                print(f"Error loading blockchain: {exc}")
        elif choice == "8":
            print("Goodbye!")
            break
        else:
            print("Invalid choice!\n")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())