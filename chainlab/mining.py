"""Proof-of-work mining with adjustable difficulty and mining competitions."""

from __future__ import annotations

import enum
import logging
import random
import re
import sys
import time
from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone
from typing import Sequence

logger = logging.getLogger(__name__)

GENESIS_DATA = "🌟 Genesis Block - The adventure begins!"
PROGRESS_EVERY = 50_000
MAX_RECOMMENDED_DIFFICULTY = 10
_EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)
_UNSIGNED = re.compile(r"^\+?\d+$")


def _now() -> datetime:
    return datetime.now(timezone.utc)


def _as_utc(timestamp: datetime) -> datetime:
    if timestamp.tzinfo is None:
        return timestamp.replace(tzinfo=timezone.utc)
    return timestamp.astimezone(timezone.utc)


def _unix_seconds(timestamp: datetime) -> int:
    return (_as_utc(timestamp) - _EPOCH) // timedelta(seconds=1)


def _rate(attempts: int, seconds: float) -> float:
    return attempts / seconds if seconds > 0 else float("inf")


@dataclass
class MiningStats:
    """Figures gathered while mining one block."""

    attempts: int
    total_time: float
    hashes_per_second: float
    start_time: float = 0.0


class MiningMethod(enum.Enum):
    """How a block was mined."""

    NORMAL = "normal"
    COMPETITION = "competition"


@dataclass
class Block:
    """A block whose hash must start with ``difficulty`` zeros."""

    index: int
    data: str
    previous_hash: str
    difficulty: int
    timestamp: datetime = field(default_factory=_now)
    hash: str = ""
    nonce: int = 0

    @classmethod
    def genesis(cls) -> "Block":
        """Build and mine the first block of a chain."""
        block = cls(0, GENESIS_DATA, "0", 2)
        logger.info("⛏️  Mining genesis block...")
        stats = block.mine()
        logger.info(
            "✅ Genesis mined in %d attempts (%.2fs)", stats.attempts, stats.total_time
        )
        return block

    def calculate_hash(self) -> str:
        """SHA-256 of the block's fields, with the timestamp in whole seconds."""
        import hashlib

        content = (
            f"{self.index}{_unix_seconds(self.timestamp)}{self.data}"
            f"{self.previous_hash}{self.nonce}{self.difficulty}"
        )
        return hashlib.sha256(content.encode("utf-8")).hexdigest()

    @property
    def target(self) -> str:
        """The prefix a valid hash must start with."""
        return "0" * self.difficulty

    def mine(self) -> MiningStats:
        """Try nonces from the current one upwards until the hash meets the target."""
        start = time.perf_counter()
        target = self.target
        attempts = 0
        logger.info("🎯 Target: hash starting with '%s'", target)
        logger.info("⚡ Mining block %d...", self.index)

        while True:
            self.hash = self.calculate_hash()
            attempts += 1

            if attempts % PROGRESS_EVERY == 0:
                elapsed = time.perf_counter() - start
                logger.info(
                    "   💭 Attempt %d: nonce=%d, hash=%s... (%.0f H/s)",
                    attempts,
                    self.nonce,
                    self.hash[:8],
                    _rate(attempts, elapsed),
                )

            if self.hash.startswith(target):
                total = time.perf_counter() - start
                hps = _rate(attempts, total)
                logger.info("🎉 BLOCK MINED!")
                logger.info("   🔢 Winning nonce: %d", self.nonce)
                logger.info("   🔐 Final hash: %s", self.hash)
                logger.info("   ⏱️  Time: %.2fs", total)
                logger.info("   ⚡ Speed: %.0f hashes/second", hps)
                return MiningStats(attempts, total, hps, start)

            self.nonce += 1

    def mining_competition(
        self, num_miners: int, rng: random.Random | None = None
    ) -> int:
        """Let miners try random nonces in turn; return the winner's number (from 1)."""
        if num_miners < 1:
            raise ValueError("at least one miner is needed")
        rng = rng if rng is not None else random.Random()
        start = time.perf_counter()
        target = self.target
        attempts = [0] * num_miners

        logger.info("🏁 MINING COMPETITION!")
        logger.info("🏭 %d miners competing for block %d", num_miners, self.index)
        logger.info("🎯 Target: %s", target)

        while True:
            for miner in range(num_miners):
                for _ in range(rng.randrange(1000, 5000)):
                    self.nonce = rng.getrandbits(64)
                    self.hash = self.calculate_hash()
                    attempts[miner] += 1
                    if self.hash.startswith(target):
                        self._report_winner(miner + 1, attempts, time.perf_counter() - start)
                        return miner + 1

            elapsed = int(time.perf_counter() - start)
            if elapsed > 0 and elapsed % 10 == 0:
                logger.info(
                    "   📈 Progress: %d total attempts in %ds", sum(attempts), elapsed
                )

    def _report_winner(self, winner: int, attempts: list[int], total: float) -> None:
        total_attempts = sum(attempts)
        logger.info("🏆 WINNER: MINER %d!", winner)
        logger.info("   🔢 Winning nonce: %d", self.nonce)
        logger.info("   🔐 Hash: %s", self.hash)
        logger.info("   ⏱️  Total time: %.2fs", total)
        logger.info("   📊 Total attempts by all miners: %d", total_attempts)
        for number, count in enumerate(attempts, start=1):
            logger.info(
                "      Miner %d: %d attempts (%.1f%%)",
                number,
                count,
                count / total_attempts * 100.0,
            )

    def is_valid(self) -> bool:
        """Whether the stored hash matches the contents and meets the target."""
        return self.calculate_hash() == self.hash and self.hash.startswith(self.target)

    def describe(self) -> str:
        """Return a boxed, multi-line summary of the block."""
        if len(self.previous_hash) <= 16:
            previous = self.previous_hash
        else:
            previous = f"{self.previous_hash[:16]}..."
        moment = _as_utc(self.timestamp).strftime("%Y-%m-%d %H:%M:%S UTC")
        return "\n".join(
            [
                f"┌─ BLOCK {self.index} (Difficulty: {self.difficulty}) ────────────────────",
                f"│ ⏰ Time: {moment}",
                f"│ 📝 Data: {self.data}",
                f"│ 🔗 Previous hash: {previous}",
                f"│ 🔐 Hash: {self.hash}",
                f"│ 🔢 Nonce: {self.nonce}",
                f"│ ✅ Valid: {'✓' if self.is_valid() else '✗'}",
                "└─────────────────────────────────────────────────",
            ]
        )


def _genesis_chain() -> list[Block]:
    return [Block.genesis()]


@dataclass
class Blockchain:
    """A chain of mined blocks whose difficulty follows the mining pace."""

    chain: list[Block] = field(default_factory=_genesis_chain)
    difficulty: int = 2
    target_time: int = 10
    mining_stats: list[tuple[MiningStats, MiningMethod]] = field(default_factory=list)
    manual_difficulty_changes: list[tuple[int, int]] = field(default_factory=list)
    rng: random.Random = field(default_factory=random.Random, repr=False, compare=False)

    def last_block(self) -> Block:
        """The most recent block."""
        return self.chain[-1]

    def _next_block(self, data: str) -> Block:
        last = self.last_block()
        self.adjust_difficulty()
        return Block(last.index + 1, data, last.hash, self.difficulty)

    def add_mined_block(self, data: str) -> MiningStats:
        """Mine a block holding ``data``, append it and return its statistics."""
        block = self._next_block(data)
        logger.info("\n🚀 STARTING TO MINE BLOCK %d", block.index)
        logger.info("📊 Current difficulty: %d", self.difficulty)
        stats = block.mine()
        self.chain.append(block)
        self.mining_stats.append((stats, MiningMethod.NORMAL))
        return stats

    def block_competition(self, data: str, num_miners: int) -> int:
        """Mine a block by competition, append it and return the winning miner."""
        if num_miners < 1:
            raise ValueError("at least one miner is needed")
        block = self._next_block(data)
        winner = block.mining_competition(num_miners, self.rng)
        self.chain.append(block)
        self.mining_stats.append(
            (MiningStats(0, 0.0, 0.0, time.perf_counter()), MiningMethod.COMPETITION)
        )
        return winner

    def adjust_difficulty(self) -> int:
        """Tune the difficulty from the pace of the last blocks; return it."""
        if len(self.chain) < 2:
            return self.difficulty

        recent = min(3, len(self.chain) - 1)
        window = self.chain[len(self.chain) - recent - 1 :]
        total = sum(
            _unix_seconds(current.timestamp) - _unix_seconds(previous.timestamp)
            for previous, current in zip(window, window[1:])
        )
        average = total / recent
        logger.info("⏱️ Average block mining time: %.2fs", average)

        if average < self.target_time / 2.0:
            self.difficulty += 1
            logger.info("⬆️ Increasing difficulty to %d", self.difficulty)
        elif average > self.target_time * 2.0 and self.difficulty > 1:
            self.difficulty -= 1
            logger.info("⬇️ Decreasing difficulty to %d", self.difficulty)
        else:
            logger.info("↔️ Difficulty stays at %d", self.difficulty)
        return self.difficulty

    def describe_chain(self) -> str:
        """Return every block's summary between a header and a footer."""
        return "\n".join(
            [
                "\n=== BLOCKCHAIN CHAIN ===",
                *(block.describe() for block in self.chain),
                "=======================\n",
            ]
        )

    def set_difficulty(self, new_difficulty: int) -> None:
        """Set the difficulty by hand; it must be at least 1."""
        if new_difficulty < 1:
            raise ValueError("Difficulty must be at least 1")
        if new_difficulty > MAX_RECOMMENDED_DIFFICULTY:
            logger.warning(
                "⚠️ Warning: Setting difficulty above 10 may make mining very slow"
            )
        old = self.difficulty
        self.manual_difficulty_changes.append((old, new_difficulty))
        self.difficulty = new_difficulty
        logger.info("🔄 Difficulty manually changed: %d → %d", old, new_difficulty)

    def statistics_report(self) -> str:
        """Return a textual report on the chain and how it was mined."""
        lines = [
            "\n📊 BLOCKCHAIN STATISTICS 📊",
            "───────────────────────────",
            f"📏 Total blocks: {len(self.chain)}",
            f"🔶 Current difficulty: {self.difficulty}",
            f"⏱️  Target mining time: {self.target_time}s",
        ]
        if len(self.chain) <= 1:
            lines.append("Not enough blocks for detailed statistics.\n")
            return "\n".join(lines)

        total_time = sum(
            int((current.timestamp - previous.timestamp).total_seconds())
            for previous, current in zip(self.chain, self.chain[1:])
        )
        lines.append(f"⏱️  Average mining time: {total_time / (len(self.chain) - 1):.2f}s")

        normal = [stats for stats, method in self.mining_stats if method is MiningMethod.NORMAL]
        competition = sum(
            1 for _, method in self.mining_stats if method is MiningMethod.COMPETITION
        )
        counted = len(self.mining_stats)

        def share(count: int) -> float:
            return count / counted * 100.0 if counted else 0.0

        lines += [
            "👨‍💻 Mining methods:",
            f"   - Normal mining: {len(normal)} blocks ({share(len(normal)):.1f}%)",
            f"   - Competition mining: {competition} blocks ({share(competition):.1f}%)",
        ]

        if normal:
            total_attempts = sum(stats.attempts for stats in normal)
            avg_rate = sum(stats.hashes_per_second for stats in normal) / len(normal)
            lines += [
                "⚙️ Normal mining performance:",
                f"   - Total hash attempts: {total_attempts}",
                f"   - Average attempts per block: {total_attempts / len(normal):.0f}",
                f"   - Average hash rate: {avg_rate:.0f} H/s",
            ]

        if self.manual_difficulty_changes:
            lines.append("🔧 Manual difficulty changes:")
            lines += [
                f"   {number}. {old} → {new}"
                for number, (old, new) in enumerate(self.manual_difficulty_changes, start=1)
            ]

        lines.append("───────────────────────────\n")
        return "\n".join(lines)


def _read(prompt: str | None = None) -> str | None:
    if prompt is not None:
        print(prompt)
    line = sys.stdin.readline()
    return line.strip() if line else None


def _parse_unsigned(text: str, limit: int) -> int | None:
    if not _UNSIGNED.match(text):
        return None
    value = int(text)
    return value if value <= limit else None


def main(argv: Sequence[str] | None = None) -> int:
    """Run the interactive mining menu on standard input."""
    logging.basicConfig(level=logging.INFO, format="%(message)s", stream=sys.stdout)
    print("🖥️  Welcome to Rust Blockchain Mining Simulator!")
    blockchain = Blockchain()

    while True:
        print("Choose an option:")
        print("1. Mine a new block")
        print("2. Mining competition (multiple miners)")
        print("3. Display blockchain")
        print("4. Show statistics")
        print("5. Change difficulty")
        print("6. Exit")
        print("> ", end="", flush=True)

        choice = _read()
        if choice is None:
            break
        if choice == "1":
            data = _read("Enter data for the new block:")
            if data is None:
                break
            stats = blockchain.add_mined_block(data)
            print(f"Block mined in {stats.attempts} attempts ({stats.total_time:.2f}s)")
        elif choice == "2":
            data = _read("Enter data for the new block:")
            if data is None:
                break
            answer = _read("Enter number of miners competing:")
            if answer is None:
                break
            miners = _parse_unsigned(answer, 2**32 - 1) or 3
            winner = blockchain.block_competition(data, miners)
            print(f"Miner {winner} won the competition!")
        elif choice == "3":
            print(blockchain.describe_chain())
        elif choice == "4":
            print(blockchain.statistics_report())
        elif choice == "5":
            answer = _read("Enter new difficulty (1-10 recommended):")
            if answer is None:
                break
            value = _parse_unsigned(answer, 2**64 - 1)
            if value is None:
                print("❌ Error: Invalid difficulty value")
                continue
            try:
                blockchain.set_difficulty(value)
            except ValueError as exc:
                print(f"❌ Error: {exc}")
        elif choice == "6":
            print("Goodbye!")
            break
        else:
            print("Invalid option, please choose again.")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())