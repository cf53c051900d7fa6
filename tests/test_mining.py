import io
import random
from datetime import datetime, timedelta, timezone

import pytest

from chainlab.mining import (
    GENESIS_DATA,
    Block,
    Blockchain,
    MiningMethod,
    MiningStats,
    main,
)

BASE = datetime(2024, 1, 1, 12, 0, 0, tzinfo=timezone.utc)


def _chain(gaps, difficulty=2):
    blocks = [Block(0, "g", "0", 0, timestamp=BASE)]
    moment = BASE
    for number, gap in enumerate(gaps, start=1):
        moment = moment + timedelta(seconds=gap)
        blocks.append(Block(number, f"b{number}", blocks[-1].hash, 0, timestamp=moment))
    return Blockchain(chain=blocks, difficulty=difficulty)


def test_hash_is_hex_sha256():
    block = Block(1, "data", "abc", 1, timestamp=BASE)
    digest = block.calculate_hash()
    assert len(digest) == 64
    assert set(digest) <= set("0123456789abcdef")


def test_hash_uses_whole_seconds_only():
    first = Block(1, "data", "abc", 1, timestamp=BASE)
    second = Block(1, "data", "abc", 1, timestamp=BASE + timedelta(microseconds=900_000))
    assert first.calculate_hash() == second.calculate_hash()


def test_hash_depends_on_nonce_and_difficulty():
    block = Block(1, "data", "abc", 1, timestamp=BASE)
    original = block.calculate_hash()
    block.nonce = 1
    assert block.calculate_hash() != original
    other = Block(1, "data", "abc", 2, timestamp=BASE)
    assert other.calculate_hash() != original


def test_mine_finds_valid_hash():
    block = Block(1, "payload", "prev", 2, timestamp=BASE)
    stats = block.mine()
    assert block.hash.startswith("00")
    assert block.is_valid()
    assert stats.attempts == block.nonce + 1
    assert stats.hashes_per_second > 0


def test_tampering_invalidates_block():
    block = Block(1, "payload", "prev", 1, timestamp=BASE)
    block.mine()
    block.data = "other"
    assert block.is_valid() is False


def test_zero_difficulty_accepts_any_hash():
    block = Block(1, "payload", "prev", 0, timestamp=BASE)
    block.hash = block.calculate_hash()
    assert block.is_valid() is True


def test_hash_must_meet_target():
    block = Block(1, "payload", "prev", 64, timestamp=BASE)
    block.hash = block.calculate_hash()
    assert block.is_valid() is False


def test_genesis():
    block = Block.genesis()
    assert block.index == 0
    assert block.previous_hash == "0"
    assert block.data == GENESIS_DATA
    assert block.difficulty == 2
    assert block.is_valid()


def test_mining_competition_returns_winner():
    block = Block(1, "race", "prev", 1, timestamp=BASE)
    winner = block.mining_competition(3, random.Random(5))
    assert 1 <= winner <= 3
    assert block.is_valid()


def test_mining_competition_needs_miners():
    block = Block(1, "race", "prev", 1, timestamp=BASE)
    with pytest.raises(ValueError):
        block.mining_competition(0, random.Random(5))


def test_describe_short_previous_hash():
    block = Block(0, "hello", "0", 0, timestamp=BASE)
    block.hash = block.calculate_hash()
    text = block.describe()
    assert "BLOCK 0 (Difficulty: 0)" in text
    assert "│ 🔗 Previous hash: 0\n" in text
    assert "│ ⏰ Time: 2024-01-01 12:00:00 UTC" in text
    assert "│ ✅ Valid: ✓" in text


def test_describe_long_previous_hash_is_truncated():
    previous = "a" * 64
    block = Block(1, "hello", previous, 0, timestamp=BASE)
    text = block.describe()
    assert f"│ 🔗 Previous hash: {'a' * 16}...\n" in text
    assert "│ ✅ Valid: ✗" in text


def test_new_blockchain_has_genesis():
    chain = Blockchain()
    assert len(chain.chain) == 1
    assert chain.last_block().index == 0
    assert chain.difficulty == 2
    assert chain.target_time == 10


def test_add_mined_block_links_and_records():
    chain = Blockchain()
    stats = chain.add_mined_block("tx")
    last = chain.last_block()
    assert len(chain.chain) == 2
    assert last.index == 1
    assert last.previous_hash == chain.chain[0].hash
    assert last.difficulty == 2
    assert last.is_valid()
    assert chain.mining_stats == [(stats, MiningMethod.NORMAL)]
    assert stats.attempts == last.nonce + 1


def test_block_competition_records_method():
    chain = Blockchain(rng=random.Random(11))
    chain.set_difficulty(1)
    winner = chain.block_competition("race", 2)
    assert winner in (1, 2)
    assert chain.last_block().is_valid()
    stats, method = chain.mining_stats[-1]
    assert method is MiningMethod.COMPETITION
    assert stats.attempts == 0


def test_adjust_difficulty_single_block_unchanged():
    chain = _chain([], difficulty=4)
    assert chain.adjust_difficulty() == 4


@pytest.mark.parametrize(
    "gaps, start, expected",
    [
        ([0, 0, 0], 2, 3),
        ([30, 30, 30], 3, 2),
        ([30, 30], 1, 1),
        ([10, 10, 10], 2, 2),
        ([100, 1, 1, 1], 2, 3),
    ],
)
def test_adjust_difficulty(gaps, start, expected):
    chain = _chain(gaps, difficulty=start)
    assert chain.adjust_difficulty() == expected
    assert chain.difficulty == expected


def test_set_difficulty_records_change():
    chain = _chain([])
    chain.set_difficulty(5)
    assert chain.difficulty == 5
    assert chain.manual_difficulty_changes == [(2, 5)]


def test_set_difficulty_rejects_zero():
    chain = _chain([])
    with pytest.raises(ValueError):
        chain.set_difficulty(0)
    assert chain.difficulty == 2
    assert chain.manual_difficulty_changes == []


def test_statistics_report_short_chain():
    report = _chain([]).statistics_report()
    assert "📏 Total blocks: 1" in report
    assert "Not enough blocks for detailed statistics." in report


def test_statistics_report_after_mining():
    chain = Blockchain()
    chain.add_mined_block("tx")
    chain.set_difficulty(4)
    report = chain.statistics_report()
    assert "📏 Total blocks: 2" in report
    assert "Normal mining: 1 blocks (100.0%)" in report
    assert "Competition mining: 0 blocks (0.0%)" in report
    assert "   1. 2 → 4" in report


def test_statistics_report_average_time():
    chain = _chain([10, 20])
    chain.mining_stats.append((MiningStats(1, 1.0, 1.0), MiningMethod.NORMAL))
    assert "⏱️  Average mining time: 15.00s" in chain.statistics_report()


def test_describe_chain_contains_blocks():
    chain = _chain([5, 5])
    text = chain.describe_chain()
    assert "=== BLOCKCHAIN CHAIN ===" in text
    assert text.count("┌─ BLOCK") == 3


def test_main_exit(monkeypatch, capsys):
    monkeypatch.setattr("sys.stdin", io.StringIO("6\n"))
    assert main([]) == 0
    assert "Goodbye!" in capsys.readouterr().out


def test_main_difficulty_errors(monkeypatch, capsys):
    monkeypatch.setattr("sys.stdin", io.StringIO("5\n0\n5\nabc\n9\n6\n"))
    main([])
    out = capsys.readouterr().out
    assert "❌ Error: Difficulty must be at least 1" in out
    assert "❌ Error: Invalid difficulty value" in out
    assert "Invalid option, please choose again." in out


def test_main_mines_block(monkeypatch, capsys):
    monkeypatch.setattr("sys.stdin", io.StringIO("1\nhello\n3\n6\n"))
    main([])
    out = capsys.readouterr().out
    assert "Block mined in" in out
    assert "📝 Data: hello" in out