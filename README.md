# chainlab

A small toolkit for experimenting with hash-linked blocks. It has four
modules, each building on the idea of the one before it:

- `chainlab.hashing`: SHA-256 hex digests of text (`calculate_hash`).
- `chainlab.basic`: single blocks whose hash covers their index, timestamp,
  data, previous hash and nonce, with JSON serialisation and a tamper check.
- `chainlab.ledger`: a validated chain of such blocks with search, statistics,
  and saving to and loading from JSON files.
- `chainlab.mining`: proof-of-work blocks that must hash to a prefix of
  zeros, a simulated competition between several miners, and a chain that
  adjusts its difficulty to the pace of mining.

It needs only the Python standard library (Python 3.10 or later).

## Installation

```
pip install .
```

## Hashing and single blocks

```python
from chainlab.hashing import calculate_hash
from chainlab.basic import Block

print(calculate_hash("hello"))            # lowercase hex SHA-256

genesis = Block.genesis()                 # index 0, data "Genesis Block", previous hash "0"
block = Block.create(1, "Alice -> Bob 1 Tokens", genesis.hash)
print(block.is_valid())                   # True
print(block.describe())
print(block.to_json())                    # indented JSON, timestamp in RFC 3339 UTC
same = Block.from_dict(block.to_dict())
```

`Block.from_dict` raises `ValueError` when a field is missing or has the
wrong type. `compute_hash(index, timestamp, data, previous_hash, nonce)` and
`format_timestamp(timestamp)` are available on their own as well.

## The ledger

```python
from chainlab.ledger import Blockchain, BlockchainError, format_block

chain = Blockchain()                      # starts with a genesis block
chain.add_block("Alice -> Bob 5 Tokens")  # returns the new block
print(chain.is_chain_valid())
print(chain.search_blocks("alice"))       # case-insensitive match on the data
length, first_time, last_time = chain.statistics()
print(chain.format_chain())
chain.save_file("blockchain.json")
restored = Blockchain.load_file("blockchain.json")
```

Errors are subclasses of `BlockchainError`: `InvalidIndexError`,
`InvalidPreviousHashError` and `InvalidHashError` come from
`validate_new_block`; `InvalidBlockError` is raised for an empty chain and
when a loaded chain fails validation. Unreadable files and malformed JSON
raise `BlockchainError` itself. `is_chain_valid` reports the first broken
block through the `chainlab.ledger` logger.

## Mining

```python
from chainlab.mining import Blockchain

chain = Blockchain()                      # mines the genesis block at difficulty 2
stats = chain.add_mined_block("Carol -> Dave 3 Tokens")
print(stats.attempts, stats.total_time, stats.hashes_per_second)
winner = chain.block_competition("Erin -> Frank 1 Token", 4)   # miner number, from 1
chain.set_difficulty(3)                   # ValueError below 1
print(chain.describe_chain())
print(chain.statistics_report())
```

Before each new block the chain calls `adjust_difficulty`: if the last (up to
three) blocks came faster than half of `target_time` (10 seconds) the
difficulty goes up by one; if slower than twice it, it goes down by one, never
below 1. A `Block` can also be mined directly with `Block.mine()` or
`Block.mining_competition(num_miners, rng)`, where `rng` is an optional
`random.Random` for repeatable runs. Progress is reported through the
`chainlab.mining` logger.

## Commands

Each command starts an interactive session in the terminal:

- `chainlab-hash`: type text and see its SHA-256 digest; type `exit` to stop.
- `chainlab-basic`: builds a short demonstration chain, prints it, serialises
  a block to JSON and shows that editing a block breaks its hash.
- `chainlab-ledger`: menu to add, show, validate, search, summarise, save to
  and load from `blockchain.json` in the current directory.
- `chainlab-mining`: menu to mine blocks, run mining competitions, show the
  chain and its statistics, and change the difficulty.

## What it does not do

- The ledger stores a `difficulty` but does no proof-of-work; only
  `chainlab.mining` mines.
- A mining chain lives in memory only: it has no saving or loading.
- Mining competitions are simulated in turn within one process; there is no
  networking, peers or consensus between nodes.

## Running the tests

```
pip install .[test]
pytest
```