"""Text hashing, hash-linked blocks, a validated ledger and proof-of-work mining."""

__version__ = "0.1.0"
__all__ = ["hashing", "basic", "ledger", "mining"]