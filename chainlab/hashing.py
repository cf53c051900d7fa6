"""SHA-256 hashing of text, with a small interactive prompt."""

from __future__ import annotations

import hashlib
import sys
from typing import Sequence


def calculate_hash(text: str) -> str:
    """Return the lowercase hex SHA-256 digest of the UTF-8 encoding of ``text``."""
    return hashlib.sha256(text.encode("utf-8")).hexdigest()


def main(argv: Sequence[str] | None = None) -> int:
    """Read lines from standard input and print their hashes until ``exit``."""
    print("===Program to calculate hashes===")
    print("Type exit to finish the program\n")

    for_prompt = True
    while for_prompt:
        print("Enter text:")
        line = sys.stdin.readline()
        if not line:
            break
        text = line.strip()
        if text.lower() == "exit":
            print("bye bye!")
            break
        print(f"Text: {text}")
        print(f"Text hashed: {calculate_hash(text)}\n")
        print("-" * 50)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())