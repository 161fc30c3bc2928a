from __future__ import annotations

import hashlib


class ContentHasher:
    """Hex digest of a byte sequence; SHA-256 unless configured otherwise."""

    def __init__(self, algorithm: str = "sha256") -> None:
        hashlib.new(algorithm)  # fail fast on unknown algorithms
        self.algorithm = algorithm

    def hexdigest(self, data: bytes) -> str:
        h = hashlib.new(self.algorithm)
        h.update(data)
        return h.hexdigest()


def sha256_hex(data: bytes) -> str:
    return hashlib.sha256(data).hexdigest()
