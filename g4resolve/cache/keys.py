"""Deterministic cache keys for grammar content and import locations."""

from __future__ import annotations

import hashlib
import os
from pathlib import Path

from g4resolve.version import GRAMMAR_FILE_SUFFIX

HASH_ALGORITHM = "sha256"
TRUNCATE_BITS = 128
TRUNCATE_BYTES = TRUNCATE_BITS // 8


def generate_key(content: str) -> str:
    """Generate a cache key from text.

    Returns:
        32-character lowercase hex string (SHA-256 truncated to 128 bits).

    Raises:
        ValueError: If content is None.

    """
    if content is None:
        msg = "Grammar content cannot be None"
        raise ValueError(msg)

    digest = hashlib.new(HASH_ALGORITHM, content.encode("utf-8"))
    return digest.digest()[:TRUNCATE_BYTES].hex()


def expected_import_path(name: str, base_dir: str | Path) -> Path:
    """Path an import named ``name`` is expected at under ``base_dir``."""
    return Path(os.path.normpath(Path(base_dir).absolute() / f"{name}{GRAMMAR_FILE_SUFFIX}"))


def generate_import_key(name: str, base_dir: str | Path) -> str:
    """Generate the key for a resolved import from its expected location."""
    return generate_key(f"{name}:{expected_import_path(name, base_dir)}")
