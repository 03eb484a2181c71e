"""
Load and filter the word list the graph is built from.
Uses WORD_LIST (env) or the system dict (e.g. /usr/share/dict/words).
"""
from __future__ import annotations

import os
import re
from pathlib import Path

DEFAULT_WORD_LIST = Path("/usr/share/dict/words")
ALPHA_ONLY = re.compile(r"^[a-zA-Z]+$")


def get_word_list_path(path: Path | str | None = None) -> Path:
    if path:
        return Path(path)
    p = os.environ.get("WORD_LIST")
    if p:
        return Path(p)
    if DEFAULT_WORD_LIST.exists():
        return DEFAULT_WORD_LIST
    raise FileNotFoundError(
        "No word list found. Set WORD_LIST to a path or install system dict (e.g. /usr/share/dict/words)."
    )


def normalize_word(word: str) -> str:
    return (word or "").strip().upper()


def load_words(length: int | None = None, path: Path | str | None = None) -> list[str]:
    """Uppercased, deduplicated alphabetic words, optionally only those of one length."""
    word_path = get_word_list_path(path)
    if not word_path.exists():
        raise FileNotFoundError(f"Word list not found at {word_path}")
    words: list[str] = []
    seen: set[str] = set()
    with open(word_path, "r", encoding="utf-8", errors="ignore") as f:
        for line in f:
            w = normalize_word(line)
            if not w or w in seen or not ALPHA_ONLY.match(w):
                continue
            if length is not None and len(w) != length:
                continue
            words.append(w)
            seen.add(w)
    return words
