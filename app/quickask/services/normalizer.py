"""
Purpose: Canonical form of user input before intent matching.
"""

from __future__ import annotations
from typing import Optional


def normalize(raw: Optional[str]) -> str:
    """Lower-case and trim. Never fails."""
    return (raw or "").lower().strip()


def singularize(word: str) -> str:
    """
    Drop one trailing "s". Naive on purpose: irregular plurals are not
    handled and words like "bus" lose their final letter ("bu").
    """
    return word[:-1] if word.endswith("s") else word
