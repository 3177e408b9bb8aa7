"""Structural metrics of a valid document."""

from typing import Any, Optional

from ..models.core import DocumentStats, ValidationResult
from .validator import canonical_json


def count_keys(value: Any) -> int:
    """Count object keys at every nesting depth, arrays included."""
    total = 0
    stack = [value]
    while stack:
        node = stack.pop()
        if isinstance(node, dict):
            total += len(node)
            stack.extend(node.values())
        elif isinstance(node, list):
            stack.extend(node)
    return total


def compute_stats(document: str, result: ValidationResult) -> Optional[DocumentStats]:
    """
    Derive line, character and key counts.

    Args:
        document: Raw document text
        result: Validation result for the same text

    Returns:
        DocumentStats, or None when the document is not valid
    """
    if not result.is_valid:
        return None

    return DocumentStats(
        line_count=len(document.split("\n")),
        char_count=len(canonical_json(result.value)),
        key_count=count_keys(result.value),
    )
