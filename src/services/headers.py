"""
Header formatting utilities for outgoing mailings.

This module provides small, pure helpers for building header values and
merging computed headers into a task's existing header map.
"""

from typing import Dict


def format_from(name: str, email: str) -> str:
    """
    Format a From header value.

    Example:
        >>> format_from("Acme News", "news@acme.test")
        '"Acme News" <news@acme.test>'
    """
    return f'"{name}" <{email}>'


def format_list_unsubscribe(uri: str) -> str:
    """Format a List-Unsubscribe header value as a mailto link."""
    return f"<mailto:{uri}>"


def merge_headers(computed: Dict[str, str], existing: Dict[str, str]) -> Dict[str, str]:
    """
    Merge computed default headers with headers a task already carries.

    Existing values always win. Keys keep the computed order; headers only
    present in `existing` follow in their own order.

    Args:
        computed: Default headers computed for the task
        existing: Headers already set on the task

    Returns:
        New merged header dict (inputs are not modified)

    Example:
        >>> merge_headers({'From': 'a', 'Precedence': 'bulk'}, {'From': 'b'})
        {'From': 'b', 'Precedence': 'bulk'}
    """
    merged = dict(computed)
    merged.update(existing)
    return merged
