"""
Utility functions for header composition.

This package contains reusable service functions for header formatting,
message-id construction and addressing lookup.
"""

__all__ = ['addressing', 'headers', 'message_id']
