"""
Addressing lookup against precomputed per-recipient tokens.

The host mailer generates VERP tokens (unsubscribe and reply addresses) for
every queue entry ahead of delivery. This module only looks them up and
verifies the recipient hash; it never generates tokens.
"""

import logging
import re
from typing import Any, Dict

from domain.models import Addressing, ResolutionError

logger = logging.getLogger(__name__)

# Recipient hashes are alphanumeric tokens
HASH_PATTERN = re.compile(r'^[A-Za-z0-9]+$')


class PrecomputedAddressing:
    """
    Resolve Addressing from a mapping of precomputed tokens.

    Entries are keyed by queue id (as a string):

        {"7": {"hash": "abc123", "unsubscribe": "...", "reply": "...", "urls": {...}}}

    Instances are callable with the resolver signature expected by
    MailingDescriptor: (job_id, queue_id, hash, address) -> Addressing.
    """

    def __init__(self, entries: Dict[str, Dict[str, Any]]):
        self._entries = {str(key): value for key, value in (entries or {}).items()}

    def __len__(self) -> int:
        return len(self._entries)

    def __call__(self, job_id: Any, queue_id: Any, hash: str, address: str) -> Addressing:
        """
        Look up the addressing for one recipient.

        Raises:
            ResolutionError: If the hash is malformed, the queue entry is
                unknown or malformed, the hash does not match, or the entry is
                incomplete
        """
        if not isinstance(hash, str) or not HASH_PATTERN.match(hash):
            raise ResolutionError(queue_id, f"malformed hash {hash!r}")

        entry = self._entries.get(str(queue_id))
        if entry is None:
            raise ResolutionError(queue_id, f"no addressing for job {job_id}")

        if not isinstance(entry, dict):
            raise ResolutionError(queue_id, "malformed queue entry")

        if entry.get('hash') != hash:
            raise ResolutionError(queue_id, "hash does not match queue entry")

        unsubscribe = entry.get('unsubscribe')
        reply = entry.get('reply')
        if not unsubscribe or not reply:
            raise ResolutionError(queue_id, "queue entry missing 'unsubscribe' or 'reply'")

        urls = entry.get('urls') or {}
        if not isinstance(urls, dict):
            raise ResolutionError(queue_id, "queue entry 'urls' is not a mapping")

        logger.debug(f"Resolved addressing for queue {queue_id}")

        return Addressing(
            unsubscribe=unsubscribe,
            reply=reply,
            urls=dict(urls)
        )
