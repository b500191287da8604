"""
Message-ID construction for outgoing mailings.

Message identifiers are derived deterministically from a tag, the job id,
the queue id and the recipient hash:

    <{localpart}{tag}{sep}{job_id}{sep}{queue_id}{sep}{hash}@{domain}>

Configuration comes from environment variables so the same package can run
against different mail domains per environment.
"""

import logging
import os
from typing import Any, List

logger = logging.getLogger(__name__)

# Configuration from environment
MAIL_DOMAIN = os.environ.get('MAIL_DOMAIN', 'localhost')
MAIL_LOCALPART = os.environ.get('MAIL_LOCALPART', '')
VERP_SEPARATOR = os.environ.get('VERP_SEPARATOR', '.')
INCLUDE_MESSAGE_ID = os.environ.get('MAIL_INCLUDE_MESSAGE_ID', 'true').lower() in ('1', 'true', 'yes', 'on')

# Tag used when a reply is re-laid by the mailer
RELAY_TAG = 'r'


def build_message_id(tag: str, job_id: Any, queue_id: Any, hash: str) -> str:
    """
    Build a Message-ID value for one delivery.

    Args:
        tag: Short message kind tag ('m' for mailing, 'r' for relayed reply)
        job_id: Mailing job identifier
        queue_id: Event queue identifier of the recipient
        hash: Recipient verification hash

    Returns:
        str: Message-ID value including angle brackets

    Example:
        >>> build_message_id('m', 42, 7, 'abc123')
        '<m.42.7.abc123@localhost>'
    """
    parts = [f"{MAIL_LOCALPART}{tag}", str(job_id), str(queue_id), str(hash)]
    return f"<{VERP_SEPARATOR.join(parts)}@{MAIL_DOMAIN}>"


def message_id_headers(tag: str) -> List[str]:
    """
    Get the header names that carry the message id for a tag.

    Relayed replies also get a Resent-Message-ID. Returns an empty list when
    message ids are disabled (MAIL_INCLUDE_MESSAGE_ID=false).
    """
    if not INCLUDE_MESSAGE_ID:
        return []

    fields = ['Message-ID']
    if tag == RELAY_TAG:
        fields.append('Resent-Message-ID')
    return fields
