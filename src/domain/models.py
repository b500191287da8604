"""
Data models for the mailing header domain.

These type-safe data structures define clear contracts between the batch
orchestrator, the addressing resolver and the header composer.
"""

from dataclasses import dataclass, field
from typing import Any, Callable, Dict, Optional

from services.headers import format_from


class ResolutionError(ValueError):
    """
    Addressing lookup failed for a single delivery task.

    Raised by addressing resolvers (e.g. malformed or expired hash). The
    composer scopes it to the failing task; the rest of the batch continues.
    """

    def __init__(self, event_queue_id: Any, reason: str):
        self.event_queue_id = event_queue_id
        self.reason = reason
        super().__init__(f"Cannot resolve addressing for queue {event_queue_id}: {reason}")


@dataclass(frozen=True)
class Addressing:
    """
    Recipient-specific addresses resolved for one delivery task.

    Attributes:
        unsubscribe: Unsubscribe address (used in List-Unsubscribe)
        reply: Per-recipient reply address (default Reply-To)
        urls: Other tracking URLs (not used for headers)
    """
    unsubscribe: str
    reply: str
    urls: Dict[str, str] = field(default_factory=dict)


# resolver(job_id, queue_id, hash, address) -> Addressing
AddressingResolver = Callable[[Any, Any, str, str], Addressing]


@dataclass(frozen=True)
class MailingDescriptor:
    """
    Read-only view of a mailing campaign.

    Attributes:
        from_name: Sender display name
        from_email: Sender address
        replyto_email: Explicit Reply-To address (None when not set)
        resolver: Callable resolving per-recipient Addressing
    """
    from_name: str
    from_email: str
    replyto_email: Optional[str] = None
    resolver: Optional[AddressingResolver] = field(default=None, repr=False, compare=False)

    def __post_init__(self):
        # Empty strings from the host mean "not set"
        if self.replyto_email is not None and not self.replyto_email.strip():
            object.__setattr__(self, 'replyto_email', None)

    @property
    def from_header(self) -> str:
        """Formatted From header value: "Name" <email>."""
        return format_from(self.from_name, self.from_email)

    def resolve_addressing(self, job_id: Any, queue_id: Any, hash: str, address: str) -> Addressing:
        """
        Resolve recipient-specific addresses for one delivery task.

        Returns:
            Addressing for the recipient

        Raises:
            ResolutionError: If the lookup fails or no resolver is configured
        """
        if self.resolver is None:
            raise ResolutionError(queue_id, "mailing has no addressing resolver")
        return self.resolver(job_id, queue_id, hash, address)


@dataclass(frozen=True)
class JobDescriptor:
    """Identifies the mailing job run. `id` is stable within a batch."""
    id: Any


@dataclass
class DeliveryTask:
    """
    One recipient unit within a batch.

    Attributes:
        event_queue_id: Recipient's position in the mailing queue
        hash: Per-recipient verification token
        address: Destination address
        headers: Mutable header map, filled by the composer
    """
    event_queue_id: Any
    hash: str
    address: str
    headers: Dict[str, str] = field(default_factory=dict)

    def get_headers(self) -> Dict[str, str]:
        return self.headers

    def set_headers(self, headers: Dict[str, str]) -> None:
        self.headers = headers


@dataclass
class CompositionResult:
    """
    Result of composing headers for one delivery task.

    Explicit result type so a failing task is reported to the caller
    instead of being delivered with blank headers.

    Attributes:
        success: Whether headers were composed
        event_queue_id: Queue identifier of the task
        headers: Final header map (if composition succeeded)
        error_message: Error description (if composition failed)
        error: The ResolutionError raised for the task (if any)
    """
    success: bool
    event_queue_id: Any
    headers: Optional[Dict[str, str]] = None
    error_message: Optional[str] = None
    error: Optional[ResolutionError] = field(default=None, repr=False)

    def __repr__(self) -> str:
        """Human-readable representation for logging."""
        if self.success:
            return f"CompositionResult(success=True, event_queue_id={self.event_queue_id})"
        else:
            return (
                f"CompositionResult(success=False, event_queue_id={self.event_queue_id}, "
                f"error={self.error_message})"
            )
