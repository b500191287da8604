"""
Basic header composition - core business logic.

For every delivery task in an outgoing batch this module:
1. Resolves the recipient's unsubscribe and reply addresses
2. Computes the standard headers (List-Unsubscribe, Message-ID, Precedence,
   job_id, From, Reply-To)
3. Merges them into the task's headers without overwriting existing values

A task whose addressing cannot be resolved is reported as a failed
CompositionResult and left untouched. Other tasks are still processed.
"""

import logging
from typing import Callable, Dict, Iterable, List, Optional

from .models import (
    CompositionResult,
    DeliveryTask,
    JobDescriptor,
    MailingDescriptor,
    ResolutionError,
)
from services import headers as header_service
from services import message_id as message_id_service

logger = logging.getLogger(__name__)

MAILING_TAG = 'm'
PRECEDENCE = 'bulk'


class HeaderComposer:
    """
    Injects basic headers into the delivery tasks of a mailing batch.

    Stateless across calls: the same composer can serve any number of
    batches.
    """

    def __init__(self, message_id_builder: Optional[Callable[..., str]] = None):
        """
        Initialize header composer.

        Args:
            message_id_builder: build_message_id(tag, job_id, queue_id, hash);
                defaults to services.message_id.build_message_id
        """
        self.message_id_builder = message_id_builder or message_id_service.build_message_id

    def compose(
        self,
        mailing: MailingDescriptor,
        job: JobDescriptor,
        tasks: Iterable[DeliveryTask]
    ) -> List[CompositionResult]:
        """
        Compose and merge headers for every task of a batch, in order.

        Args:
            mailing: Mailing descriptor (read-only)
            job: Job descriptor (read-only)
            tasks: Delivery tasks; their headers are updated in place

        Returns:
            List of CompositionResult, one per task
        """
        results = []
        for task in tasks:
            try:
                addressing = mailing.resolve_addressing(
                    job.id, task.event_queue_id, task.hash, task.address
                )
            except ResolutionError as e:
                logger.warning(f"Skipping task {task.event_queue_id}: {e}")
                results.append(CompositionResult(
                    success=False,
                    event_queue_id=task.event_queue_id,
                    error_message=str(e),
                    error=e
                ))
                continue

            computed = self._compute_headers(mailing, job, task, addressing.unsubscribe, addressing.reply)
            task.set_headers(header_service.merge_headers(computed, task.get_headers()))

            results.append(CompositionResult(
                success=True,
                event_queue_id=task.event_queue_id,
                headers=task.headers
            ))

        return results

    def _compute_headers(
        self,
        mailing: MailingDescriptor,
        job: JobDescriptor,
        task: DeliveryTask,
        unsubscribe: str,
        reply: str
    ) -> Dict[str, str]:
        """Build the default headers for one task, in emission order."""
        computed = {
            'List-Unsubscribe': header_service.format_list_unsubscribe(unsubscribe),
        }

        for name in message_id_service.message_id_headers(MAILING_TAG):
            computed[name] = self.message_id_builder(
                MAILING_TAG, job.id, task.event_queue_id, task.hash
            )

        computed['Precedence'] = PRECEDENCE
        computed['job_id'] = str(job.id)
        computed['From'] = mailing.from_header
        computed['Reply-To'] = reply

        # Compares the formatted From value with a bare address, so any
        # configured replyto_email nearly always wins.
        if mailing.replyto_email and computed['From'] != mailing.replyto_email:
            computed['Reply-To'] = mailing.replyto_email

        return computed
