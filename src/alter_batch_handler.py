"""
AWS Lambda handler for injecting basic headers into an outgoing mail batch.

Thin orchestration layer that delegates to HeaderComposer.
Policy: tasks whose addressing cannot be resolved are reported in
taskFailures and never returned with placeholder headers. Retries belong to
the caller.
"""

import logging
import os
from typing import Dict, Any, List

from domain.header_composer import HeaderComposer
from domain.models import DeliveryTask, JobDescriptor, MailingDescriptor
from services.addressing import PrecomputedAddressing


def _log_level(name: str) -> int:
    """Map a LOG_LEVEL name to a logging level, falling back to INFO."""
    level = logging.getLevelName(str(name).strip().upper())
    return level if isinstance(level, int) else logging.INFO


def _configure_logging(root: logging.Logger, level_name: str) -> None:
    level = _log_level(level_name)
    root.setLevel(level)

    # Add console handler for local testing (AWS Lambda provides handlers automatically)
    if not root.handlers:
        console_handler = logging.StreamHandler()
        console_handler.setLevel(level)
        formatter = logging.Formatter('%(levelname)s - %(message)s')
        console_handler.setFormatter(formatter)
        root.addHandler(console_handler)


# Configure logging
logger = logging.getLogger()
_configure_logging(logger, os.environ.get('LOG_LEVEL', 'INFO'))

ENVIRONMENT = os.environ.get('ENVIRONMENT', 'dev')

# Initialize composer once at module level (reused across invocations)
header_composer = HeaderComposer()


def lambda_handler(event: Dict[str, Any], context: Any) -> Dict[str, Any]:
    """
    Compose basic headers for every task of a mailing batch.

    Args:
        event: Batch payload with mailing, job, addressing and tasks
        context: Lambda context

    Returns:
        Dict with composed tasks and taskFailures

    Raises:
        ValueError: If the batch payload is malformed
    """
    logger.info("=" * 70)
    logger.info(f"Basic Headers - Started ({ENVIRONMENT})")
    logger.info("=" * 70)

    mailing = _parse_mailing(event)
    job = _parse_job(event)
    tasks = _parse_tasks(event)
    logger.info(f"Processing batch of {len(tasks)} task(s) for job {job.id}")

    results = header_composer.compose(mailing, job, tasks)

    composed: List[Dict[str, Any]] = []
    failures: List[Dict[str, Any]] = []
    for result in results:
        if result.success:
            composed.append({
                'eventQueueId': result.event_queue_id,
                'headers': result.headers
            })
        else:
            logger.warning(
                f"⚠ Task {result.event_queue_id} NOT composed: {result.error_message}"
            )
            failures.append({
                'eventQueueId': result.event_queue_id,
                'error': result.error_message
            })

    # Log summary
    logger.info("=" * 70)
    logger.info(f"Batch composition complete: {len(results)} task(s)")
    logger.info(f"  Success: {len(composed)}")
    logger.info(f"  Errors: {len(failures)}")
    logger.info("=" * 70)

    return {"tasks": composed, "taskFailures": failures}


def _parse_mailing(event: Dict[str, Any]) -> MailingDescriptor:
    """
    Build the MailingDescriptor, wiring in the precomputed addressing.

    Raises:
        ValueError: If mailing fields are missing or have the wrong type
    """
    if not isinstance(event, dict):
        raise ValueError("Batch event must be an object")

    mailing = event.get('mailing')
    if not isinstance(mailing, dict):
        raise ValueError("Batch event missing 'mailing'")

    from_email = mailing.get('from_email')
    if not from_email or not isinstance(from_email, str):
        raise ValueError("Mailing missing 'from_email'")

    from_name = mailing.get('from_name') or ''
    if not isinstance(from_name, str):
        raise ValueError(f"Mailing 'from_name' must be a string, got {type(from_name).__name__}")

    replyto_email = mailing.get('replyto_email')
    if replyto_email is not None and not isinstance(replyto_email, str):
        raise ValueError(
            f"Mailing 'replyto_email' must be a string, got {type(replyto_email).__name__}"
        )

    entries = event.get('addressing', {})
    if not isinstance(entries, dict):
        raise ValueError("Batch event 'addressing' must be an object keyed by queue id")

    addressing = PrecomputedAddressing(entries)
    logger.info(f"Loaded precomputed addressing for {len(addressing)} queue entries")

    return MailingDescriptor(
        from_name=from_name,
        from_email=from_email,
        replyto_email=replyto_email,
        resolver=addressing
    )


def _parse_job(event: Dict[str, Any]) -> JobDescriptor:
    job = event.get('job')
    if not isinstance(job, dict) or job.get('id') is None:
        raise ValueError("Batch event missing 'job' id")
    return JobDescriptor(id=job['id'])


def _parse_tasks(event: Dict[str, Any]) -> List[DeliveryTask]:
    raw_tasks = event.get('tasks', [])
    if not isinstance(raw_tasks, list):
        raise ValueError("Batch event 'tasks' must be a list")

    tasks = []
    for raw in raw_tasks:
        if not isinstance(raw, dict):
            raise ValueError(f"Task must be an object, got {type(raw).__name__}")
        if 'event_queue_id' not in raw:
            raise ValueError(f"Task missing 'event_queue_id': {raw}")

        headers = raw.get('headers') or {}
        if not isinstance(headers, dict):
            raise ValueError(f"Task {raw['event_queue_id']} 'headers' must be an object")

        tasks.append(DeliveryTask(
            event_queue_id=raw['event_queue_id'],
            hash=raw.get('hash', ''),
            address=raw.get('address', ''),
            headers=dict(headers)
        ))
    return tasks
