# processor.py
"""Core work of the lambda function, kept apart from the handler wrapper so it
can be driven directly from tests and scripts.
"""
import logging
import time

import pymongo

from . import connection
from .config import Settings
from .counter import INVOCATION_COUNT
from .errors import DeadlineExceededError
from .oscmd import HostDiagnostics
from .records import TelemetryRecord, db_insert_record
from .redact import redact_mongodb_url

logger = logging.getLogger(__name__)

ACTION = "Log record inserted into DB"
MISSING_MESSAGE = "Missing input payload message"


def event_message(event) -> str:
    message = event.get("message") if isinstance(event, dict) else None
    if not isinstance(message, str):
        return MISSING_MESSAGE
    return message


def remaining_seconds(deadline_ms, now_ms=None):
    """Seconds left before the invocation deadline, None when there is none."""
    if not deadline_ms:
        return None
    if now_ms is None:
        now_ms = int(time.time() * 1000)
    remaining = (deadline_ms - now_ms) / 1000
    if remaining <= 0:
        raise DeadlineExceededError(f"Invocation deadline passed {-remaining:.3f}s ago")
    return remaining


def process_work(message, request_id, memory, deadline, *, environ=None,
                 holder=None, counter=INVOCATION_COUNT, diagnostics=None):
    settings = Settings.from_env(environ)
    redacted_url = redact_mongodb_url(settings.mongodb_url)
    logger.info(f"Lambda function executing request against MongoDB deployment: '{redacted_url}'")

    client = (holder or connection.MONGODB_CLIENT).get()
    invocation_count = counter.increment_and_fetch()

    diagnostics = diagnostics or HostDiagnostics()
    cpu_cores = diagnostics.cpu_core_count(timeout=remaining_seconds(deadline))

    record = TelemetryRecord.build(
        invocation_count=invocation_count,
        message=message,
        request_id=request_id,
        cpu_cores=cpu_cores,
        allocated_memory=memory,
        execution_deadline_millis=deadline,
    )
    coll = client.get_database(settings.dbname).get_collection(settings.collname)
    with pymongo.timeout(remaining_seconds(deadline)):
        db_insert_record(coll, record)

    return {
        "mongodb_url": redacted_url,
        "invocation_count": invocation_count,
        "action": ACTION,
        "message_received": message,
    }
