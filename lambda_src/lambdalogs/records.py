# records.py
import logging
from dataclasses import asdict, dataclass
from datetime import datetime, timezone
from typing import Optional

from pymongo.errors import PyMongoError

from .errors import PersistenceError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class TelemetryRecord:
    timestamp: datetime
    invocation_count: int
    message: Optional[str] = None
    request_id: Optional[str] = None
    cpu_cores: Optional[int] = None
    allocated_memory: Optional[int] = None
    execution_deadline_millis: Optional[int] = None

    @classmethod
    def build(cls, invocation_count, message=None, request_id=None, cpu_cores=None,
              allocated_memory=None, execution_deadline_millis=None):
        return cls(
            timestamp=datetime.now(timezone.utc),
            invocation_count=invocation_count,
            message=message,
            request_id=request_id,
            cpu_cores=cpu_cores,
            allocated_memory=allocated_memory,
            execution_deadline_millis=execution_deadline_millis,
        )

    def to_document(self) -> dict:
        # Unset fields are left out of the document rather than stored as null
        return {k: v for k, v in asdict(self).items() if v is not None}


def db_insert_record(collection, record: TelemetryRecord):
    try:
        result = collection.insert_one(record.to_document())
    except PyMongoError as e:
        raise PersistenceError(f"Error inserting log record into '{collection.full_name}': {e}") from e
    logger.debug(f"Inserted record {result.inserted_id} (invocation {record.invocation_count})")
    return result.inserted_id
