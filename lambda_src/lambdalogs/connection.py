# connection.py
import logging
import threading

from pymongo import MongoClient
from pymongo.errors import ConfigurationError as MongoConfigurationError
from pymongo.errors import PyMongoError

from .config import DEFAULT_CONNECT_TIMEOUT_MS
from .errors import ConfigurationError, NotInitializedError, StoreConnectionError
from .redact import redact_mongodb_url

logger = logging.getLogger(__name__)

APP_NAME = "lambdalogs"


def create_mongodb_client(mongodb_url: str, connect_timeout_ms: int = DEFAULT_CONNECT_TIMEOUT_MS):
    """Build a client and make sure the deployment answers before returning it."""
    redacted = redact_mongodb_url(mongodb_url)
    try:
        client = MongoClient(
            mongodb_url,
            appname=APP_NAME,
            serverSelectionTimeoutMS=connect_timeout_ms,
        )
    except MongoConfigurationError as e:
        # InvalidURI is a subclass
        logger.error(f"Invalid MongoDB URL '{redacted}'. Error detail: {redact_mongodb_url(str(e))}")
        raise ConfigurationError(f"Invalid MongoDB URL '{redacted}'") from None

    try:
        client.admin.command("ping")
    except PyMongoError as e:
        client.close()
        logger.error(
            f"Error trying to get a MongoDB connection to the URL '{redacted}'. "
            f"Error detail: {redact_mongodb_url(str(e))}"
        )
        raise StoreConnectionError(f"MongoDB deployment unreachable: '{redacted}'") from None

    logger.debug(f"Client connection established to '{redacted}'")
    return client


class ClientHolder:
    """Write-once cell for the process-wide MongoDB client.

    Racing first callers serialize on the lock and all get the one committed
    client; afterwards reads take no lock. A failed init is remembered and
    never retried in the same process.
    """

    def __init__(self):
        self._client = None
        self._init_error = None
        self._lock = threading.Lock()

    @property
    def is_initialized(self) -> bool:
        return self._client is not None

    def get_or_init(self, mongodb_url: str, factory=create_mongodb_client, **factory_kwargs):
        client = self._client
        if client is not None:
            return client

        with self._lock:
            if self._client is None:
                if self._init_error is not None:
                    raise NotInitializedError(
                        f"MongoDB client initialization already failed: {self._init_error}"
                    ) from self._init_error
                try:
                    self._client = factory(mongodb_url, **factory_kwargs)
                except Exception as e:
                    self._init_error = e
                    raise
            return self._client

    def get(self):
        client = self._client
        if client is None:
            raise NotInitializedError("Missing MongoDB client, the function didn't initialize properly")
        return client


MONGODB_CLIENT = ClientHolder()
