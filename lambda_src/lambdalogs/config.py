# config.py
import os
from dataclasses import dataclass

from .errors import ConfigurationError

MONGODB_URL_VAR = "MONGODB_URL"
DBNAME_VAR = "MONGODB_DBNAME"
COLLNAME_VAR = "MONGODB_COLLNAME"
CONNECT_TIMEOUT_VAR = "MONGODB_CONNECT_TIMEOUT_MS"

DEFAULT_DBNAME = "test"
DEFAULT_COLLNAME = "lambdalogs"
DEFAULT_CONNECT_TIMEOUT_MS = 5000


def get_mongodb_url(environ=None) -> str:
    environ = os.environ if environ is None else environ
    url = environ.get(MONGODB_URL_VAR, "").strip()
    if not url:
        raise ConfigurationError(f"Required env var not set: '{MONGODB_URL_VAR}'")
    return url


@dataclass(frozen=True)
class Settings:
    mongodb_url: str
    dbname: str = DEFAULT_DBNAME
    collname: str = DEFAULT_COLLNAME
    connect_timeout_ms: int = DEFAULT_CONNECT_TIMEOUT_MS

    @classmethod
    def from_env(cls, environ=None) -> "Settings":
        environ = os.environ if environ is None else environ
        raw_timeout = environ.get(CONNECT_TIMEOUT_VAR) or str(DEFAULT_CONNECT_TIMEOUT_MS)
        try:
            connect_timeout_ms = int(raw_timeout)
        except ValueError:
            raise ConfigurationError(
                f"Env var '{CONNECT_TIMEOUT_VAR}' must be an integer, got '{raw_timeout}'"
            ) from None

        return cls(
            mongodb_url=get_mongodb_url(environ),
            dbname=environ.get(DBNAME_VAR) or DEFAULT_DBNAME,
            collname=environ.get(COLLNAME_VAR) or DEFAULT_COLLNAME,
            connect_timeout_ms=connect_timeout_ms,
        )
