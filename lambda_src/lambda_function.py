# lambda_function.py
import logging
import time
import traceback

from lambdalogs.config import Settings
from lambdalogs.connection import MONGODB_CLIENT
from lambdalogs.errors import GENERIC_ERROR_MESSAGE
from lambdalogs.logs import setup_logger
from lambdalogs.processor import event_message, process_work
from lambdalogs.redact import redact_mongodb_url

logger = logging.getLogger("lambdalogs.lambda_function")


def bootstrap():
    """Connect once per *execution environment* (i.e., per warm container).

    Raising here fails the Lambda init phase, so an environment that couldn't
    reach MongoDB never serves a request.
    """
    setup_logger()
    settings = Settings.from_env()
    MONGODB_CLIENT.get_or_init(settings.mongodb_url, connect_timeout_ms=settings.connect_timeout_ms)
    logger.info(
        f"Lambda initiated to use MongoDB deployment: '{redact_mongodb_url(settings.mongodb_url)}'"
    )


def handler(event, context):
    message = event_message(event)
    # Context only exposes the time left, turn it back into an absolute deadline
    deadline = int(time.time() * 1000) + context.get_remaining_time_in_millis()

    try:
        return process_work(
            message,
            context.aws_request_id,
            int(context.memory_limit_in_mb),
            deadline,
        )
    except Exception as e:
        # Full detail stays in CloudWatch, the caller only gets the fixed message
        detail = "".join(traceback.format_exception(type(e), e, e.__traceback__))
        logger.error(
            f"Internal error occurred in the lambda function ({type(e).__name__}):\n"
            f"{redact_mongodb_url(detail)}"
        )
        return {"error": GENERIC_ERROR_MESSAGE}


bootstrap()
