import logging
from typing import Any, Dict, Optional

from .config import Settings
from .errors import VerificationEmailError
from .events import extract_messages
from .handler import VerificationEmailHandler
from .logging_config import set_request_id, setup_logging
from .mailgun_client import MailgunClient
from .secrets_client import SecretsClient
from .token_store import TokenStore

logger = logging.getLogger(__name__)

# Built on the first invocation and reused while the container stays warm
_handler: Optional[VerificationEmailHandler] = None


def build_handler(settings: Settings) -> VerificationEmailHandler:
    """Wire the handler and its collaborators from settings."""
    return VerificationEmailHandler(
        settings=settings,
        secrets_client=SecretsClient(settings),
        token_store=TokenStore(settings),
        mailgun_client=MailgunClient(settings)
    )


def get_handler() -> VerificationEmailHandler:
    global _handler
    if _handler is None:
        settings = Settings()
        setup_logging(settings)
        _handler = build_handler(settings)
        logger.info(f"Email verification handler initialized in {settings.environment} environment")
    return _handler


def lambda_handler(event: Dict[str, Any], context: Any) -> str:
    """
    AWS Lambda entry point for signup notifications.

    Args:
        event: SNS (or SNS-to-SQS) event with one record per signup
        context: Lambda context object

    Returns:
        "Emails processed successfully." or "Error: <message>"
    """
    set_request_id(getattr(context, 'aws_request_id', None))
    logger.info("Lambda triggered with SNS event.")
    try:
        handler = get_handler()
        logger.info(f"Received SNS event: {event}")
        result = handler.handle(extract_messages(event))
    except VerificationEmailError:
        # Only reaches here when raise_on_failure is set; already logged by the handler
        raise
    except Exception as e:
        logger.exception(f"Error occurred: {str(e)}")
        if _handler is not None and _handler.settings.raise_on_failure:
            raise
        return f"Error: {str(e)}"

    logger.info(f"Processed {result.processed} records")
    return result.status_message()
