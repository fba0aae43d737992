import json
import logging
from typing import Any, Dict, List

from .errors import MalformedPayload, MissingEmail

logger = logging.getLogger(__name__)


def extract_messages(event: Dict[str, Any]) -> List[str]:
    """
    Pull the message string out of every record in a Lambda event.

    SNS records carry the message under Sns.Message; records delivered through
    an SQS subscription carry it under body.

    Args:
        event: The raw Lambda event

    Returns:
        Message strings in record order
    """
    messages = []
    for index, record in enumerate(event.get('Records') or []):
        if not isinstance(record, dict):
            logger.warning(f"Record {index} is not an object")
            messages.append(None)
            continue
        sns = record.get('Sns')
        if isinstance(sns, dict) and 'Message' in sns:
            messages.append(sns['Message'])
        elif 'body' in record:
            messages.append(record['body'])
        else:
            # Kept so the batch still aborts at this record's position
            logger.warning(f"Record {index} carries no SNS message or SQS body")
            messages.append(None)
    return messages


def parse_message(message: Any) -> Dict[str, Any]:
    """
    Parse a notification message into a key-value mapping.

    Args:
        message: The raw message string

    Returns:
        The decoded JSON object

    Raises:
        MalformedPayload: If the message is not a JSON object
    """
    logger.info("Parsing SNS message...")
    try:
        if message is None:
            raise ValueError("record has no message")
        parsed = json.loads(message)
        if not isinstance(parsed, dict):
            raise ValueError(f"expected a JSON object, got {type(parsed).__name__}")
        return parsed
    except (TypeError, ValueError) as e:
        logger.error(f"Error parsing SNS message: {str(e)}")
        logger.error(f"Raw message: {message}")
        raise MalformedPayload(f"Error parsing SNS message: {str(e)}") from e


def extract_email(payload: Dict[str, Any]) -> str:
    """
    Read the recipient address from a parsed notification.

    Raises:
        MissingEmail: If 'email' is absent, empty or not a string
    """
    email = payload.get('email')
    if not isinstance(email, str) or not email:
        logger.error(f"No 'email' field found in message: {payload}")
        raise MissingEmail("Email is missing in SNS message.")
    return email
