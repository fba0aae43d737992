import logging
from typing import Any, Iterable, Optional

from pydantic import BaseModel

from .config import Settings
from .errors import VerificationEmailError
from .events import extract_email, parse_message
from .mailgun_client import MailgunClient
from .secrets_client import SecretsClient
from .token_store import TokenStore
from .tokens import generate_token

logger = logging.getLogger(__name__)

SUCCESS_MESSAGE = "Emails processed successfully."


class BatchResult(BaseModel):
    """Outcome of one batch of notification records."""

    processed: int = 0
    error_kind: Optional[str] = None
    error_message: Optional[str] = None

    @property
    def success(self) -> bool:
        return self.error_kind is None

    def status_message(self) -> str:
        if self.success:
            return SUCCESS_MESSAGE
        return f"Error: {self.error_message}"


class VerificationEmailHandler:
    """Creates and sends a verification email for every signup notification."""

    def __init__(self,
                 settings: Settings,
                 secrets_client: SecretsClient,
                 token_store: TokenStore,
                 mailgun_client: MailgunClient):
        self.settings = settings
        self.secrets = secrets_client
        self.store = token_store
        self.mailgun = mailgun_client

    def handle(self, messages: Iterable[Optional[str]]) -> BatchResult:
        """
        Process a batch of notification messages in order.

        The first failing record stops the batch; records after it are not attempted.
        With raise_on_failure set, the failing record's error is re-raised instead
        of being recorded in the result.

        Args:
            messages: Raw message strings, one per record

        Returns:
            BatchResult describing the batch
        """
        result = BatchResult()
        try:
            for message in messages:
                self.process_message(message)
                result.processed += 1
        except VerificationEmailError as e:
            logger.error(f"Error occurred: {e.message}", extra={'error_kind': e.kind})
            if self.settings.raise_on_failure:
                raise
            result.error_kind = e.kind
            result.error_message = e.message
        return result

    def process_message(self, message: Any) -> None:
        logger.info(f"Processing SNS message: {message}")

        payload = parse_message(message)
        email = extract_email(payload)
        logger.info(f"Extracted email: {email}")

        logger.info("Fetching database credentials...")
        credentials = self.secrets.get_db_credentials()
        logger.info("Database credentials fetched successfully.")

        token = generate_token(self.settings.verification_expiry)
        logger.info(f"Generated verification token: {token.value}")
        logger.info(f"Token expiry set to: {token.expires_at.isoformat()}")

        logger.info("Storing verification token in the database...")
        self.store.store_pending(credentials, email, token)
        logger.info("Verification token stored successfully.")

        logger.info(f"Sending verification email to: {email}")
        self.mailgun.send_verification_email(email, token.value)
        logger.info(f"Verification email sent successfully to: {email}")
