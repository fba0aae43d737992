import enum
import logging
from datetime import datetime, timezone
from typing import Callable, Optional, Union

from sqlalchemy import Column, DateTime, Enum, Integer, MetaData, String, Table, create_engine
from sqlalchemy.engine import URL
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.pool import NullPool

from .config import Settings
from .errors import PersistenceError
from .secrets_client import DatabaseCredentials
from .tokens import VerificationToken

logger = logging.getLogger(__name__)


class EmailStatus(str, enum.Enum):
    PENDING = "PENDING"
    VERIFIED = "VERIFIED"


metadata = MetaData()

# Owned by the user service; only the columns this handler writes are required
sent_emails = Table(
    "sent_emails",
    metadata,
    Column("id", Integer, primary_key=True, autoincrement=True),
    Column("email", String(255), nullable=False),
    Column("token", String(255), nullable=False),
    Column("sent_at", DateTime(timezone=True), nullable=False),
    Column("status", Enum(EmailStatus, native_enum=False, length=20), nullable=False),
    Column("expires_at", DateTime(timezone=True), nullable=True),
)

UrlFactory = Callable[[DatabaseCredentials], Union[str, URL]]


class TokenStore:
    """Writes pending verification rows to the sent_emails table."""

    def __init__(self, settings: Settings, url_factory: Optional[UrlFactory] = None):
        self.driver = settings.db_driver
        self.persist_expiry = settings.persist_token_expiry
        self.url_factory = url_factory or self._build_url

    def _build_url(self, credentials: DatabaseCredentials) -> URL:
        return URL.create(
            self.driver,
            username=credentials.username,
            password=credentials.password,
            host=credentials.host,
            port=credentials.port,
            database=credentials.name,
        )

    def store_pending(self, credentials: DatabaseCredentials, email: str, token: VerificationToken) -> None:
        """
        Insert one PENDING row for the given email and token.

        The connection is opened and closed within this call; the insert runs in its
        own transaction.

        Args:
            credentials: Database credentials from Secrets Manager
            email: Recipient address
            token: Generated verification token

        Raises:
            PersistenceError: On connection or write failure
        """
        url = self.url_factory(credentials)
        if isinstance(url, URL):
            logger.info(f"Connecting to database at: {url.render_as_string(hide_password=True)}")

        values = {
            "email": email,
            "token": token.value,
            "sent_at": datetime.now(timezone.utc),
            "status": EmailStatus.PENDING,
        }
        if self.persist_expiry:
            values["expires_at"] = token.expires_at

        engine = None
        try:
            engine = create_engine(url, poolclass=NullPool)
            with engine.begin() as connection:
                connection.execute(sent_emails.insert().values(**values))
            logger.info(f"Token stored successfully for email: {email}")
        except SQLAlchemyError as e:
            logger.error(f"Error storing token in database: {str(e)}")
            raise PersistenceError(f"Error storing token: {str(e)}") from e
        finally:
            if engine is not None:
                engine.dispose()
