import json
import logging
from typing import Optional

import boto3
from botocore.exceptions import BotoCoreError, ClientError
from pydantic import BaseModel, ConfigDict, Field, ValidationError

from .config import Settings
from .errors import MalformedSecret, SecretUnavailable

logger = logging.getLogger(__name__)


class DatabaseCredentials(BaseModel):
    """Connection details stored in the database secret."""

    model_config = ConfigDict(populate_by_name=True)

    host: str = Field(alias='DB_HOST')
    port: int = Field(alias='DB_PORT')
    name: str = Field(alias='DB_NAME')
    username: str = Field(alias='DB_USERNAME')
    password: str = Field(alias='DB_PASSWORD')


class SecretsClient:
    """Secrets Manager client for the database credentials."""

    def __init__(self, settings: Settings, client=None):
        """
        Initialize the Secrets Manager client.

        Args:
            settings: Handler settings
            client: Optional pre-built boto3 secretsmanager client
        """
        self.secret_name = settings.db_secret_name
        self.client = client or boto3.client(
            'secretsmanager',
            region_name=settings.aws_region,
            endpoint_url=settings.secrets_manager_endpoint_url
        )
        logger.info("Secrets Manager client initialized")

    def get_db_credentials(self) -> DatabaseCredentials:
        """
        Fetch and parse the database secret.

        Returns:
            Parsed database credentials

        Raises:
            SecretUnavailable: If the secret cannot be read
            MalformedSecret: If the secret is not the expected JSON object; the message
                carries the same "Error retrieving secrets: " prefix as SecretUnavailable
        """
        secret_string = self._get_secret_string()
        try:
            return parse_secret_string(secret_string)
        except MalformedSecret as e:
            raise MalformedSecret(f"Error retrieving secrets: {e.message}") from e

    def _get_secret_string(self) -> str:
        try:
            logger.info("Retrieving secrets from Secrets Manager...")
            response = self.client.get_secret_value(SecretId=self.secret_name)
        except (ClientError, BotoCoreError) as e:
            logger.error(f"Error retrieving secrets from Secrets Manager: {str(e)}")
            raise SecretUnavailable(f"Error retrieving secrets: {str(e)}") from e

        secret_string: Optional[str] = response.get('SecretString')
        if secret_string is None:
            logger.error(f"Secret {self.secret_name} has no SecretString")
            raise SecretUnavailable(f"Error retrieving secrets: secret {self.secret_name} has no SecretString")

        logger.info("Secrets retrieved successfully.")
        return secret_string


def parse_secret_string(secret_string: str) -> DatabaseCredentials:
    """
    Parse a secret string into database credentials.

    Raises:
        MalformedSecret: On invalid JSON or missing/invalid keys
    """
    logger.info("Parsing secrets JSON...")
    try:
        return DatabaseCredentials.model_validate(json.loads(secret_string))
    except ValidationError as e:
        # str(e) echoes the input, password included
        detail = "; ".join(
            f"{'.'.join(str(part) for part in err['loc']) or 'secret'}: {err['msg']}"
            for err in e.errors()
        )
        logger.error(f"Error parsing secrets JSON: {detail}")
        raise MalformedSecret(f"Error parsing secrets JSON: {detail}") from e
    except (TypeError, ValueError) as e:
        logger.error(f"Error parsing secrets JSON: {str(e)}")
        raise MalformedSecret(f"Error parsing secrets JSON: {str(e)}") from e
