from typing import Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Configuration settings for the Email Verification handler"""

    # Application settings
    service_name: str = "email-verification"
    log_level: str = "INFO"
    environment: str = "dev"

    # Mailgun settings
    mailgun_api_key: str
    mailgun_domain: str
    mailgun_base_url: str = "https://api.mailgun.net"

    # Verification link settings
    domain_name: str
    verification_expiry: int = Field(ge=0)  # seconds

    # AWS Secrets Manager settings
    db_secret_name: str
    aws_region: str = "us-east-1"
    secrets_manager_endpoint_url: Optional[str] = None

    # Database settings
    db_driver: str = "postgresql+psycopg2"
    persist_token_expiry: bool = False

    # Report failures to the Lambda runtime instead of only returning "Error: ..."
    raise_on_failure: bool = False

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )
