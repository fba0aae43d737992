import json

import pytest
from sqlalchemy import create_engine

from email_verification.config import Settings
from email_verification.errors import DeliveryFailed
from email_verification.secrets_client import DatabaseCredentials
from email_verification.token_store import metadata

DB_SECRET = {
    "DB_HOST": "db.internal",
    "DB_PORT": "5432",
    "DB_NAME": "webapp",
    "DB_USERNAME": "webapp",
    "DB_PASSWORD": "s3cret",
}


@pytest.fixture
def settings():
    return Settings(
        _env_file=None,
        mailgun_api_key="key-test",
        mailgun_domain="mg.example.com",
        domain_name="app.example.com",
        verification_expiry=120,
        db_secret_name="db-secret",
    )


@pytest.fixture
def db_url(tmp_path):
    """SQLite database with the sent_emails table created."""
    url = f"sqlite:///{tmp_path / 'sent_emails.db'}"
    engine = create_engine(url)
    metadata.create_all(engine)
    engine.dispose()
    return url


def signup_message(email):
    return json.dumps({"email": email})


class FakeSecretsClient:
    def __init__(self):
        self.calls = 0

    def get_db_credentials(self):
        self.calls += 1
        return DatabaseCredentials.model_validate(DB_SECRET)


class FakeTokenStore:
    def __init__(self):
        self.rows = []

    def store_pending(self, credentials, email, token):
        self.rows.append({"email": email, "token": token.value, "status": "PENDING"})


class FakeMailgunClient:
    def __init__(self, fail_on=None):
        self.sent = []
        self.fail_on = fail_on

    def send_verification_email(self, email, token):
        if email == self.fail_on:
            raise DeliveryFailed("Error sending email: Failed to send email. Status: 500")
        self.sent.append((email, token))
