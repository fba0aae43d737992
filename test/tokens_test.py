import uuid
from datetime import datetime, timedelta, timezone

from email_verification.tokens import generate_token


def test_tokens_are_unique():
    tokens = {generate_token(60).value for _ in range(10000)}
    assert len(tokens) == 10000


def test_token_is_uuid4():
    token = generate_token(60)
    assert uuid.UUID(token.value).version == 4
    assert len(token.value) == 36


def test_expiry_is_now_plus_ttl():
    now = datetime(2024, 1, 1, 12, 0, tzinfo=timezone.utc)
    token = generate_token(900, now=now)
    assert token.expires_at == now + timedelta(seconds=900)


def test_zero_ttl_expires_immediately():
    now = datetime(2024, 1, 1, tzinfo=timezone.utc)
    assert generate_token(0, now=now).expires_at == now
