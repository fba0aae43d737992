import uuid
from datetime import datetime, timedelta, timezone
from typing import Optional

from pydantic import BaseModel


class VerificationToken(BaseModel):
    value: str
    expires_at: datetime


def generate_token(ttl_seconds: int, now: Optional[datetime] = None) -> VerificationToken:
    """Create a random UUID4 token that expires ttl_seconds after now."""
    now = now or datetime.now(timezone.utc)
    return VerificationToken(
        value=str(uuid.uuid4()),
        expires_at=now + timedelta(seconds=ttl_seconds)
    )
