from .errors import (
    DeliveryFailed,
    MalformedPayload,
    MalformedSecret,
    MissingEmail,
    PersistenceError,
    SecretUnavailable,
    VerificationEmailError,
)
from .handler import BatchResult, VerificationEmailHandler
from .main import lambda_handler
