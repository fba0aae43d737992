"""
Error kinds raised while processing a signup notification.

Every kind derives from VerificationEmailError so the handler can catch them
at the batch level. The kind name is kept on the exception for logs and for
BatchResult; the returned status string only carries the message.
"""


class VerificationEmailError(Exception):
    """Base class for all per-record processing failures."""

    @property
    def kind(self) -> str:
        return type(self).__name__

    @property
    def message(self) -> str:
        return str(self)


class MalformedPayload(VerificationEmailError):
    """The notification message is not a JSON object."""


class MissingEmail(VerificationEmailError):
    """The notification message has no usable 'email' field."""


class SecretUnavailable(VerificationEmailError):
    """The database secret could not be retrieved."""


class MalformedSecret(VerificationEmailError):
    """The database secret is not a JSON object with the expected keys."""


class PersistenceError(VerificationEmailError):
    """The sent-email row could not be written."""


class DeliveryFailed(VerificationEmailError):
    """Mailgun rejected the message or could not be reached."""
