import logging
from typing import Dict, Optional

import httpx

from .config import Settings
from .errors import DeliveryFailed

logger = logging.getLogger(__name__)

SUBJECT = "Verify Your Email"


def build_verification_link(domain_name: str, token: str) -> str:
    return f"http://{domain_name}/v1/user/verify?token={token}"


class MailgunClient:
    """Sends verification emails through the Mailgun messages API."""

    def __init__(self, settings: Settings, http_client: Optional[httpx.Client] = None):
        """
        Initialize the Mailgun client.

        Args:
            settings: Handler settings
            http_client: Optional shared httpx client; one is created if omitted
        """
        self.domain = settings.mailgun_domain
        self.domain_name = settings.domain_name
        self.http = http_client or httpx.Client(base_url=settings.mailgun_base_url)
        self.auth = httpx.BasicAuth("api", settings.mailgun_api_key)
        logger.info(f"Mailgun client initialized for domain: {self.domain}")

    def build_message(self, email: str, verification_link: str) -> Dict[str, str]:
        return {
            "from": f"support@{self.domain}",
            "to": email,
            "subject": SUBJECT,
            "text": f"Click this link to verify your email: {verification_link}",
            "html": (
                f"<p>Click this link to verify your email: "
                f"<a href=\"{verification_link}\">{verification_link}</a></p>"
            ),
            "o:tag": "verification-email",
            "o:tracking": "yes",
            "o:tracking-clicks": "htmlonly",
            "o:tracking-opens": "yes",
        }

    def send_verification_email(self, email: str, token: str) -> None:
        """
        Send the verification email for a token.

        Args:
            email: Recipient address
            token: Verification token embedded in the link

        Raises:
            DeliveryFailed: If Mailgun returns a non-success status or cannot be reached
        """
        verification_link = build_verification_link(self.domain_name, token)
        logger.info(f"Generated verification link: {verification_link}")

        try:
            response = self.http.post(
                f"/v3/{self.domain}/messages",
                data=self.build_message(email, verification_link),
                auth=self.auth
            )
        except httpx.HTTPError as e:
            logger.error(f"Error sending email: {str(e)}")
            raise DeliveryFailed(f"Error sending email: {str(e)}") from e

        if not response.is_success:
            logger.error(f"Failed to send email. Response: {response.text or 'No Response Body'}")
            raise DeliveryFailed(f"Error sending email: Failed to send email. Status: {response.status_code}")

        logger.info(f"Email sent successfully. Response: {response.text}")

    def close(self) -> None:
        self.http.close()
