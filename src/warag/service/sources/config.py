"""Service-account configuration for the Google Docs and Sheets APIs."""

import os

from dotenv import load_dotenv
from google.oauth2 import service_account

from warag.errors import ConfigurationError

# Load environment variables
load_dotenv()

GOOGLE_TOKEN_URI = "https://oauth2.googleapis.com/token"


class GoogleConfig:
    """Configuration class for Google service-account credentials."""

    @staticmethod
    def get_service_account_email() -> str | None:
        """Get the service account email documents must be shared with."""
        return os.getenv("GOOGLE_SERVICE_ACCOUNT_EMAIL")

    @staticmethod
    def get_private_key() -> str | None:
        """Get the service account private key.

        Keys stored in .env files usually carry literal "\\n" sequences; they
        are turned back into newlines here.
        """
        key = os.getenv("GOOGLE_PRIVATE_KEY")
        if key is None:
            return None
        return key.replace("\\n", "\n")

    @staticmethod
    def build_credentials(scopes: list[str]) -> service_account.Credentials:
        """Build read-only service-account credentials.

        Args:
            scopes: OAuth scopes to request

        Raises:
            ConfigurationError: If the email or private key is not configured
        """
        email = GoogleConfig.get_service_account_email()
        key = GoogleConfig.get_private_key()
        if not email or not key:
            raise ConfigurationError(
                "GOOGLE_SERVICE_ACCOUNT_EMAIL and GOOGLE_PRIVATE_KEY must be set"
            )

        info = {
            "type": "service_account",
            "client_email": email,
            "private_key": key,
            "token_uri": GOOGLE_TOKEN_URI,
        }
        return service_account.Credentials.from_service_account_info(info, scopes=scopes)
