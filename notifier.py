"""
CarouWatch Notifier Module
Slack Web API integration for sending listing alerts.
"""

import time
import logging
from typing import Optional

import requests

from config import SLACK_API_URL
from models import Listing
from scrapers import SearchRequest, ValidationError

logger = logging.getLogger(__name__)

# Slack caps message text at 40k characters; keep error messages well under
MAX_ERROR_LENGTH = 2000


class SlackNotifier:
    """Posts messages to a single Slack channel."""

    def __init__(self, token: str, channel: str, api_url: str = SLACK_API_URL, max_retries: int = 3):
        """
        Args:
            token: Slack OAuth access token (SLACK_ACCESS_TOKEN)
            channel: Channel id, e.g. C0341H4MD1P
            api_url: Slack Web API base URL
            max_retries: Attempts per message when rate limited or on network errors

        Raises:
            ValidationError: If token or channel is missing
        """
        if not token:
            raise ValidationError('Invalid slack access token. Please set "SLACK_ACCESS_TOKEN" variable')
        if not channel:
            raise ValidationError("No slack channel provided")

        self.channel = channel
        self.api_url = api_url.rstrip("/")
        self.max_retries = max_retries
        self.session = requests.Session()
        self.session.headers.update({"Authorization": f"Bearer {token}"})

    def _call(self, method: str, payload: Optional[dict] = None) -> Optional[dict]:
        """
        Call a Slack Web API method, retrying on rate limits.

        Returns:
            The decoded response when Slack reports ok, otherwise None
        """
        url = f"{self.api_url}/{method}"

        for attempt in range(self.max_retries):
            try:
                response = self.session.post(url, json=payload or {}, timeout=10)

                if response.status_code == 429:
                    # Rate limited, wait and retry
                    retry_after = int(response.headers.get("Retry-After", 5))
                    logger.warning(f"Rate limited, waiting {retry_after}s")
                    time.sleep(retry_after)
                    continue

                if response.status_code != 200:
                    logger.error(f"Slack error {response.status_code}: {response.text}")
                    return None

                data = response.json()
                if not data.get("ok"):
                    logger.error(f"Slack {method} failed: {data.get('error', 'unknown error')}")
                    return None
                return data

            except (requests.RequestException, ValueError) as e:
                logger.error(f"Slack {method} failed (attempt {attempt + 1}): {e}")
                time.sleep(1)

        return None

    def send_message(self, text: str) -> bool:
        """Send a plain text message to the channel."""
        data = self._call("chat.postMessage", {"channel": self.channel, "text": text})
        if data is None:
            return False
        logger.info(f"Message successfully sent to channel {data.get('channel')} at {data.get('ts')}")
        return True

    def notify(self, listing: Listing) -> bool:
        """
        Send a single listing to Slack.

        Failures are logged and reported through the return value only.

        Returns:
            True if sent successfully, False otherwise
        """
        sent = self.send_message(listing.summary())
        if not sent:
            logger.error(f"Failed to send listing {listing.id}")
        return sent

    def send_startup_message(self, request: SearchRequest, interval_minutes: int) -> bool:
        """Announce that monitoring has started."""
        return self.send_message(
            f":mag: CarouWatch started\n{request.describe()}\nChecking every {interval_minutes} min"
        )

    def send_error_message(self, error: str) -> bool:
        """Send an error notification."""
        return self.send_message(f":warning: CarouWatch error\n{error[:MAX_ERROR_LENGTH]}")

    def test_token(self) -> bool:
        """Check that the access token is valid."""
        return self._call("auth.test") is not None

    def close(self):
        self.session.close()
