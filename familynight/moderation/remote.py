"""Client for the remote moderation endpoint.

Speaks the OpenAI moderations wire format: POST ``{"input": text}`` and read
``results[0]``. Any transport or format problem surfaces as
``ModerationServiceError`` so the moderator can decide how to degrade.
"""

from __future__ import annotations

import logging
from typing import Optional

import httpx

from familynight.config import DEFAULT_MODERATION_URL
from familynight.errors import ModerationServiceError
from familynight.moderation.models import RemoteModerationResult

logger = logging.getLogger(__name__)


class RemoteModerationClient:
    """Async HTTP client for a hosted moderation service."""

    def __init__(
        self,
        api_key: Optional[str],
        url: str = DEFAULT_MODERATION_URL,
        client: Optional[httpx.AsyncClient] = None,
        timeout: float = 10.0,
    ):
        self.api_key = api_key
        self.url = url
        self.client = client or httpx.AsyncClient(timeout=timeout)

    async def check(self, text: str) -> RemoteModerationResult:
        """
        Ask the service whether *text* should be flagged.

        Args:
            text: Generated content to classify

        Returns:
            The first moderation result for the input

        Raises:
            ModerationServiceError: missing key, HTTP failure or bad payload
        """
        if not self.api_key:
            raise ModerationServiceError("Moderation API key not configured")

        headers = {"Authorization": f"Bearer {self.api_key}"}
        try:
            logger.debug(f"Sending moderation request to {self.url}")
            response = await self.client.post(self.url, json={"input": text}, headers=headers)
            response.raise_for_status()
            result = response.json()["results"][0]
            verdict = RemoteModerationResult(
                flagged=bool(result.get("flagged", False)),
                categories=dict(result.get("categories") or {}),
            )
        except httpx.HTTPError as e:
            logger.error(f"HTTP error during remote moderation: {e}")
            raise ModerationServiceError(f"Moderation API error: {e}") from e
        except RuntimeError as e:
            # httpx raises RuntimeError once the client has been closed
            logger.error(f"Moderation client unusable: {e}")
            raise ModerationServiceError(f"Moderation client error: {e}") from e
        except (AttributeError, KeyError, IndexError, TypeError, ValueError) as e:
            logger.error(f"Unexpected moderation response: {e}")
            raise ModerationServiceError(f"Malformed moderation response: {e}") from e

        logger.debug(f"Remote moderation flagged={verdict.flagged}")
        return verdict

    async def close(self):
        """Close the HTTP client."""
        await self.client.aclose()
