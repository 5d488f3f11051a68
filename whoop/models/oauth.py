"""
OAuth Token Models
==================
Response from the WHOOP ``/oauth/oauth2/token`` endpoint.
"""

from __future__ import annotations

from datetime import datetime, timedelta
from typing import Optional

from whoop.models.common import WhoopRecord


class OAuthTokenResponse(WhoopRecord):
    access_token: Optional[str] = None
    token_type: Optional[str] = None
    expires_in: Optional[int] = None  # seconds until expiry
    refresh_token: Optional[str] = None
    scope: Optional[str] = None

    def expires_at(self, issued_at: datetime) -> Optional[datetime]:
        """Absolute expiry for a token received at ``issued_at``."""
        if self.expires_in is None:
            return None
        return issued_at + timedelta(seconds=self.expires_in)
