"""
User Profile Models
===================
Shapes for ``/v2/user/profile/basic`` and ``/v2/user/measurement/body``.
"""

from __future__ import annotations

from typing import Optional

from whoop.models.common import WhoopRecord


class UserProfile(WhoopRecord):
    """Basic account details for the token's owner."""

    user_id: int
    email: Optional[str] = None
    first_name: Optional[str] = None
    last_name: Optional[str] = None


class BodyMeasurement(WhoopRecord):
    """Body metrics. WHOOP omits any the member has not entered."""

    height_meter: Optional[float] = None
    weight_kilogram: Optional[float] = None
    max_heart_rate: Optional[int] = None
