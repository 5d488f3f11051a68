"""
Recovery Models
===============
Recovery is keyed by the cycle it belongs to, not by its own id.
"""

from __future__ import annotations

from datetime import datetime
from typing import Optional

from whoop.models.common import WhoopRecord


class RecoveryScore(WhoopRecord):
    """Morning recovery metrics. Null while WHOOP is still scoring."""

    user_calibrating: Optional[bool] = None
    recovery_score: Optional[float] = None  # 0–100
    resting_heart_rate: Optional[int] = None
    hrv_rmssd_milli: Optional[float] = None
    spo2_percentage: Optional[float] = None
    skin_temp_celsius: Optional[float] = None


class Recovery(WhoopRecord):
    cycle_id: int
    sleep_id: Optional[int] = None
    user_id: int
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    score: Optional[RecoveryScore] = None
