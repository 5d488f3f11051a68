"""
Workout Models
==============
Workouts plus the v1 → v2 activity id mapping.
"""

from __future__ import annotations

from datetime import datetime
from typing import Optional

from whoop.models.common import WhoopRecord


class ZoneDuration(WhoopRecord):
    """Milliseconds spent in each heart-rate zone (zero = below zone one)."""

    zone_zero_milli: Optional[int] = None
    zone_one_milli: Optional[int] = None
    zone_two_milli: Optional[int] = None
    zone_three_milli: Optional[int] = None
    zone_four_milli: Optional[int] = None
    zone_five_milli: Optional[int] = None


class WorkoutScore(WhoopRecord):
    strain: Optional[float] = None
    average_heart_rate: Optional[int] = None
    max_heart_rate: Optional[int] = None
    kilojoule: Optional[float] = None
    zone_duration: Optional[ZoneDuration] = None


class Workout(WhoopRecord):
    id: int
    user_id: int
    start: Optional[datetime] = None
    end: Optional[datetime] = None
    timezone_offset: Optional[str] = None
    sport_id: Optional[int] = None
    score: Optional[WorkoutScore] = None


class ActivityMapping(WhoopRecord):
    """Current identifier for a legacy numeric activity id."""

    v2_activity_id: Optional[str] = None
