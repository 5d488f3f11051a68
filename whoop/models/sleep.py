"""
Sleep Models
============
Stage durations are reported in milliseconds; percentages are 0–100.
"""

from __future__ import annotations

from datetime import datetime
from typing import Optional

from whoop.models.common import WhoopRecord


class StageSummary(WhoopRecord):
    total_in_bed_time_milli: Optional[int] = None
    total_awake_time_milli: Optional[int] = None
    total_light_sleep_time_milli: Optional[int] = None
    total_slow_wave_sleep_time_milli: Optional[int] = None
    total_rem_sleep_time_milli: Optional[int] = None
    sleep_cycle_count: Optional[int] = None
    disturbance_count: Optional[int] = None


class SleepScore(WhoopRecord):
    stage_summary: Optional[StageSummary] = None
    sleep_performance_percentage: Optional[float] = None
    sleep_consistency_percentage: Optional[float] = None
    sleep_efficiency_percentage: Optional[float] = None


class Sleep(WhoopRecord):
    """One sleep or nap."""

    id: int
    user_id: int
    start: Optional[datetime] = None
    end: Optional[datetime] = None
    timezone_offset: Optional[str] = None
    nap: Optional[bool] = None
    score: Optional[SleepScore] = None
