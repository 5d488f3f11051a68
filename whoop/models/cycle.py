"""
Physiological Cycle Models
==========================
A cycle runs from one sleep onset to the next. ``end`` is null while the
current cycle is still open.
"""

from __future__ import annotations

from datetime import datetime
from typing import Optional

from whoop.models.common import WhoopRecord


class CycleScore(WhoopRecord):
    # strain is on WHOOP's 0–21 scale
    strain: Optional[float] = None
    kilojoule: Optional[float] = None
    average_heart_rate: Optional[int] = None
    max_heart_rate: Optional[int] = None


class Cycle(WhoopRecord):
    id: int
    user_id: int
    start: Optional[datetime] = None
    end: Optional[datetime] = None
    timezone_offset: Optional[str] = None
    score: Optional[CycleScore] = None
