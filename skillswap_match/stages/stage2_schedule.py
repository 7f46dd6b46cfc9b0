"""
Stage 2: Schedule Overlap
=========================
Normalizes preferred day/time tags and measures how far two users'
preferences coincide.

Accepted tags:
- Days: English names, 3-letter abbreviations, German names
- Times: morning / afternoon / evening / night, German equivalents,
  or a "HH:MM-HH:MM" range (mapped onto every bucket it touches)

An empty preference set means "no constraint" and counts as full overlap.
"""

import re
from typing import Iterable, List, Optional, Set

from ..models.schemas import MatchCandidate, ScheduleResult
from ..models.scoring_config import ScheduleBlend
from ..config.settings import (
    CANONICAL_DAYS,
    DAY_ALIASES,
    TIME_BUCKETS,
    TIME_ALIASES,
    TIME_RANGE_PATTERN,
)
from ..logging_config import setup_logger

logger = setup_logger(__name__)

_TIME_RANGE = re.compile(TIME_RANGE_PATTERN)


def normalize_days(days: Optional[Iterable[str]]) -> Set[str]:
    """Map day tags to canonical lowercase English names"""
    normalized = set()
    for day in days or []:
        tag = (day or "").strip().lower()
        if not tag:
            continue
        if tag in CANONICAL_DAYS:
            normalized.add(tag)
        elif tag in DAY_ALIASES:
            normalized.add(DAY_ALIASES[tag])
        else:
            logger.debug(f"Unknown day tag '{day}', keeping as literal")
            normalized.add(tag)
    return normalized


def parse_time_range(value: str) -> Optional[List[str]]:
    """
    Map a "HH:MM-HH:MM" range onto the time buckets it intersects.

    Returns None if the value is not a valid range (start must be before end).
    """
    match = _TIME_RANGE.match(value.strip())
    if not match:
        return None

    start = int(match.group(1)) * 60 + int(match.group(2))
    end = int(match.group(3)) * 60 + int(match.group(4))
    if start >= end:
        return None

    buckets = []
    for bucket, intervals in TIME_BUCKETS.items():
        for iv_start, iv_end in intervals:
            if start < iv_end and end > iv_start:
                buckets.append(bucket)
                break
    return buckets


def normalize_times(times: Optional[Iterable[str]]) -> Set[str]:
    """Map time tags and ranges to bucket names"""
    normalized = set()
    for time_tag in times or []:
        tag = (time_tag or "").strip().lower()
        if not tag:
            continue
        if tag in TIME_BUCKETS:
            normalized.add(tag)
            continue
        if tag in TIME_ALIASES:
            normalized.add(TIME_ALIASES[tag])
            continue

        buckets = parse_time_range(tag)
        if buckets:
            normalized.update(buckets)
        else:
            logger.debug(f"Unrecognized time tag '{time_tag}', keeping as literal")
            normalized.add(tag)
    return normalized


def overlap_fraction(a: Set[str], b: Set[str], mode: str = "smaller") -> float:
    """
    Size of the intersection relative to the smaller set ("smaller")
    or to the union ("union"). Empty on either side means full overlap.
    """
    if not a or not b:
        return 1.0
    common = len(a & b)
    if mode == "union":
        return common / len(a | b)
    return common / min(len(a), len(b))


class ScheduleOverlapStage:
    """
    Stage 2: Compute blended day/time overlap between two users.
    """

    def __init__(self, blend: Optional[ScheduleBlend] = None):
        self.blend = blend or ScheduleBlend()

    def process(self, candidate: MatchCandidate) -> ScheduleResult:
        requester_days = normalize_days(candidate.requester_preferred_days)
        target_days = normalize_days(candidate.target_user_preferred_days)
        requester_times = normalize_times(candidate.requester_preferred_times)
        target_times = normalize_times(candidate.target_user_preferred_times)

        mode = self.blend.overlap_mode
        day_overlap = overlap_fraction(requester_days, target_days, mode)
        time_overlap = overlap_fraction(requester_times, target_times, mode)

        total_weight = self.blend.day_weight + self.blend.time_weight
        if total_weight > 0:
            overlap = (
                day_overlap * self.blend.day_weight
                + time_overlap * self.blend.time_weight
            ) / total_weight
        else:
            overlap = 1.0

        return ScheduleResult(
            requester_days=sorted(requester_days),
            target_days=sorted(target_days),
            requester_times=sorted(requester_times),
            target_times=sorted(target_times),
            common_days=sorted(requester_days & target_days),
            common_times=sorted(requester_times & target_times),
            day_overlap=round(day_overlap, 4),
            time_overlap=round(time_overlap, 4),
            overlap=round(overlap, 4),
        )
