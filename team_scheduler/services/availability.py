"""
Availability analytics over a week's player records.
Finds the best training time slots and the day most players can make.
"""

from typing import List, Optional, Sequence, Tuple

from team_scheduler.models import AvailabilityOption, PlayerAvailability, TimeSlotAnalysis
from team_scheduler.core.config import DAYS_OF_WEEK, TIME_BLOCKS, TOP_TIME_SLOTS


def analyze_time_slots(
    players: Sequence[PlayerAvailability],
    time_slots: Sequence[str] = TIME_BLOCKS
) -> List[TimeSlotAnalysis]:
    """
    Count, for every (day, slot) pair, the players who can make that slot.

    A player matches a slot when their answer for the day is the slot itself
    or "All blocks". Results are sorted by count, highest first; the sort is
    stable so ties keep Monday-first, slot-order encounter order.

    Args:
        players: Availability records for the week
        time_slots: Candidate slot labels

    Returns:
        One analysis per (day, slot) pair, len(DAYS_OF_WEEK) * len(time_slots) entries
    """
    total = len(players)
    analysis = []

    for day in DAYS_OF_WEEK:
        for time_slot in time_slots:
            available = [
                player.player_name for player in players
                if player.on(day).value == time_slot or player.on(day) == AvailabilityOption.ALL_BLOCKS
            ]
            percentage = round(len(available) / total * 100, 2) if total else 0.0
            analysis.append(TimeSlotAnalysis(
                day=day,
                time_slot=time_slot,
                available_count=len(available),
                available_players=available,
                percentage=percentage
            ))

    return sorted(analysis, key=lambda slot: slot.available_count, reverse=True)


def rank_time_slots(
    players: Sequence[PlayerAvailability],
    time_slots: Sequence[str] = TIME_BLOCKS,
    limit: int = TOP_TIME_SLOTS
) -> List[TimeSlotAnalysis]:
    """Best training times: the top `limit` slots with at least one available player."""
    if not players:
        return []
    ranked = [slot for slot in analyze_time_slots(players, time_slots) if slot.available_count > 0]
    return ranked[:limit]


def most_available_day(players: Sequence[PlayerAvailability]) -> Optional[Tuple[str, int]]:
    """
    Day with the most players committed to anything other than "unknown" or "cannot".

    Ties go to the earliest day of the week.

    Returns:
        (day, count), or None when there are no players
    """
    if not players:
        return None

    not_available = (AvailabilityOption.UNKNOWN, AvailabilityOption.CANNOT)
    day_counts = [
        (day, sum(1 for player in players if player.on(day) not in not_available))
        for day in DAYS_OF_WEEK
    ]

    return sorted(day_counts, key=lambda entry: entry[1], reverse=True)[0]
