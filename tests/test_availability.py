"""
Tests for the availability analytics: slot counting, ranking and the best day.
"""

from team_scheduler.models import Role
from team_scheduler.core.config import DAYS_OF_WEEK, TIME_BLOCKS
from team_scheduler.services.availability import analyze_time_slots, most_available_day, rank_time_slots

from conftest import make_player

EARLY, LATE = TIME_BLOCKS


def _slot(analysis, day, time_slot):
    return next(s for s in analysis if s.day == day and s.time_slot == time_slot)


def test_every_day_and_slot_is_analyzed():
    analysis = analyze_time_slots([make_player("p1", "Alpha")])

    assert len(analysis) == len(DAYS_OF_WEEK) * len(TIME_BLOCKS)
    assert {(s.day, s.time_slot) for s in analysis} == {(d, t) for d in DAYS_OF_WEEK for t in TIME_BLOCKS}


def test_all_blocks_counts_for_every_slot():
    players = [
        make_player("p1", "Alpha", Monday="All blocks"),
        make_player("p2", "Beta", Monday=EARLY),
        make_player("p3", "Gamma", Monday="cannot"),
        make_player("p4", "Delta"),
    ]
    analysis = analyze_time_slots(players)

    early = _slot(analysis, "Monday", EARLY)
    late = _slot(analysis, "Monday", LATE)

    assert early.available_count == 2
    assert early.available_players == ["Alpha", "Beta"]
    assert early.percentage == 50.0
    assert late.available_count == 1
    assert late.available_players == ["Alpha"]
    assert late.percentage == 25.0


def test_monday_early_block_with_three_players():
    players = [
        make_player("p1", "p1", Monday="All blocks"),
        make_player("p2", "p2", Monday=EARLY),
        make_player("p3", "p3", Monday="cannot"),
    ]

    slot = _slot(rank_time_slots(players), "Monday", EARLY)

    assert slot.available_count == 2
    assert slot.percentage == 66.67
    assert slot.available_players == ["p1", "p2"]


def test_counts_never_exceed_player_count():
    players = [
        make_player("p1", "Alpha", Monday="All blocks", Friday=LATE),
        make_player("p2", "Beta", Monday="All blocks", Friday="All blocks"),
        make_player("p3", "Gamma", Tuesday=EARLY),
    ]

    for slot in analyze_time_slots(players):
        assert 0 <= slot.available_count <= len(players)
        assert slot.available_count == len(slot.available_players)
        assert 0.0 <= slot.percentage <= 100.0


def test_percentage_is_rounded():
    players = [make_player("p1", "Alpha", Sunday=LATE)] + [
        make_player(f"p{i}", f"Player {i}") for i in range(2, 4)
    ]

    assert _slot(analyze_time_slots(players), "Sunday", LATE).percentage == 33.33


def test_sorted_by_count_with_stable_ties():
    players = [
        make_player("p1", "Alpha", Wednesday="All blocks", Tuesday=LATE),
        make_player("p2", "Beta", Wednesday=EARLY, Monday=LATE),
    ]
    analysis = analyze_time_slots(players)

    counts = [s.available_count for s in analysis]
    assert counts == sorted(counts, reverse=True)

    assert (analysis[0].day, analysis[0].time_slot) == ("Wednesday", EARLY)
    # Ties keep Monday-first encounter order
    ones = [(s.day, s.time_slot) for s in analysis if s.available_count == 1]
    assert ones == [("Monday", LATE), ("Tuesday", LATE), ("Wednesday", LATE)]


def test_no_players_gives_zero_percentages():
    analysis = analyze_time_slots([])

    assert len(analysis) == len(DAYS_OF_WEEK) * len(TIME_BLOCKS)
    assert all(s.available_count == 0 and s.percentage == 0.0 for s in analysis)


def test_rank_drops_empty_slots_and_limits():
    players = [make_player("p1", "Alpha", **{day: "All blocks" for day in DAYS_OF_WEEK[:4]})]

    ranked = rank_time_slots(players)
    assert len(ranked) == 5
    assert all(s.available_count > 0 for s in ranked)

    assert rank_time_slots([make_player("p1", "Alpha", Saturday=EARLY)], limit=5)[0].day == "Saturday"
    assert len(rank_time_slots([make_player("p1", "Alpha", Saturday=EARLY)])) == 1


def test_rank_is_empty_without_availability():
    assert rank_time_slots([]) == []
    assert rank_time_slots([make_player("p1", "Alpha", Monday="cannot")]) == []


def test_most_available_day_ignores_unknown_and_cannot():
    players = [
        make_player("p1", "Alpha", Monday="cannot", Thursday=EARLY),
        make_player("p2", "Beta", Monday="unknown", Thursday="All blocks"),
        make_player("p3", "Gamma", Role.SUPPORT, Monday=LATE),
    ]

    assert most_available_day(players) == ("Thursday", 2)


def test_most_available_day_prefers_earliest_on_tie():
    players = [
        make_player("p1", "Alpha", Friday=EARLY, Tuesday=LATE),
    ]

    assert most_available_day(players) == ("Tuesday", 1)


def test_most_available_day_with_nobody_available():
    assert most_available_day([]) is None
    assert most_available_day([make_player("p1", "Alpha")]) == ("Monday", 0)
