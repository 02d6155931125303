"""Tests for key-moment detection."""

from conftest import make_team
from hoopsim.core.highlights import HighlightDetector, parse_clock
from hoopsim.models.game import MatchResult, Possession, QuarterStats


def _poss(
    team: str,
    points: int = 0,
    player: str = "Al",
    time: str = "10:00",
    quarter: int = 1,
    action: str | None = None,
) -> Possession:
    if action is None:
        action = "Jump shot made" if points else "Jump shot missed"
    if action.startswith("Turnover"):
        result = "turnover"
    else:
        result = "made" if points else "missed"
    return Possession(
        team=team,
        quarter=quarter,
        time=time,
        player=player,
        action=action,
        points=points,
        result=result,
    )


def _quarter(number: int, possessions: list[Possession]) -> QuarterStats:
    return QuarterStats(
        quarter=number,
        team1_score=sum(p.points for p in possessions if p.team == "team1"),
        team2_score=sum(p.points for p in possessions if p.team == "team2"),
        possessions=possessions,
    )


def _make_result(*quarter_possessions: list[Possession]) -> MatchResult:
    """Build a MatchResult from per-quarter possession lists (padded to four quarters)."""
    lists = list(quarter_possessions) + [[] for _ in range(4 - len(quarter_possessions))]
    quarters = [_quarter(i, poss) for i, poss in enumerate(lists, start=1)]
    t1 = sum(q.team1_score for q in quarters)
    t2 = sum(q.team2_score for q in quarters)
    return MatchResult(
        team1=make_team(1),
        team2=make_team(2),
        team1_score=t1,
        team2_score=t2,
        quarters=quarters,
        winner="team1" if t1 > t2 else "team2",
    )


def _of_type(moments, kind):
    return [m for m in moments if m.type == kind]


class TestParseClock:
    def test_parse(self):
        assert parse_clock("12:00") == 720
        assert parse_clock("0:28") == 28
        assert parse_clock("5:07") == 307


class TestRuns:
    def test_eight_point_run(self):
        result = _make_result([
            _poss("team1", 2, "Al", "11:00"),
            _poss("team2", 0, "Bo", "10:30"),
            _poss("team1", 2, "Cy", "10:00"),
            _poss("team2", 0, "Bo", "9:30"),
            _poss("team1", 2, "Al", "9:00"),
            _poss("team2", 0, "Bo", "8:30"),
            _poss("team1", 2, "Di", "8:00"),
        ])
        runs = _of_type(HighlightDetector().detect_key_moments(result), "run")
        assert len(runs) == 1
        run = runs[0]
        assert run.description == "Team-1 on a 8-0 run"
        assert run.importance == "medium"
        assert run.team_favor == "team1"
        assert run.time == "8:00"
        # lookback window covers the last six possessions only
        assert run.involved_players == ["Cy", "Al", "Di"]

    def test_run_reported_when_threshold_crossed(self):
        result = _make_result([_poss("team2", 3, f"P{i}", "10:00") for i in range(3)]
                              + [_poss("team2", 3, "P9", "9:00")])
        runs = _of_type(HighlightDetector().detect_key_moments(result), "run")
        assert len(runs) == 1
        assert runs[0].importance == "medium"

        result = _make_result([_poss("team2", 2, "X", "10:00") for _ in range(3)]
                              + [_poss("team2", 3, "Y", "9:00"), _poss("team2", 3, "Y", "8:00")])
        runs = _of_type(HighlightDetector().detect_key_moments(result), "run")
        assert [r.description for r in runs] == ["Team-2 on a 9-0 run"]

    def test_run_needs_uninterrupted_scoring(self):
        result = _make_result([
            _poss("team1", 2, "Al"),
            _poss("team1", 2, "Al"),
            _poss("team2", 2, "Bo"),
            _poss("team1", 2, "Al"),
            _poss("team1", 2, "Al"),
        ])
        assert _of_type(HighlightDetector().detect_key_moments(result), "run") == []

    def test_run_resets_at_quarter_break(self):
        result = _make_result(
            [_poss("team1", 2, "Al", quarter=1) for _ in range(3)],
            [_poss("team1", 2, "Al", quarter=2) for _ in range(3)],
        )
        assert _of_type(HighlightDetector().detect_key_moments(result), "run") == []

    def test_run_counter_resets_after_report(self):
        result = _make_result([_poss("team1", 3, "Al", "11:00")]
                              + [_poss("team1", 2, "Al", "10:00") for _ in range(4)]
                              + [_poss("team1", 3, "Al", "9:00")])
        runs = _of_type(HighlightDetector().detect_key_moments(result), "run")
        # 3+2+2+2 hits 9 and resets; the remaining 2+3 never reach the threshold
        assert len(runs) == 1


class TestThrees:
    def test_every_made_three_is_a_highlight(self):
        result = _make_result([
            _poss("team1", 3, "Al", "11:00", action="Three-pointer made"),
            _poss("team2", 3, "Bo", "10:30", action="Three-pointer made"),
        ])
        threes = _of_type(HighlightDetector().detect_key_moments(result), "highlight_play")
        assert [m.description for m in threes] == [
            "Al drains a three-pointer",
            "Bo drains a three-pointer",
        ]
        assert threes[1].team_favor == "team2"


class TestMomentum:
    def test_steal_leading_to_points(self):
        result = _make_result([
            _poss("team2", 0, "Bo", "6:00", action="Turnover, stolen by Al"),
            _poss("team1", 2, "Cy", "5:30"),
        ])
        swings = _of_type(HighlightDetector().detect_key_moments(result), "momentum_swing")
        assert len(swings) == 1
        swing = swings[0]
        assert swing.description == "Al with a steal leading to Cy's 2 points"
        assert swing.team_favor == "team1"
        assert swing.involved_players == ["Al", "Cy"]
        assert swing.time == "6:00"

    def test_steal_without_points_is_ignored(self):
        result = _make_result([
            _poss("team2", 0, "Bo", "6:00", action="Turnover, stolen by Al"),
            _poss("team1", 0, "Cy", "5:30"),
            _poss("team2", 2, "Bo", "5:00"),
        ])
        assert _of_type(HighlightDetector().detect_key_moments(result), "momentum_swing") == []

    def test_steal_on_last_possession(self):
        result = _make_result([
            _poss("team1", 2, "Cy", "1:00"),
            _poss("team2", 0, "Bo", "0:30", action="Turnover, stolen by Al"),
        ])
        assert _of_type(HighlightDetector().detect_key_moments(result), "momentum_swing") == []


class TestComeback:
    def test_blown_lead(self):
        result = _make_result(
            [_poss("team1", 3, "Al"), _poss("team2", 0, "Bo")] * 4,
            [_poss("team2", 2, "Bo"), _poss("team1", 0, "Al")] * 7,
        )
        comebacks = _of_type(HighlightDetector().detect_key_moments(result), "comeback")
        assert len(comebacks) == 1
        comeback = comebacks[0]
        assert comeback.description == "Team-2 completes a comeback from 12 points down"
        assert comeback.quarter == 4
        assert comeback.time == "0:00"
        assert comeback.importance == "high"
        assert comeback.team_favor == "team2"

    def test_small_lead_is_not_a_comeback(self):
        result = _make_result(
            [_poss("team1", 3, "Al"), _poss("team2", 0, "Bo")] * 3,
            [_poss("team2", 2, "Bo"), _poss("team1", 0, "Al")] * 5,
        )
        assert _of_type(HighlightDetector().detect_key_moments(result), "comeback") == []

    def test_leader_holding_on(self):
        result = _make_result(
            [_poss("team1", 3, "Al"), _poss("team2", 0, "Bo")] * 4,
            [_poss("team2", 2, "Bo"), _poss("team1", 0, "Al")] * 2,
        )
        assert _of_type(HighlightDetector().detect_key_moments(result), "comeback") == []


class TestClutch:
    def test_score_in_final_seconds(self):
        result = _make_result([], [], [], [
            _poss("team1", 2, "Al", "1:30", quarter=4),
            _poss("team2", 0, "Bo", "1:00", quarter=4),
            _poss("team1", 2, "Cy", "0:30", quarter=4),
            _poss("team2", 0, "Bo", "0:15", quarter=4),
        ])
        clutch = _of_type(HighlightDetector().detect_key_moments(result), "clutch_shot")
        assert len(clutch) == 1
        assert clutch[0].description == "Cy scores in the clutch with 0:30 left"
        assert clutch[0].importance == "high"
        assert clutch[0].involved_players == ["Cy"]

    def test_misses_are_not_clutch(self):
        result = _make_result([_poss("team1", 2, "Al")], [], [], [
            _poss("team2", 0, "Bo", "0:10", quarter=4),
        ])
        assert _of_type(HighlightDetector().detect_key_moments(result), "clutch_shot") == []


class TestOrdering:
    def test_sorted_by_quarter_then_clock(self):
        result = _make_result(
            [_poss("team1", 3, "Al", "2:00", action="Three-pointer made"),
             _poss("team2", 3, "Bo", "11:00", action="Three-pointer made")],
            [],
            [_poss("team1", 3, "Cy", "6:00", quarter=3, action="Three-pointer made")],
            [_poss("team1", 2, "Di", "0:05", quarter=4)],
        )
        moments = HighlightDetector().detect_key_moments(result)
        keys = [(m.quarter, parse_clock(m.time)) for m in moments]
        assert keys == [(1, 660), (1, 120), (3, 360), (4, 5)]

    def test_quiet_game_has_no_moments(self):
        result = _make_result([_poss("team1", 2, "Al"), _poss("team2", 0, "Bo")])
        assert HighlightDetector().detect_key_moments(result) == []
