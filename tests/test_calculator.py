"""Tests for heatscore.calculator."""

import pytest

from heatscore.calculator import (
    FactorBuilder,
    calculate_heat_score,
    day_number,
    heat_verdict,
    max_possible_wins,
    rank_strength,
)
from heatscore.models import Day, Factor, MatchContext, Rank, Result

_RANK_GAP_LABELS = {"大きな番付差", "中程度の番付差", "小さな番付差", "同等の番付"}
_PRESTIGE_LABELS = {"横綱同士の対決", "上位力士の対決"}
_DAY_LABELS = {
    "千秋楽の重要な一番", "場所終盤の重要な一番", "場所後半の一番",
    "中日以降の一番", "初日の一番",
}
_RECORD_LABELS = {
    "大きな星差", "番狂わせ", "中程度の星差",
    "東方力士の全勝記録", "西方力士の全勝記録", "全勝記録が途絶えた",
}


def _ctx(**overrides) -> MatchContext:
    defaults = dict(
        day=Day.DAY_5,
        east_rank=Rank.MAEGASHIRA_5,
        west_rank=Rank.MAEGASHIRA_5,
        east_wins=0,
        east_losses=0,
        west_wins=0,
        west_losses=0,
        result=Result.EAST,
    )
    defaults.update(overrides)
    return MatchContext(**defaults)


def _labels(ctx: MatchContext) -> list[str]:
    return [f.label for f in calculate_heat_score(ctx).factors]


class TestRankStrength:
    def test_sanyaku_values(self) -> None:
        assert rank_strength(Rank.YOKOZUNA) == 5
        assert rank_strength(Rank.OZEKI) == 4
        assert rank_strength(Rank.SEKIWAKE) == 3
        assert rank_strength(Rank.KOMUSUBI) == 2

    def test_maegashira_values(self) -> None:
        assert rank_strength(Rank.MAEGASHIRA_1) == 1.0
        assert rank_strength(Rank.MAEGASHIRA_2) == pytest.approx(0.95)
        assert rank_strength(Rank.MAEGASHIRA_15) == pytest.approx(0.30)

    def test_strictly_decreasing_in_banzuke_order(self) -> None:
        strengths = [rank_strength(r) for r in Rank]
        assert all(a > b for a, b in zip(strengths, strengths[1:]))

    def test_komusubi_above_maegashira_1(self) -> None:
        assert rank_strength(Rank.KOMUSUBI) > rank_strength(Rank.MAEGASHIRA_1)


class TestDayValuation:
    def test_day_number(self) -> None:
        assert day_number(Day.DAY_1) == 1
        assert day_number(Day.DAY_8) == 8
        assert day_number(Day.DAY_11) == 11
        assert day_number(Day.DAY_15) == 15

    def test_max_possible_wins(self) -> None:
        assert max_possible_wins(Day.DAY_1) == 0
        assert max_possible_wins(Day.DAY_2) == 1
        assert max_possible_wins(Day.DAY_15) == 14


class TestFactorBuilder:
    def test_keeps_insertion_order_and_total(self) -> None:
        builder = FactorBuilder()
        builder.add("b", 10)
        builder.add("a", 0)
        builder.add("c", 5)
        assert builder.build() == (Factor("b", 10), Factor("a", 0), Factor("c", 5))
        assert builder.total == 15


class TestScenarios:
    def test_opening_day_yokozuna_bout(self) -> None:
        result = calculate_heat_score(_ctx(
            day=Day.DAY_1,
            east_rank=Rank.YOKOZUNA,
            west_rank=Rank.YOKOZUNA,
            result=Result.EAST,
        ))
        assert result.score == 80
        assert result.factors == (
            Factor("同等の番付", 0),
            Factor("横綱同士の対決", 25),
            Factor("初日の一番", 5),
        )

    def test_final_day_streak_broken_by_maegashira_clamps(self) -> None:
        result = calculate_heat_score(_ctx(
            day=Day.DAY_15,
            east_rank=Rank.YOKOZUNA,
            west_rank=Rank.MAEGASHIRA_15,
            east_wins=14, east_losses=0,
            west_wins=7, west_losses=7,
            result=Result.WEST,
        ))
        assert result.score == 100
        assert result.raw_score == 165
        assert result.factors == (
            Factor("大きな番付差", 15),
            Factor("上位力士の対決", 15),
            Factor("千秋楽の重要な一番", 30),
            Factor("中程度の星差", 5),
            Factor("東方力士の全勝記録", 15),
            Factor("全勝記録が途絶えた", 10),
            Factor("大番狂わせ！下位力士の勝利", 25),
        )

    def test_day_two_record_upset_between_yokozuna(self) -> None:
        result = calculate_heat_score(_ctx(
            day=Day.DAY_2,
            east_rank=Rank.YOKOZUNA,
            west_rank=Rank.YOKOZUNA,
            east_wins=1, east_losses=0,
            west_wins=0, west_losses=1,
            result=Result.WEST,
        ))
        assert result.score == 100
        assert result.raw_score == 125
        assert [f.label for f in result.factors] == [
            "同等の番付", "横綱同士の対決", "大きな星差", "番狂わせ",
            "東方力士の全勝記録", "全勝記録が途絶えた",
        ]

    def test_quiet_bout_stays_at_baseline(self) -> None:
        result = calculate_heat_score(_ctx())
        assert result.score == 50
        assert result.factors == (Factor("同等の番付", 0),)


class TestRankGapFactor:
    @pytest.mark.parametrize("east, west, expected", [
        (Rank.YOKOZUNA, Rank.KOMUSUBI, Factor("大きな番付差", 15)),
        (Rank.YOKOZUNA, Rank.SEKIWAKE, Factor("中程度の番付差", 10)),
        (Rank.OZEKI, Rank.SEKIWAKE, Factor("小さな番付差", 5)),
        (Rank.KOMUSUBI, Rank.MAEGASHIRA_1, Factor("小さな番付差", 5)),
        (Rank.MAEGASHIRA_1, Rank.MAEGASHIRA_11, Factor("同等の番付", 0)),
    ])
    def test_tiers(self, east: Rank, west: Rank, expected: Factor) -> None:
        result = calculate_heat_score(_ctx(east_rank=east, west_rank=west))
        assert result.factors[0] == expected

    def test_always_recorded_exactly_once(self) -> None:
        for east in Rank:
            for west in Rank:
                labels = _labels(_ctx(east_rank=east, west_rank=west))
                assert sum(1 for l in labels if l in _RANK_GAP_LABELS) == 1
                assert labels[0] in _RANK_GAP_LABELS


class TestPrestigeFactor:
    @pytest.mark.parametrize("east, west, delta", [
        (Rank.YOKOZUNA, Rank.OZEKI, 25),
        (Rank.OZEKI, Rank.OZEKI, 20),
        (Rank.SEKIWAKE, Rank.SEKIWAKE, 15),
    ])
    def test_tiers(self, east: Rank, west: Rank, delta: int) -> None:
        result = calculate_heat_score(_ctx(east_rank=east, west_rank=west))
        assert result.factors[1].label in _PRESTIGE_LABELS
        assert result.factors[1].delta == delta

    def test_no_entry_at_or_below_komusubi_average(self) -> None:
        labels = _labels(_ctx(east_rank=Rank.KOMUSUBI, west_rank=Rank.KOMUSUBI))
        assert not _PRESTIGE_LABELS & set(labels)


class TestDayFactor:
    @pytest.mark.parametrize("day, expected", [
        (Day.DAY_15, Factor("千秋楽の重要な一番", 30)),
        (Day.DAY_14, Factor("場所終盤の重要な一番", 20)),
        (Day.DAY_13, Factor("場所終盤の重要な一番", 20)),
        (Day.DAY_12, Factor("場所後半の一番", 15)),
        (Day.DAY_10, Factor("場所後半の一番", 15)),
        (Day.DAY_9, Factor("中日以降の一番", 10)),
        (Day.DAY_8, Factor("中日以降の一番", 10)),
        (Day.DAY_1, Factor("初日の一番", 5)),
    ])
    def test_tiers(self, day: Day, expected: Factor) -> None:
        assert calculate_heat_score(_ctx(day=day)).factors[1] == expected

    @pytest.mark.parametrize("day", [Day.DAY_2, Day.DAY_4, Day.DAY_7])
    def test_no_entry_early_days(self, day: Day) -> None:
        assert not _DAY_LABELS & set(_labels(_ctx(day=day)))


class TestRecordFactor:
    def test_skipped_when_either_side_has_no_bouts(self) -> None:
        labels = _labels(_ctx(day=Day.DAY_11, east_wins=10, west_wins=0))
        assert not _RECORD_LABELS & set(labels)
        labels = _labels(_ctx(day=Day.DAY_11, east_wins=0, west_losses=10))
        assert not _RECORD_LABELS & set(labels)

    def test_moderate_record_gap(self) -> None:
        labels = _labels(_ctx(
            day=Day.DAY_11,
            east_wins=6, east_losses=4,
            west_wins=3, west_losses=7,
        ))
        assert "中程度の星差" in labels
        assert "大きな星差" not in labels

    def test_small_record_gap_has_no_entry(self) -> None:
        labels = _labels(_ctx(
            day=Day.DAY_11,
            east_wins=5, east_losses=5,
            west_wins=4, west_losses=6,
        ))
        assert not _RECORD_LABELS & set(labels)

    def test_large_gap_without_upset_when_better_record_wins(self) -> None:
        labels = _labels(_ctx(
            day=Day.DAY_11,
            east_wins=9, east_losses=1,
            west_wins=2, west_losses=8,
            result=Result.EAST,
        ))
        assert "大きな星差" in labels
        assert "番狂わせ" not in labels

    def test_large_gap_upset_when_better_record_loses(self) -> None:
        result = calculate_heat_score(_ctx(
            day=Day.DAY_11,
            east_wins=2, east_losses=8,
            west_wins=9, west_losses=1,
            result=Result.EAST,
        ))
        assert Factor("大きな星差", 10) in result.factors
        assert Factor("番狂わせ", 15) in result.factors

    def test_both_perfect_records_each_counted(self) -> None:
        result = calculate_heat_score(_ctx(
            day=Day.DAY_13,
            east_wins=12, east_losses=0,
            west_wins=12, west_losses=0,
            result=Result.EAST,
        ))
        labels = [f.label for f in result.factors]
        assert labels[-3:] == ["東方力士の全勝記録", "西方力士の全勝記録", "全勝記録が途絶えた"]

    def test_perfect_record_kept_when_leader_wins(self) -> None:
        labels = _labels(_ctx(
            day=Day.DAY_6,
            east_wins=5, east_losses=0,
            west_wins=3, west_losses=2,
            result=Result.EAST,
        ))
        assert "東方力士の全勝記録" in labels
        assert "全勝記録が途絶えた" not in labels

    def test_unbeaten_with_absences_is_not_perfect(self) -> None:
        labels = _labels(_ctx(
            day=Day.DAY_6,
            east_wins=4, east_losses=0,
            west_wins=3, west_losses=2,
        ))
        assert "東方力士の全勝記録" not in labels


class TestGiantKillingFactor:
    @pytest.mark.parametrize("east, west, result, expected", [
        (Rank.YOKOZUNA, Rank.MAEGASHIRA_1, Result.WEST, Factor("大番狂わせ！下位力士の勝利", 25)),
        (Rank.MAEGASHIRA_1, Rank.SEKIWAKE, Result.EAST, Factor("番狂わせ！下位力士の勝利", 15)),
        (Rank.OZEKI, Rank.SEKIWAKE, Result.WEST, Factor("下位力士の勝利", 5)),
        (Rank.MAEGASHIRA_3, Rank.MAEGASHIRA_2, Result.EAST, Factor("下位力士の勝利", 5)),
    ])
    def test_tiers(self, east: Rank, west: Rank, result: Result, expected: Factor) -> None:
        factors = calculate_heat_score(_ctx(east_rank=east, west_rank=west, result=result)).factors
        assert factors[-1] == expected

    def test_no_entry_when_higher_rank_wins(self) -> None:
        labels = _labels(_ctx(east_rank=Rank.YOKOZUNA, west_rank=Rank.MAEGASHIRA_1,
                              result=Result.EAST))
        assert not any("下位力士の勝利" in l for l in labels)

    def test_no_entry_for_equal_ranks(self) -> None:
        for result in Result:
            labels = _labels(_ctx(result=result))
            assert not any("下位力士の勝利" in l for l in labels)

    def test_stacks_with_record_upset(self) -> None:
        labels = _labels(_ctx(
            day=Day.DAY_11,
            east_rank=Rank.OZEKI, west_rank=Rank.MAEGASHIRA_10,
            east_wins=9, east_losses=1,
            west_wins=2, west_losses=8,
            result=Result.WEST,
        ))
        assert "番狂わせ" in labels
        assert "大番狂わせ！下位力士の勝利" in labels


class TestScoreProperties:
    def test_score_is_int_in_range_for_all_rank_and_day_combinations(self) -> None:
        for day in Day:
            cap = max_possible_wins(day)
            for east in Rank:
                for west in Rank:
                    for result in Result:
                        scored = calculate_heat_score(_ctx(
                            day=day, east_rank=east, west_rank=west,
                            east_wins=cap, west_losses=cap, result=result,
                        ))
                        assert isinstance(scored.score, int)
                        assert 0 <= scored.score <= 100

    def test_deterministic(self) -> None:
        ctx = _ctx(day=Day.DAY_12, east_rank=Rank.SEKIWAKE,
                   west_rank=Rank.MAEGASHIRA_4, east_wins=8, east_losses=3,
                   west_wins=11, west_losses=0, result=Result.EAST)
        assert calculate_heat_score(ctx) == calculate_heat_score(ctx)

    def test_result_only_affects_record_and_upset_factors(self) -> None:
        fixed = _RANK_GAP_LABELS | _PRESTIGE_LABELS | _DAY_LABELS
        for day in (Day.DAY_1, Day.DAY_9, Day.DAY_15):
            for east in (Rank.YOKOZUNA, Rank.KOMUSUBI, Rank.MAEGASHIRA_8):
                for west in (Rank.OZEKI, Rank.MAEGASHIRA_1, Rank.MAEGASHIRA_15):
                    east_win = calculate_heat_score(
                        _ctx(day=day, east_rank=east, west_rank=west, result=Result.EAST))
                    west_win = calculate_heat_score(
                        _ctx(day=day, east_rank=east, west_rank=west, result=Result.WEST))
                    assert [f for f in east_win.factors if f.label in fixed] == \
                        [f for f in west_win.factors if f.label in fixed]


class TestHeatVerdict:
    @pytest.mark.parametrize("score, verdict", [
        (100, "超激アツ！歴史に残る名勝負！"),
        (90, "超激アツ！歴史に残る名勝負！"),
        (89, "大激戦！会場が沸く熱戦！"),
        (75, "大激戦！会場が沸く熱戦！"),
        (60, "見応えのある好取組！"),
        (45, "普通の取組"),
        (44, "淡々とした取組"),
        (0, "淡々とした取組"),
    ])
    def test_bands(self, score: int, verdict: str) -> None:
        assert heat_verdict(score) == verdict
