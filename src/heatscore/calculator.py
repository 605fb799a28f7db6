"""Heat score calculation for a single bout."""

import logging

from heatscore.models import Day, Factor, MatchContext, Rank, Result, ScoreResult

logger = logging.getLogger(__name__)

BASE_SCORE = 50
MIN_SCORE = 0
MAX_SCORE = 100

_SANYAKU_STRENGTH = {
    Rank.YOKOZUNA: 5.0,
    Rank.OZEKI: 4.0,
    Rank.SEKIWAKE: 3.0,
    Rank.KOMUSUBI: 2.0,
}

# (minimum score, verdict), highest first
_VERDICTS = [
    (90, "超激アツ！歴史に残る名勝負！"),
    (75, "大激戦！会場が沸く熱戦！"),
    (60, "見応えのある好取組！"),
    (45, "普通の取組"),
]
_DEFAULT_VERDICT = "淡々とした取組"


def rank_strength(rank: Rank) -> float:
    """Yokozuna 5 down to Komusubi 2, then Maegashira 1.0 stepping by 0.05."""
    if rank in _SANYAKU_STRENGTH:
        return _SANYAKU_STRENGTH[rank]
    number = rank.maegashira_number
    if number is None:
        raise ValueError(f"Rank without strength: {rank!r}")
    return 1 - (number - 1) * 0.05


def day_number(day: Day) -> int:
    return day.number


def max_possible_wins(day: Day) -> int:
    """Bouts already fought before the given day."""
    return day_number(day) - 1


class FactorBuilder:
    """Collects (label, delta) pairs in the order they fire."""

    def __init__(self) -> None:
        self._factors: list[Factor] = []

    def add(self, label: str, delta: int) -> None:
        self._factors.append(Factor(label, delta))

    @property
    def total(self) -> int:
        return sum(f.delta for f in self._factors)

    def build(self) -> tuple[Factor, ...]:
        return tuple(self._factors)


def _rank_gap_factor(builder: FactorBuilder, gap: float) -> None:
    if gap > 2:
        builder.add("大きな番付差", 15)
    elif gap > 1:
        builder.add("中程度の番付差", 10)
    elif gap > 0.5:
        builder.add("小さな番付差", 5)
    else:
        builder.add("同等の番付", 0)


def _prestige_factor(builder: FactorBuilder, average: float) -> None:
    # No entry at all below the threshold, unlike the rank gap factor.
    if average > 4:
        builder.add("横綱同士の対決", 25)
    elif average > 3:
        builder.add("上位力士の対決", 20)
    elif average > 2:
        builder.add("上位力士の対決", 15)


def _day_factor(builder: FactorBuilder, day: Day) -> None:
    n = day_number(day)
    if day is Day.DAY_15:
        builder.add("千秋楽の重要な一番", 30)
    elif n >= 13:
        builder.add("場所終盤の重要な一番", 20)
    elif n >= 10:
        builder.add("場所後半の一番", 15)
    elif n >= 8:
        builder.add("中日以降の一番", 10)
    elif n == 1:
        builder.add("初日の一番", 5)


def _record_factor(builder: FactorBuilder, ctx: MatchContext) -> None:
    east_bouts = ctx.east_wins + ctx.east_losses
    west_bouts = ctx.west_wins + ctx.west_losses
    if east_bouts <= 0 or west_bouts <= 0:
        return

    east_ratio = ctx.east_wins / east_bouts
    west_ratio = ctx.west_wins / west_bouts
    gap = abs(east_ratio - west_ratio)

    if gap > 0.5:
        builder.add("大きな星差", 10)
        if (east_ratio > west_ratio and ctx.result is Result.WEST) or (
            west_ratio > east_ratio and ctx.result is Result.EAST
        ):
            builder.add("番狂わせ", 15)
    elif gap > 0.2:
        builder.add("中程度の星差", 5)

    max_wins = max_possible_wins(ctx.day)
    if ctx.east_wins == max_wins and ctx.east_losses == 0:
        builder.add("東方力士の全勝記録", 15)
        if ctx.result is Result.WEST:
            builder.add("全勝記録が途絶えた", 10)
    if ctx.west_wins == max_wins and ctx.west_losses == 0:
        builder.add("西方力士の全勝記録", 15)
        if ctx.result is Result.EAST:
            builder.add("全勝記録が途絶えた", 10)


def _giant_killing_factor(
    builder: FactorBuilder,
    east_strength: float,
    west_strength: float,
    result: Result,
) -> None:
    lower_won = (east_strength > west_strength and result is Result.WEST) or (
        west_strength > east_strength and result is Result.EAST
    )
    if not lower_won:
        return
    gap = abs(east_strength - west_strength)
    if gap > 2:
        builder.add("大番狂わせ！下位力士の勝利", 25)
    elif gap > 1:
        builder.add("番狂わせ！下位力士の勝利", 15)
    else:
        builder.add("下位力士の勝利", 5)


def calculate_heat_score(ctx: MatchContext) -> ScoreResult:
    """Score a bout from 0 to 100 and explain which factors contributed.

    Starts from 50 and applies, in order: rank gap, high-rank prestige,
    tournament day, prior records (only when both sides have fought this
    tournament) and lower-rank victory. The total is clamped to 0..100.
    """
    east_strength = rank_strength(ctx.east_rank)
    west_strength = rank_strength(ctx.west_rank)

    builder = FactorBuilder()
    _rank_gap_factor(builder, abs(east_strength - west_strength))
    _prestige_factor(builder, (east_strength + west_strength) / 2)
    _day_factor(builder, ctx.day)
    _record_factor(builder, ctx)
    _giant_killing_factor(builder, east_strength, west_strength, ctx.result)

    raw = BASE_SCORE + builder.total
    score = int(round(min(MAX_SCORE, max(MIN_SCORE, raw))))
    factors = builder.build()

    logger.debug(
        "Heat score %d (raw %d, %d factors) for %s %s vs %s",
        score, raw, len(factors), ctx.day.value,
        ctx.east_rank.value, ctx.west_rank.value,
    )
    return ScoreResult(score=score, factors=factors, raw_score=raw)


def heat_verdict(score: int) -> str:
    """One-line verdict for a heat score."""
    for threshold, verdict in _VERDICTS:
        if score >= threshold:
            return verdict
    return _DEFAULT_VERDICT
