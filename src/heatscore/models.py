"""Data models."""

import re
from dataclasses import dataclass
from enum import Enum

from heatscore.util import DayParseError, InputError, RankParseError

_MAEGASHIRA_PATTERN = re.compile(r"^前頭\s*(\d+)\s*枚目$")
# SumoDB rank codes: Y1e, O1w, S2e, K1w, M15e (number and side optional)
_SUMODB_RANK_PATTERN = re.compile(r"^(Y|O|S|K|M)(\d+)?([ew])?$")
_DAY_PATTERN = re.compile(r"^(\d+)\s*(?:日目)?$")

_SUMODB_SANYAKU = {"Y": "横綱", "O": "大関", "S": "関脇", "K": "小結"}


class Rank(str, Enum):
    YOKOZUNA = "横綱"
    OZEKI = "大関"
    SEKIWAKE = "関脇"
    KOMUSUBI = "小結"
    MAEGASHIRA_1 = "前頭1枚目"
    MAEGASHIRA_2 = "前頭2枚目"
    MAEGASHIRA_3 = "前頭3枚目"
    MAEGASHIRA_4 = "前頭4枚目"
    MAEGASHIRA_5 = "前頭5枚目"
    MAEGASHIRA_6 = "前頭6枚目"
    MAEGASHIRA_7 = "前頭7枚目"
    MAEGASHIRA_8 = "前頭8枚目"
    MAEGASHIRA_9 = "前頭9枚目"
    MAEGASHIRA_10 = "前頭10枚目"
    MAEGASHIRA_11 = "前頭11枚目"
    MAEGASHIRA_12 = "前頭12枚目"
    MAEGASHIRA_13 = "前頭13枚目"
    MAEGASHIRA_14 = "前頭14枚目"
    MAEGASHIRA_15 = "前頭15枚目"

    @property
    def maegashira_number(self) -> int | None:
        m = _MAEGASHIRA_PATTERN.match(self.value)
        return int(m.group(1)) if m else None

    @classmethod
    def maegashira(cls, number: int) -> "Rank":
        try:
            return cls(f"前頭{number}枚目")
        except ValueError:
            raise RankParseError(f"No such maegashira rank: {number}") from None

    @classmethod
    def parse(cls, label: str) -> "Rank":
        """Resolve a banzuke label or a SumoDB rank code to a Rank.

        Accepts the exact labels, 前頭N枚目 with stray spaces or full-width
        digits, and SumoDB codes such as ``Y1e`` or ``M15w``.
        """
        text = (label or "").strip()
        try:
            return cls(text)
        except ValueError:
            pass

        m = _MAEGASHIRA_PATTERN.match(text)
        if m:
            return cls.maegashira(int(m.group(1)))

        m = _SUMODB_RANK_PATTERN.match(text)
        if m:
            tier, number = m.group(1), m.group(2)
            if tier in _SUMODB_SANYAKU:
                return cls(_SUMODB_SANYAKU[tier])
            if number:
                return cls.maegashira(int(number))

        raise RankParseError(f"Unknown rank: {label!r}")


class Day(str, Enum):
    DAY_1 = "初日"
    DAY_2 = "2日目"
    DAY_3 = "3日目"
    DAY_4 = "4日目"
    DAY_5 = "5日目"
    DAY_6 = "6日目"
    DAY_7 = "7日目"
    DAY_8 = "中日"
    DAY_9 = "9日目"
    DAY_10 = "10日目"
    DAY_11 = "11日目"
    DAY_12 = "12日目"
    DAY_13 = "13日目"
    DAY_14 = "14日目"
    DAY_15 = "千秋楽"

    @property
    def number(self) -> int:
        if self is Day.DAY_1:
            return 1
        if self is Day.DAY_8:
            return 8
        if self is Day.DAY_15:
            return 15
        return int(self.value.replace("日目", ""))

    @classmethod
    def from_number(cls, number: int) -> "Day":
        for day in cls:
            if day.number == number:
                return day
        raise DayParseError(f"Tournament day out of range: {number}")

    @classmethod
    def parse(cls, label: str) -> "Day":
        """Resolve a day label (初日, 中日, 千秋楽, N日目) or a bare day number."""
        text = (label or "").strip()
        try:
            return cls(text)
        except ValueError:
            pass

        m = _DAY_PATTERN.match(text)
        if not m:
            raise DayParseError(f"Unknown day: {label!r}")
        return cls.from_number(int(m.group(1)))


class Result(str, Enum):
    EAST = "東方力士勝利"
    WEST = "西方力士勝利"

    @classmethod
    def parse(cls, label: str) -> "Result":
        text = (label or "").strip()
        try:
            return cls(text)
        except ValueError:
            pass
        key = text.lower()
        if key in ("e", "east", "東"):
            return cls.EAST
        if key in ("w", "west", "西"):
            return cls.WEST
        raise InputError(f"Unknown result: {label!r}")


@dataclass(frozen=True)
class MatchContext:
    day: Day
    east_rank: Rank
    west_rank: Rank
    east_wins: int
    east_losses: int
    west_wins: int
    west_losses: int
    result: Result


@dataclass(frozen=True)
class Factor:
    label: str
    delta: int

    def __str__(self) -> str:
        return f"{self.label} (+{self.delta})"


@dataclass(frozen=True)
class ScoreResult:
    score: int  # 0..100
    factors: tuple[Factor, ...]
    raw_score: int  # before clamping

    @property
    def explanation(self) -> str:
        return "\n".join(str(f) for f in self.factors)


@dataclass
class BoutRow:
    day: int
    division: str
    bout_no: int
    east_rid: int
    west_rid: int
    east_shikona: str
    west_shikona: str
    east_rank: str  # SumoDB code, e.g. "O1e"
    west_rank: str
    winner_side: str  # "E" / "W" / ""
    kimarite: str
    result_type: str  # normal / fusen / kyujo / unknown
