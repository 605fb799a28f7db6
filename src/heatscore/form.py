"""Bout input form: record capping, loss derivation and the result toggle."""

import logging
from dataclasses import dataclass, field

from heatscore.calculator import calculate_heat_score, max_possible_wins
from heatscore.models import Day, MatchContext, Rank, Result, ScoreResult
from heatscore.util import InputError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Awaiting:
    """No score computed yet; the form accepts edits."""


@dataclass(frozen=True)
class Computed:
    result: ScoreResult


FormState = Awaiting | Computed


@dataclass
class BoutForm:
    day: Day = Day.DAY_1
    east_rank: Rank = Rank.YOKOZUNA
    west_rank: Rank = Rank.YOKOZUNA
    east_wins: int = 0
    east_losses: int = 0
    west_wins: int = 0
    west_losses: int = 0
    result: Result = Result.EAST
    state: FormState = field(default_factory=Awaiting)

    @property
    def max_possible_wins(self) -> int:
        return max_possible_wins(self.day)

    def set_day(self, day: Day) -> None:
        """Change the day, clearing any record that no longer fits."""
        self.day = day
        cap = self.max_possible_wins
        if self.east_wins + self.east_losses > cap:
            logger.debug("East record %d-%d exceeds %d, reset",
                         self.east_wins, self.east_losses, cap)
            self.east_wins, self.east_losses = 0, 0
        if self.west_wins + self.west_losses > cap:
            logger.debug("West record %d-%d exceeds %d, reset",
                         self.west_wins, self.west_losses, cap)
            self.west_wins, self.west_losses = 0, 0

    def set_east_wins(self, wins: int) -> bool:
        """Set East wins; losses fill the remaining bouts. False if out of range."""
        if not 0 <= wins <= self.max_possible_wins:
            return False
        self.east_wins = wins
        self.east_losses = self.max_possible_wins - wins
        return True

    def set_west_wins(self, wins: int) -> bool:
        """West counterpart of set_east_wins."""
        if not 0 <= wins <= self.max_possible_wins:
            return False
        self.west_wins = wins
        self.west_losses = self.max_possible_wins - wins
        return True

    def set_east_record(self, wins: int, losses: int) -> None:
        self._check_record("East", wins, losses)
        self.east_wins, self.east_losses = wins, losses

    def set_west_record(self, wins: int, losses: int) -> None:
        self._check_record("West", wins, losses)
        self.west_wins, self.west_losses = wins, losses

    def _check_record(self, side: str, wins: int, losses: int) -> None:
        if wins < 0 or losses < 0:
            raise InputError(f"{side} record must not be negative: {wins}-{losses}")
        if wins + losses > self.max_possible_wins:
            raise InputError(
                f"{side} record {wins}-{losses} exceeds {self.max_possible_wins} "
                f"bouts possible before {self.day.value}"
            )

    def to_context(self) -> MatchContext:
        return MatchContext(
            day=self.day,
            east_rank=self.east_rank,
            west_rank=self.west_rank,
            east_wins=self.east_wins,
            east_losses=self.east_losses,
            west_wins=self.west_wins,
            west_losses=self.west_losses,
            result=self.result,
        )

    def calculate(self) -> ScoreResult:
        result = calculate_heat_score(self.to_context())
        self.state = Computed(result)
        return result

    def reset(self) -> None:
        """Discard the computed score and return to input."""
        self.state = Awaiting()
