"""CLI entry point: score one bout from flags, or every Makuuchi bout of a day."""

import argparse
import logging
import sys
from pathlib import Path

from heatscore.calculator import calculate_heat_score
from heatscore.fetch import fetch_day_pages
from heatscore.form import BoutForm
from heatscore.models import BoutRow, Day, Rank, Result
from heatscore.parse_results import accumulate_records, build_contexts, parse_results_page
from heatscore.report import format_result
from heatscore.util import HeatscoreError, InputError

logger = logging.getLogger("heatscore")


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="heatscore",
        description="Compute the heat (excitement) score of a sumo bout.",
    )
    parser.add_argument(
        "--log-level", choices=["INFO", "DEBUG"], default="INFO",
        help="Logging level (default: INFO)",
    )
    sub = parser.add_subparsers(dest="command", required=True)

    bout = sub.add_parser("bout", help="Score a single bout from its conditions")
    bout.add_argument("--day", required=True, help="初日, 2日目 .. 14日目, 中日, 千秋楽 or 1-15")
    bout.add_argument("--east-rank", required=True, help="横綱, 大関, 関脇, 小結 or 前頭N枚目")
    bout.add_argument("--west-rank", required=True, help="横綱, 大関, 関脇, 小結 or 前頭N枚目")
    bout.add_argument("--east-wins", type=int, default=0)
    bout.add_argument(
        "--east-losses", type=int, default=None,
        help="Default: bouts so far minus wins",
    )
    bout.add_argument("--west-wins", type=int, default=0)
    bout.add_argument(
        "--west-losses", type=int, default=None,
        help="Default: bouts so far minus wins",
    )
    bout.add_argument("--result", required=True, help="east / west (or 東方力士勝利 / 西方力士勝利)")

    day = sub.add_parser("day", help="Score every Makuuchi bout of a SumoDB results day")
    day.add_argument(
        "--basho", required=True,
        help="Target basho in YYYYMM format (e.g. 202601)",
    )
    day.add_argument("--day", type=int, required=True, help="Tournament day 1-15")
    day.add_argument(
        "--raw-cache", choices=["on", "off"], default="on",
        help="HTML cache mode (default: on)",
    )
    return parser


def _setup_logging(level: str) -> None:
    logging.basicConfig(
        level=getattr(logging, level),
        format="%(asctime)s %(levelname)s %(name)s %(message)s",
        stream=sys.stderr,
    )


def _project_root() -> Path:
    """Find project root (directory containing pyproject.toml or data/)."""
    p = Path.cwd()
    for _ in range(10):
        if (p / "pyproject.toml").exists() or (p / "data").is_dir():
            return p
        if p.parent == p:
            break
        p = p.parent
    return Path.cwd()


def _set_record(form: BoutForm, side: str, wins: int, losses: int | None) -> None:
    if losses is None:
        setter = form.set_east_wins if side == "East" else form.set_west_wins
        if not setter(wins):
            raise InputError(
                f"{side} wins {wins} out of range 0..{form.max_possible_wins}"
            )
    elif side == "East":
        form.set_east_record(wins, losses)
    else:
        form.set_west_record(wins, losses)


def run_bout(args: argparse.Namespace) -> str:
    form = BoutForm()
    form.set_day(Day.parse(args.day))
    form.east_rank = Rank.parse(args.east_rank)
    form.west_rank = Rank.parse(args.west_rank)
    _set_record(form, "East", args.east_wins, args.east_losses)
    _set_record(form, "West", args.west_wins, args.west_losses)
    form.result = Result.parse(args.result)

    result = form.calculate()
    title = (f"{form.day.value} {form.east_rank.value} vs {form.west_rank.value}"
             f" ({form.result.value})")
    return format_result(result, title=title)


def run_day(args: argparse.Namespace) -> str:
    day = Day.from_number(args.day)
    cache_dir = None
    if args.raw_cache == "on":
        cache_dir = _project_root() / "data" / "raw" / f"honbasho-{args.basho}"

    pages = fetch_day_pages(args.basho, day, cache_dir)
    rows_by_day: dict[int, list[BoutRow]] = {
        d: parse_results_page(html, d) for d, html in pages.items()
    }

    records = accumulate_records(rows_by_day, day.number)
    blocks = []
    for row, ctx in build_contexts(rows_by_day[day.number], records, day):
        result = calculate_heat_score(ctx)
        title = (
            f"#{row.bout_no} {row.east_shikona} ({row.east_rank} "
            f"{ctx.east_wins}-{ctx.east_losses}) vs {row.west_shikona} "
            f"({row.west_rank} {ctx.west_wins}-{ctx.west_losses}) "
            f"winner={row.winner_side} {row.kimarite}"
        )
        blocks.append(format_result(result, title=title))
    logger.info("Scored %d bouts for basho=%s day=%d", len(blocks), args.basho, day.number)
    return "\n\n".join(blocks)


def main(argv: list[str] | None = None) -> None:
    parser = _build_parser()
    args = parser.parse_args(argv)

    _setup_logging(args.log_level)

    try:
        if args.command == "bout":
            output = run_bout(args)
        else:
            output = run_day(args)
    except HeatscoreError as e:
        logger.error("Fatal error: %s", e)
        sys.exit(1)
    except Exception as e:
        logger.error("Unexpected error: %s", e, exc_info=True)
        sys.exit(1)

    print(output)
