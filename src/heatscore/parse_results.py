"""Results.aspx HTML parser and MatchContext building from parsed bouts."""

import logging
import re
from collections import defaultdict

from bs4 import BeautifulSoup, Tag

from heatscore.calculator import max_possible_wins
from heatscore.models import BoutRow, Day, MatchContext, Rank, Result
from heatscore.util import RankParseError

logger = logging.getLogger(__name__)

_RID_PATTERN = re.compile(r"Rikishi\.aspx\?r=(\d+)")

DIVISIONS = ["Makuuchi", "Juryo", "Makushita", "Sandanme", "Jonidan", "Jonokuchi"]
SCORED_DIVISION = "Makuuchi"


def parse_results_page(html: str, day: int) -> list[BoutRow]:
    """Parse one day's Results page into BoutRows, in page order."""
    soup = BeautifulSoup(html, "html.parser")
    rows: list[BoutRow] = []

    for table in soup.find_all("table", class_="tk_table"):
        division = _extract_division(table)
        if not division:
            continue

        bout_no = 0
        # Bout rows: tk_kekka, tk_east, tk_kim, tk_west, tk_kekka
        for tr in table.find_all("tr"):
            cells = tr.find_all("td")
            if len(cells) != 5:
                continue
            if "tk_kaku" in cells[0].get("class", []):
                continue

            bout_no += 1
            try:
                rows.append(_parse_bout_row(cells, day, division, bout_no))
            except Exception as e:
                logger.warning("Failed to parse bout %d in %s on day %d: %s",
                               bout_no, division, day, e)
                rows.append(BoutRow(
                    day=day, division=division, bout_no=bout_no,
                    east_rid=0, west_rid=0, east_shikona="", west_shikona="",
                    east_rank="", west_rank="", winner_side="", kimarite="",
                    result_type="unknown",
                ))

    logger.info("Parsed %d bouts from day %d", len(rows), day)
    return rows


def _extract_division(table: Tag) -> str | None:
    """Division name from the table header cell, None for non-bout tables."""
    header = table.find("td", class_="tk_kaku")
    if not header:
        return None
    text = header.get_text(strip=True)
    for name in DIVISIONS:
        if name in text:
            return name
    return text


def _parse_bout_row(cells: list[Tag], day: int, division: str, bout_no: int) -> BoutRow:
    """One five-cell bout row. A missing rikishi link marks the bout kyujo."""
    east_kekka, east_cell, kim_cell, west_cell, west_kekka = cells

    east_rid = _extract_rid(east_cell)
    west_rid = _extract_rid(west_cell)
    east_result = _detect_result(east_kekka)
    west_result = _detect_result(west_kekka)
    kimarite = _extract_kimarite(kim_cell)

    winner_side = ""
    if east_result in ("shiro", "fusensho"):
        winner_side = "E"
    elif west_result in ("shiro", "fusensho"):
        winner_side = "W"

    if east_rid == 0 or west_rid == 0:
        result_type = "kyujo"
        winner_side = ""
        kimarite = ""
    elif "fusensho" in (east_result, west_result) or "fusenpai" in (east_result, west_result):
        result_type = "fusen"
        kimarite = "fusen"
    elif winner_side:
        result_type = "normal"
    else:
        result_type = "unknown"

    return BoutRow(
        day=day, division=division, bout_no=bout_no,
        east_rid=east_rid, west_rid=west_rid,
        east_shikona=_extract_shikona(east_cell),
        west_shikona=_extract_shikona(west_cell),
        east_rank=_extract_rank(east_cell),
        west_rank=_extract_rank(west_cell),
        winner_side=winner_side, kimarite=kimarite,
        result_type=result_type,
    )


def _extract_rid(cell: Tag) -> int:
    """SumoDB rikishi id from the Rikishi.aspx link, 0 if absent."""
    link = cell.find("a", href=_RID_PATTERN)
    if link:
        m = _RID_PATTERN.search(link["href"])
        if m:
            return int(m.group(1))
    return 0


def _extract_shikona(cell: Tag) -> str:
    """Shikona as the link text."""
    link = cell.find("a", href=_RID_PATTERN)
    return link.get_text(strip=True) if link else ""


def _extract_rank(cell: Tag) -> str:
    """Rank code sits in the first <font size="1"> of a rikishi cell."""
    font = cell.find("font", attrs={"size": "1"})
    return font.get_text(strip=True) if font else ""


def _extract_kimarite(cell: Tag) -> str:
    """Kimarite is the first non-empty line, ahead of the bout time."""
    lines = [l for l in cell.get_text(separator="\n", strip=True).split("\n") if l]
    return lines[0] if lines else ""


def _detect_result(kekka_cell: Tag) -> str:
    """Result image: shiro, kuro, fusensho, fusenpai, or empty."""
    img = kekka_cell.find("img")
    if not img:
        return ""
    src = img.get("src", "")
    if "fusensho" in src:
        return "fusensho"
    if "fusenpai" in src:
        return "fusenpai"
    if "hoshi_shiro" in src:
        return "shiro"
    if "hoshi_kuro" in src:
        return "kuro"
    return ""


def accumulate_records(
    rows_by_day: dict[int, list[BoutRow]],
    before_day: int,
) -> dict[int, tuple[int, int]]:
    """Each rikishi's (wins, losses) over all bouts fought before ``before_day``.

    Bouts in every division count, fusen included; kyujo rows and rows
    without a winner are ignored, as are rows missing a rikishi id.
    """
    records: dict[int, list[int]] = defaultdict(lambda: [0, 0])
    for day, rows in rows_by_day.items():
        if day >= before_day:
            continue
        for r in rows:
            if r.result_type == "kyujo" or r.winner_side not in ("E", "W"):
                continue
            if r.east_rid == 0 or r.west_rid == 0:
                continue
            if r.winner_side == "E":
                records[r.east_rid][0] += 1
                records[r.west_rid][1] += 1
            else:
                records[r.west_rid][0] += 1
                records[r.east_rid][1] += 1
    return {rid: (wl[0], wl[1]) for rid, wl in records.items()}


def build_contexts(
    rows: list[BoutRow],
    records: dict[int, tuple[int, int]],
    day: Day,
) -> list[tuple[BoutRow, MatchContext]]:
    """Pair each decided Makuuchi bout with the MatchContext to score it."""
    cap = max_possible_wins(day)
    contexts: list[tuple[BoutRow, MatchContext]] = []

    for r in rows:
        if r.division != SCORED_DIVISION or r.winner_side not in ("E", "W"):
            continue
        try:
            east_rank = Rank.parse(r.east_rank)
            west_rank = Rank.parse(r.west_rank)
        except RankParseError as e:
            logger.debug("Skipping bout %d (%s vs %s): %s",
                         r.bout_no, r.east_shikona, r.west_shikona, e)
            continue

        east_wins, east_losses = records.get(r.east_rid, (0, 0))
        west_wins, west_losses = records.get(r.west_rid, (0, 0))
        if east_wins + east_losses > cap or west_wins + west_losses > cap:
            logger.warning(
                "Skipping bout %d (%s vs %s): record %d-%d / %d-%d exceeds %d bouts",
                r.bout_no, r.east_shikona, r.west_shikona,
                east_wins, east_losses, west_wins, west_losses, cap,
            )
            continue

        contexts.append((r, MatchContext(
            day=day,
            east_rank=east_rank,
            west_rank=west_rank,
            east_wins=east_wins,
            east_losses=east_losses,
            west_wins=west_wins,
            west_losses=west_losses,
            result=Result.EAST if r.winner_side == "E" else Result.WEST,
        )))

    logger.info("Built %d scorable %s bouts for %s", len(contexts),
                SCORED_DIVISION, day.value)
    return contexts
