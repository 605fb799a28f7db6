"""SumoDB Results pages for every day up to the day being scored."""

import logging
import random
import re
import time
from pathlib import Path

import requests

from heatscore.models import Day
from heatscore.util import FetchError, InputError

logger = logging.getLogger(__name__)

SUMODB_URL = "https://sumodb.sumogames.de"
USER_AGENT = "heatscore/0.1 (+https://github.com/owner/heatscore)"
TIMEOUT = 30
RETRY_DELAYS = (1, 2)  # seconds waited before the 2nd and 3rd attempt
POLITE_DELAY = (0.5, 1.5)  # between two downloads

# Honbasho are held in odd months only
_BASHO_PATTERN = re.compile(r"^\d{4}(01|03|05|07|09|11)$")


def results_url(basho: str, day: int) -> str:
    """Results.aspx URL for one day of a basho (YYYYMM)."""
    if not _BASHO_PATTERN.match(basho):
        raise InputError(f"Not a honbasho YYYYMM: {basho!r}")
    Day.from_number(day)
    return f"{SUMODB_URL}/Results.aspx?b={basho}&d={day}"


def cache_file(cache_dir: Path, day: int) -> Path:
    """Per-day cache path, e.g. results_d03.html."""
    return cache_dir / f"results_d{day:02d}.html"


class ResultsFetcher:
    """Loads one basho's daily Results pages, from cache_dir when present.

    With ``cache_dir=None`` every page is downloaded and nothing is written.
    """

    def __init__(
        self,
        basho: str,
        cache_dir: Path | None = None,
        session: requests.Session | None = None,
    ) -> None:
        self.basho = basho
        self.cache_dir = cache_dir
        self.session = session or requests.Session()
        self.session.headers["User-Agent"] = USER_AGENT
        self.downloads = 0
        self.cache_hits = 0

    def day_page(self, day: int) -> str:
        """HTML for one day, read from cache or downloaded and cached."""
        url = results_url(self.basho, day)
        path = cache_file(self.cache_dir, day) if self.cache_dir else None
        if path and path.exists():
            self.cache_hits += 1
            logger.debug("Day %d from cache %s", day, path)
            return path.read_text(encoding="utf-8")

        html = self._download(url)
        if path:
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_text(html, encoding="utf-8")
        return html

    def _download(self, url: str) -> str:
        """GET with up to len(RETRY_DELAYS) retries on errors and non-200s."""
        if self.downloads:
            time.sleep(random.uniform(*POLITE_DELAY))
        self.downloads += 1

        attempts = len(RETRY_DELAYS) + 1
        reason = ""
        for attempt in range(1, attempts + 1):
            if attempt > 1:
                time.sleep(RETRY_DELAYS[attempt - 2])
            try:
                resp = self.session.get(url, timeout=TIMEOUT)
            except requests.RequestException as e:
                reason = f"connection error: {e}"
            else:
                if resp.status_code == 200:
                    return resp.text
                reason = f"HTTP {resp.status_code}"
            logger.warning("%s: %s (attempt %d/%d)", url, reason, attempt, attempts)

        raise FetchError(f"{url}: {reason} after {attempts} attempts")


def fetch_day_pages(
    basho: str,
    through: Day,
    cache_dir: Path | None = None,
    session: requests.Session | None = None,
) -> dict[int, str]:
    """Results HTML keyed by day number, for days 1 through ``through``."""
    fetcher = ResultsFetcher(basho, cache_dir, session)
    pages = {d: fetcher.day_page(d) for d in range(1, through.number + 1)}
    logger.info("Loaded %d result pages for basho %s (%d cached, %d downloaded)",
                len(pages), basho, fetcher.cache_hits, fetcher.downloads)
    return pages
