"""Plain-text rendering of a heat score."""

from heatscore.calculator import MAX_SCORE, heat_verdict
from heatscore.models import ScoreResult

BAR_WIDTH = 20


def progress_bar(score: int, width: int = BAR_WIDTH) -> str:
    filled = round(width * score / MAX_SCORE)
    return "[" + "#" * filled + "." * (width - filled) + "]"


def format_result(result: ScoreResult, title: str = "") -> str:
    """Render score bar, verdict and the factor list, one factor per line."""
    lines = []
    if title:
        lines.append(title)
    lines.append(f"{progress_bar(result.score)} {result.score} / {MAX_SCORE}")
    lines.append(heat_verdict(result.score))
    lines.append("熱量スコア計算要素:")
    lines.extend(f"  {f}" for f in result.factors)
    return "\n".join(lines)
