from dataclasses import dataclass
from functools import cmp_to_key

LINE_TOLERANCE = 5.0


@dataclass(frozen=True)
class TextRun:
    """One positioned fragment of page text (PDF space, y grows upwards)."""
    content: str
    x: float
    y: float


@dataclass(frozen=True)
class Line:
    text: str
    y: float


def sort_runs(runs, tolerance=LINE_TOLERANCE):
    """Top to bottom; runs on the same row (within tolerance) left to right."""
    def compare(a, b):
        if abs(a.y - b.y) < tolerance:
            return (a.x > b.x) - (a.x < b.x)
        return (b.y > a.y) - (b.y < a.y)

    return sorted(runs, key=cmp_to_key(compare))


def build_page_lines(runs, tolerance=LINE_TOLERANCE):
    """Group one page's text runs into visual lines."""
    lines = []
    if not runs:
        return lines

    ordered = sort_runs(runs, tolerance)
    buffer = ""
    anchor_y = ordered[0].y

    for run in ordered:
        if abs(run.y - anchor_y) > tolerance:
            if buffer.strip():
                lines.append(Line(buffer.strip(), anchor_y))
            buffer = run.content
            anchor_y = run.y
        else:
            buffer += " " + run.content

    if buffer.strip():
        lines.append(Line(buffer.strip(), anchor_y))
    return lines


def build_lines(pages, tolerance=LINE_TOLERANCE):
    """
    Reconstruct lines for a whole document.

    `pages` is an iterable of run lists in page order; it is consumed lazily,
    one page at a time.
    """
    lines = []
    for runs in pages:
        lines.extend(build_page_lines(runs, tolerance))
    return lines
