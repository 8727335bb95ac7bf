import logging
import re
from dataclasses import dataclass, replace
from datetime import datetime, timedelta
from typing import Optional

from bulletin_config import BulletinConfig
from utils import (
    is_cancelled,
    is_footnote_line,
    is_structural_noise,
    truncate_footnote,
    with_location,
)


@dataclass
class EventDraft:
    summary: str = ""
    location: str = ""
    start: Optional[datetime] = None
    end: Optional[datetime] = None
    is_all_day: bool = False
    description: str = ""

    def replace(self, **changes):
        """Copy with whole fields replaced. Unknown field names raise TypeError."""
        return replace(self, **changes)


# --- Parser states ---
# Seeking: no date header seen yet
# InDay:   a date is current, no event open
# InEvent: a date is current and one event draft is open

@dataclass(frozen=True)
class Seeking:
    pass


@dataclass(frozen=True)
class InDay:
    date: datetime


@dataclass(frozen=True)
class InEvent:
    date: datetime
    draft: EventDraft


class BulletinGrammar:
    """Regexes and helpers compiled from a BulletinConfig for one parse run."""

    def __init__(self, config, year, is_noise=None):
        self.config = config
        self.year = year
        self.is_noise = is_noise or (lambda line: is_structural_noise(line, config))

        weekdays = "|".join(re.escape(d) for d in config.weekdays)
        locations = "|".join(re.escape(loc) for loc in config.locations)

        # "Donnerstag 01.01."
        self.date_pattern = re.compile(rf"(?:{weekdays})\s+(\d{{1,2}}\.\d{{1,2}}\.)", re.IGNORECASE)
        # "Steinfeld 18:00 Messfeier ..."
        self.event_pattern = re.compile(rf"^({locations})\s+(\d{{1,2}}[:.]\d{{2}})\s*(.*)", re.IGNORECASE)

        self.canonical_locations = {loc.lower(): loc.strip() for loc in config.locations}
        self.duration = timedelta(minutes=config.event_duration_minutes)

    def placeholder(self, location):
        return with_location(self.config.placeholder_summary, location)


def parse_date_header(line, grammar):
    """Return the header's date, or None if the line is not a valid header."""
    match = grammar.date_pattern.search(line)
    if not match:
        return None
    try:
        return datetime.strptime(f"{match.group(1)}{grammar.year}", grammar.config.date_format)
    except ValueError:
        return None


def start_event(date, line, grammar):
    """Build a new draft from an event-start line, or None if the line isn't one."""
    match = grammar.event_pattern.match(line)
    if not match:
        return None

    hours, minutes = (int(p) for p in match.group(2).replace(".", ":").split(":"))
    if hours > 23 or minutes > 59:
        return None

    location = grammar.canonical_locations.get(match.group(1).lower(), match.group(1).strip())
    trailing = match.group(3).strip()
    cancelled = is_cancelled(trailing, grammar.config.cancel_keywords)

    text = truncate_footnote(trailing, grammar.config.footnote_splitters)
    summary = with_location(text, location) if text else grammar.placeholder(location)

    if cancelled:
        start = date.replace(hour=0, minute=0, second=0, microsecond=0)
        end = start + timedelta(days=1)
    else:
        start = date.replace(hour=hours, minute=minutes, second=0, microsecond=0)
        end = start + grammar.duration

    return EventDraft(
        summary=summary,
        location=location,
        start=start,
        end=end,
        is_all_day=cancelled,
        description="",
    )


def continue_event(draft, line, grammar):
    """Absorb a continuation line into the open draft."""
    if grammar.is_noise(line):
        return draft
    if is_footnote_line(line, grammar.config.footnote_prefixes):
        return draft

    text = truncate_footnote(line, grammar.config.footnote_splitters)
    if not text:
        return draft

    if draft.summary == grammar.placeholder(draft.location):
        return draft.replace(summary=with_location(text, draft.location))
    return draft.replace(description=f"{draft.description} {text}".strip())


def step(state, line, grammar, logger=None):
    """
    Apply one line to the parser state.
    Returns (new_state, finished_draft_or_None). First matching rule wins.
    """
    log = logger or logging.getLogger(__name__)

    if grammar.date_pattern.search(line):
        date = parse_date_header(line, grammar)
        if date is None:
            log.debug("Ignoring malformed date header: %s", line)
            return state, None
        log.debug("Found date: %s", date.strftime("%Y-%m-%d"))
        finished = state.draft if isinstance(state, InEvent) else None
        return InDay(date), finished

    if isinstance(state, Seeking):
        return state, None

    draft = start_event(state.date, line, grammar)
    if draft is not None:
        log.debug("Found event start: %s", line)
        finished = state.draft if isinstance(state, InEvent) else None
        return InEvent(state.date, draft), finished

    if isinstance(state, InEvent):
        return InEvent(state.date, continue_event(state.draft, line, grammar)), None
    return state, None


def parse_lines(lines, year, config=None, is_noise=None, logger=None):
    """
    Turn reconstructed lines into event drafts, in document order.

    `lines` may hold Line objects or plain strings. Unrecognised lines are
    skipped or absorbed as description text, this never raises on content.
    Overlaps are not touched here, see utils.resolve_overlaps().
    """
    log = logger or logging.getLogger(__name__)
    grammar = BulletinGrammar(config or BulletinConfig(), year, is_noise)

    events = []
    state = Seeking()
    for raw in lines:
        line = getattr(raw, "text", raw).strip()
        if not line:
            continue
        state, finished = step(state, line, grammar, log)
        if finished is not None:
            events.append(finished)

    if isinstance(state, InEvent):
        events.append(state.draft)

    log.debug("Total events found: %d", len(events))
    return events
