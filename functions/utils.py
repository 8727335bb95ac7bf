import hashlib
import logging
import re

_DIGITS_ONLY = re.compile(r"^\d+$")


def truncate_footnote(text, splitters):
    """
    Drop everything from the first footnote marker onwards.
    'Messfeier f. verstorbene Eltern' -> 'Messfeier'
    """
    if not text:
        return ""
    for pattern in splitters:
        text = re.split(pattern, text, maxsplit=1, flags=re.IGNORECASE)[0]
    return text.strip()


def is_footnote_line(line, prefixes):
    return any(re.match(p, line, re.IGNORECASE) for p in prefixes)


def is_cancelled(text, keywords):
    lowered = (text or "").lower()
    return any(k.lower() in lowered for k in keywords)


def is_structural_noise(line, config):
    """
    Page headers, long dashed dividers and bare page numbers.
    Pass a different callable to parse_lines() to tune this for another template.
    """
    if any(marker in line for marker in config.header_markers):
        return True
    # Heuristic for long divider lines
    if "-" in line and len(line) > config.divider_min_length:
        return True
    return bool(_DIGITS_ONLY.match(line))


def with_location(text, location):
    return f"{text} ({location})"


def resolve_overlaps(events, logger=None):
    """
    If an event ends after the next one starts, shorten it.

    Single forward pass over adjacent pairs, events are edited in place and
    the same list is returned. Pairs with a missing timestamp are left alone,
    and a pair is only clamped when the later event does not start before
    the earlier one. A clamped all-day marker keeps is_all_day but ends early.
    """
    log = logger or logging.getLogger(__name__)

    for current, nxt in zip(events, events[1:]):
        if not (current.start and current.end and nxt.start):
            continue
        if nxt.start < current.start:
            continue
        if current.end > nxt.start:
            log.debug(
                "Adjusting overlap: %s ends at %s, next starts at %s",
                current.summary, current.end.strftime("%H:%M"), nxt.start.strftime("%H:%M"),
            )
            current.end = nxt.start

    return events


def event_doc_id(event):
    """Deterministic ID from date, location and summary."""
    start = event.start.isoformat() if event.start else ""
    unique_str = f"{start}|{event.location or ''}|{(event.summary or '').strip()}"
    event_hash = hashlib.md5(unique_str.encode()).hexdigest()[:12]
    return f"event_{event_hash}"
