import logging
from datetime import timedelta
from zoneinfo import ZoneInfo

from ics import Calendar, Event

from bulletin_config import BulletinConfig
from utils import event_doc_id

UID_DOMAIN = "bulletin.local"


def build_events(events, config=None, logger=None):
    """
    ics Events for the given drafts, in the same order.
    Events without start or end can't be serialized and are skipped.
    """
    config = config or BulletinConfig()
    log = logger or logging.getLogger(__name__)
    tzinfo = ZoneInfo(config.timezone)

    result = []
    skipped = 0
    for evt in events:
        if not evt.start or not evt.end:
            skipped += 1
            continue

        ev = Event()
        ev.name = evt.summary or ""
        ev.location = evt.location or ""
        ev.description = evt.description or ""
        ev.status = "CONFIRMED"
        ev.uid = f"{event_doc_id(evt)}@{UID_DOMAIN}"

        ev.begin = _localize(evt.start, tzinfo)
        if evt.is_all_day and evt.end - evt.start >= timedelta(days=1):
            # make_all_day() spans exactly the begin date
            ev.make_all_day()
        else:
            # also all-day markers the overlap pass shortened
            ev.end = _localize(evt.end, tzinfo)
        result.append(ev)

    if skipped:
        log.debug("Skipped %d events without start/end", skipped)
    return result


def build_calendar(events, config=None, logger=None):
    cal = Calendar()
    for ev in build_events(events, config, logger):
        cal.events.add(ev)
    return cal


def to_ics(events, config=None, logger=None):
    """
    Serialize events to iCalendar text (CRLF line endings).

    Calendar.events is a set, so every event is serialized on its own and
    the VEVENT blocks are written in document order.
    """
    lines = _serialize_lines(Calendar())
    footer = lines.pop()  # END:VCALENDAR

    for ev in build_events(events, config, logger):
        single = Calendar()
        single.events.add(ev)
        block = _serialize_lines(single)
        start = block.index("BEGIN:VEVENT")
        end = block.index("END:VEVENT", start)
        lines.extend(block[start:end + 1])

    lines.append(footer)
    return "\r\n".join(lines) + "\r\n"


def _serialize_lines(cal):
    text = "".join(cal.serialize_iter())
    return [line for line in text.splitlines() if line]


def _localize(value, tzinfo):
    if value.tzinfo is None:
        return value.replace(tzinfo=tzinfo)
    return value
