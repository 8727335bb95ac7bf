from datetime import datetime, timedelta

from bulletin_config import BulletinConfig
from parser_bulletin import EventDraft, parse_lines
from utils import (
    event_doc_id,
    is_cancelled,
    is_footnote_line,
    is_structural_noise,
    resolve_overlaps,
    truncate_footnote,
)

SPLITTERS = BulletinConfig().footnote_splitters
PREFIXES = BulletinConfig().footnote_prefixes


def _event(start, minutes=60, all_day=False):
    return EventDraft(summary="x", location="Hausen", start=start, end=start + timedelta(minutes=minutes), is_all_day=all_day)


def test_truncate_footnote():
    assert truncate_footnote("Messfeier f. verstorbene Eltern", SPLITTERS) == "Messfeier"
    assert truncate_footnote("Messfeier F verstorbene Eltern", SPLITTERS) == "Messfeier"
    assert truncate_footnote("Messe für die Gemeinde", SPLITTERS) == "Messe"
    assert truncate_footnote("Familiengottesdienst", SPLITTERS) == "Familiengottesdienst"
    assert truncate_footnote("", SPLITTERS) == ""


def test_footnote_line():
    assert is_footnote_line("f. verstorbene Eltern", PREFIXES)
    assert is_footnote_line("für die Pfarrgemeinde", PREFIXES)
    assert not is_footnote_line("frohe Feier", PREFIXES)


def test_is_cancelled():
    keywords = BulletinConfig().cancel_keywords
    assert is_cancelled("Messe Entfällt", keywords)
    assert is_cancelled("Messe entfallt heute", keywords)
    assert not is_cancelled("Messe", keywords)
    assert not is_cancelled(None, keywords)


def test_structural_noise():
    config = BulletinConfig()
    assert is_structural_noise("S t e i n f e l d", config)
    assert is_structural_noise("- - - - - - - - - - - - - -", config)
    assert is_structural_noise("17", config)
    assert not is_structural_noise("Kinder-Gottesdienst", config)
    assert not is_structural_noise("mit Chor", config)


def test_overlap_is_clamped_to_next_start():
    day = datetime(2024, 1, 7)
    events = parse_lines(["Sonntag 07.01.", "Steinfeld 9:00 Messe", "Hausen 9.30 Andacht"], 2024)
    resolve_overlaps(events)
    assert events[0].end == day.replace(hour=9, minute=30)
    assert events[1].end == day.replace(hour=10, minute=30)


def test_non_overlapping_events_untouched():
    a = _event(datetime(2024, 1, 7, 9))
    b = _event(datetime(2024, 1, 7, 11))
    resolve_overlaps([a, b])
    assert a.end == datetime(2024, 1, 7, 10)


def test_only_adjacent_pairs_are_compared():
    a = _event(datetime(2024, 1, 7, 9), minutes=180)
    b = _event(datetime(2024, 1, 7, 10))
    c = _event(datetime(2024, 1, 7, 10, 30))
    events = resolve_overlaps([a, b, c])
    assert [e.end for e in events] == [
        datetime(2024, 1, 7, 10),
        datetime(2024, 1, 7, 10, 30),
        datetime(2024, 1, 7, 11, 30),
    ]
    for cur, nxt in zip(events, events[1:]):
        assert cur.end <= nxt.start


def test_missing_timestamps_are_skipped():
    a = EventDraft(summary="no times")
    b = _event(datetime(2024, 1, 7, 9))
    c = EventDraft(summary="start only", start=datetime(2024, 1, 7, 9, 30))
    events = resolve_overlaps([a, b, c])
    assert len(events) == 3
    assert b.end == datetime(2024, 1, 7, 9, 30)
    assert a.end is None


def test_all_day_marker_is_clamped_to_next_start():
    cancelled = _event(datetime(2024, 1, 7), minutes=24 * 60, all_day=True)
    timed = _event(datetime(2024, 1, 7, 9))
    resolve_overlaps([cancelled, timed])
    assert cancelled.end == datetime(2024, 1, 7, 9)
    assert cancelled.start == datetime(2024, 1, 7)
    assert timed.end == datetime(2024, 1, 7, 10)


def test_earlier_next_start_does_not_invert_event():
    a = _event(datetime(2024, 1, 7, 18))
    b = _event(datetime(2024, 1, 6, 9))
    resolve_overlaps([a, b])
    assert a.end == datetime(2024, 1, 7, 19)


def test_resolver_is_idempotent():
    events = parse_lines(
        ["Sonntag 07.01.", "Steinfeld 9:00 Messe", "Hausen 9.30 Andacht", "Waldzell 9:45 Laudes"], 2024
    )
    once = [e.replace() for e in resolve_overlaps(events)]
    twice = resolve_overlaps([e.replace() for e in once])
    assert once == twice


def test_empty_and_single():
    assert resolve_overlaps([]) == []
    single = [_event(datetime(2024, 1, 7, 9))]
    assert resolve_overlaps(single) == single


def test_event_doc_id_is_stable():
    a = _event(datetime(2024, 1, 7, 9))
    b = _event(datetime(2024, 1, 7, 9))
    assert event_doc_id(a) == event_doc_id(b)
    assert event_doc_id(a).startswith("event_")
    assert event_doc_id(a) != event_doc_id(_event(datetime(2024, 1, 7, 10)))
