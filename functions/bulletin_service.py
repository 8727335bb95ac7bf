"""
Bulletin PDF -> calendar events pipeline.

    bytes -> text runs per page -> lines -> event drafts -> overlap-free events

Shared by the Firebase functions in main.py and the local debug script.
"""
import logging

from bulletin_config import BulletinConfig
from ics_export import to_ics
from line_builder import build_lines
from parser_bulletin import parse_lines
from pdf_reader import read_text_runs
from utils import event_doc_id, resolve_overlaps


def extract_events(lines, year, config=None, is_noise=None, logger=None):
    """Parse reconstructed lines and repair overlapping time ranges."""
    events = parse_lines(lines, year, config=config, is_noise=is_noise, logger=logger)
    return resolve_overlaps(events, logger=logger)


def read_lines(source, config=None, logger=None):
    config = config or BulletinConfig()
    pages = read_text_runs(source, logger=logger)
    return build_lines(pages, tolerance=config.line_tolerance)


def convert_pdf(source, year, config=None, logger=None):
    """
    Full pipeline for one document. Raises pdf_reader.BulletinReadError if the
    PDF can't be read, otherwise always returns a (possibly empty) list.
    """
    log = logger or logging.getLogger(__name__)
    config = config or BulletinConfig()

    lines = read_lines(source, config, log)
    log.debug("Extracted %d lines", len(lines))
    return extract_events(lines, year, config=config, logger=log)


def event_to_dict(evt):
    return {
        "docId": event_doc_id(evt),
        "summary": evt.summary,
        "location": evt.location,
        "start": evt.start.isoformat() if evt.start else None,
        "end": evt.end.isoformat() if evt.end else None,
        "isAllDay": evt.is_all_day,
        "description": evt.description,
        "type": "BULLETIN_EVENT",
    }


def events_to_dicts(events):
    return [event_to_dict(e) for e in events]


def convert_pdf_to_payload(source, year, config=None, logger=None):
    """Events as JSON-safe dicts plus the ICS text, as returned by the callable."""
    config = config or BulletinConfig()
    events = convert_pdf(source, year, config=config, logger=logger)
    return {
        "success": True,
        "count": len(events),
        "events": events_to_dicts(events),
        "ics": to_ics(events, config, logger),
    }
