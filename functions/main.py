import firebase_admin
from firebase_admin import firestore, storage
from firebase_functions import https_fn, storage_fn, options
from datetime import datetime
import base64
import binascii
import logging
import os
import re

from bulletin_config import BulletinConfig
from bulletin_service import convert_pdf, convert_pdf_to_payload
from ics_export import to_ics
from pdf_reader import BulletinReadError

firebase_admin.initialize_app()

BULLETIN_FOLDER = "bulletins"
CALENDAR_FOLDER = "calendars"


def _get_bulletin_config():
    """Template overrides from Firestore config/bulletin, defaults if missing."""
    db = firestore.client()
    doc = db.collection('config').document('bulletin').get()
    if doc.exists:
        return BulletinConfig.from_dict(doc.to_dict())
    return BulletinConfig()


def _parse_year(value):
    try:
        year = int(value)
    except (TypeError, ValueError):
        return None
    if 1900 <= year <= 2200:
        return year
    return None


@https_fn.on_call(memory=options.MemoryOption.MB_512, timeout_sec=120)
def convert_bulletin(req: https_fn.CallableRequest):
    """
    Converts a bulletin PDF (base64) into calendar events.
    Request Data:
      - file_base64: str
      - year: int
    """
    file_base64 = req.data.get('file_base64')
    year = _parse_year(req.data.get('year'))

    if not file_base64 or year is None:
        raise https_fn.HttpsError(
            https_fn.FunctionsErrorCode.INVALID_ARGUMENT,
            "file_base64 and a valid year are required."
        )

    try:
        pdf_bytes = base64.b64decode(file_base64, validate=True)
    except (binascii.Error, ValueError):
        raise https_fn.HttpsError(
            https_fn.FunctionsErrorCode.INVALID_ARGUMENT,
            "file_base64 is not valid base64."
        )

    try:
        config = _get_bulletin_config()
        result = convert_pdf_to_payload(pdf_bytes, year, config)
        logging.info(f"Converted bulletin for {year}: {result['count']} events")
        return result
    except BulletinReadError as e:
        logging.exception("Bulletin could not be read")
        raise https_fn.HttpsError(https_fn.FunctionsErrorCode.INVALID_ARGUMENT, str(e))
    except ValueError as e:
        logging.exception("Invalid bulletin config")
        raise https_fn.HttpsError(https_fn.FunctionsErrorCode.FAILED_PRECONDITION, str(e))
    except Exception as e:
        logging.exception("Bulletin conversion failed")
        raise https_fn.HttpsError(https_fn.FunctionsErrorCode.INTERNAL, str(e))


@storage_fn.on_object_finalized(region="us-central1", memory=options.MemoryOption.MB_512, timeout_sec=120)
def process_uploaded_bulletin(event: storage_fn.CloudEvent[storage_fn.StorageObjectData]):
    """
    Storage trigger: /bulletins/<name>.pdf -> /calendars/<name>.ics
    Year is taken from the filename ("Pfarrbrief KW 3 2025.pdf"), else the current year.
    """
    file_path = event.data.name
    folder = os.path.dirname(file_path)
    filename = os.path.basename(file_path)

    if BULLETIN_FOLDER not in folder.lower() or not filename.lower().endswith('.pdf'):
        return

    logging.info(f"Processing upload: {file_path}")

    match = re.search(r"(?<!\d)((?:19|20|21)\d{2})(?!\d)", filename)
    year = int(match.group(1)) if match else datetime.now().year

    bucket = storage.bucket(event.data.bucket)
    local_path = f"/tmp/{filename}"
    bucket.blob(file_path).download_to_filename(local_path)

    try:
        config = _get_bulletin_config()
        events = convert_pdf(local_path, year, config)
        ics_text = to_ics(events, config)

        target = f"{CALENDAR_FOLDER}/{os.path.splitext(filename)[0]}.ics"
        bucket.blob(target).upload_from_string(ics_text, content_type='text/calendar')
        logging.info(f"Wrote {len(events)} events to {target}")
    except BulletinReadError:
        logging.exception(f"Could not read bulletin {file_path}")
    finally:
        if os.path.exists(local_path):
            os.remove(local_path)
