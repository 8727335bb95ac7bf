import io
import logging

import pdfplumber

from line_builder import TextRun


class BulletinReadError(Exception):
    """The file could not be turned into text runs (broken or scanned PDF)."""


def page_text_runs(page):
    """
    Text runs of one pdfplumber page.
    pdfplumber measures `top`/`bottom` from the top edge, flip to PDF space.
    """
    runs = []
    height = float(page.height)
    for word in page.extract_words(keep_blank_chars=True):
        content = word.get("text", "")
        if not content.strip():
            continue
        runs.append(TextRun(content, float(word["x0"]), height - float(word["bottom"])))
    return runs


def iter_page_runs(pdf, logger=None):
    """Yield the runs of each page in order, page N+1 is read after page N."""
    log = logger or logging.getLogger(__name__)
    for page_num, page in enumerate(pdf.pages):
        runs = page_text_runs(page)
        log.debug("Page %d - %d text runs found.", page_num + 1, len(runs))
        yield runs


def read_text_runs(source, logger=None):
    """
    Decode a PDF (path, bytes or binary file) into a list of per-page run lists.

    Raises BulletinReadError when pdfplumber cannot read the file or when the
    document has pages but no text at all.
    """
    log = logger or logging.getLogger(__name__)
    if isinstance(source, (bytes, bytearray)):
        source = io.BytesIO(source)

    try:
        with pdfplumber.open(source) as pdf:
            pages = list(iter_page_runs(pdf, log))
    except Exception as e:
        raise BulletinReadError(f"Could not read PDF: {e}") from e

    if pages and not any(pages):
        raise BulletinReadError("PDF contains no text (scanned document?)")
    return pages
