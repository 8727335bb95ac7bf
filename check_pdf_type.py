import os
import sys

import pdfplumber

# Allow running from a checkout without `pip install -e .`
sys.path.insert(0, os.path.join(os.path.dirname(os.path.abspath(__file__)), "functions"))

from line_builder import build_page_lines
from pdf_reader import page_text_runs

pdf_path = sys.argv[1] if len(sys.argv) > 1 else "Pfarrbrief.pdf"

with pdfplumber.open(pdf_path) as pdf:
    for i, page in enumerate(pdf.pages):
        runs = page_text_runs(page)
        print(f"Page {i+1}:")
        print(f"  Images: {len(page.images)}")
        print(f"  Text runs: {len(runs)}")
        print(f"  Lines: {len(build_page_lines(runs))}")
        if page.images and not runs:
            print("  -> scanned page, no text layer")
