"""
Parse a bulletin PDF locally and write the results next to it.

    python run_bulletin_debug.py "Pfarrbrief 2025.pdf" --year 2025 --debug
"""
import argparse
import json
import logging
import os
import sys
from datetime import datetime

# Allow running from a checkout without `pip install -e .`
sys.path.insert(0, os.path.join(os.path.dirname(os.path.abspath(__file__)), "functions"))

from bulletin_config import BulletinConfig, load_config_file
from bulletin_service import events_to_dicts, extract_events, read_lines
from ics_export import to_ics
from pdf_reader import BulletinReadError


def build_arg_parser():
    parser = argparse.ArgumentParser(description="Convert a parish bulletin PDF into calendar events.")
    parser.add_argument("pdf", help="Path to the bulletin PDF")
    parser.add_argument("--year", type=int, default=datetime.now().year, help="Calendar year of the bulletin")
    parser.add_argument("--config", help="JSON file with template overrides")
    parser.add_argument("--out", help="Output directory (default: next to the PDF)")
    parser.add_argument("--lines", action="store_true", help="Only dump the reconstructed lines")
    parser.add_argument("--debug", action="store_true", help="Log every parsing decision")
    return parser


def main(argv=None):
    args = build_arg_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.debug else logging.INFO,
        format="[%(levelname)s] %(name)s: %(message)s",
    )

    config = load_config_file(args.config) if args.config else BulletinConfig()
    out_dir = args.out or os.path.dirname(os.path.abspath(args.pdf))
    base = os.path.splitext(os.path.basename(args.pdf))[0]

    print(f"Parsing Bulletin: {args.pdf} ({args.year})...")
    try:
        lines = read_lines(args.pdf, config)
    except BulletinReadError as e:
        print(f"Error: {e}")
        return 1

    if args.lines:
        for line in lines:
            print(f"{line.y:8.2f}  {line.text}")
        return 0

    events = extract_events(lines, args.year, config=config)
    print(f"Found {len(events)} events.")

    json_path = os.path.join(out_dir, f"{base}_events.json")
    with open(json_path, 'w', encoding='utf-8') as f:
        json.dump(events_to_dicts(events), f, indent=2, ensure_ascii=False)
    print(f"Full JSON results saved to: {json_path}")

    txt_path = os.path.join(out_dir, f"{base}_events.txt")
    with open(txt_path, 'w', encoding='utf-8') as f:
        f.write(f"Total Bulletin Events Found: {len(events)}\n")
        f.write("=" * 30 + "\n")
        for i, evt in enumerate(events):
            f.write(f"\n[{i+1}] {evt.start:%Y-%m-%d %H:%M} - {evt.end:%H:%M}")
            f.write(" (all day)\n" if evt.is_all_day else "\n")
            f.write(f"    Summary: {evt.summary}\n")
            if evt.description:
                f.write(f"    Description: {evt.description}\n")
    print(f"Full readable list saved to: {txt_path}")

    ics_path = os.path.join(out_dir, f"{base}.ics")
    with open(ics_path, 'w', encoding='utf-8', newline='') as f:
        f.write(to_ics(events, config))
    print(f"Calendar exported: {ics_path}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
