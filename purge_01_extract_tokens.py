#!/usr/bin/env python3
"""
Step 01: Collect the tokens (class names / identifiers) used by the project's
content files, for the CSS purge step.

  python purge_01_extract_tokens.py --root path/to/site

Reads purgecss.config.py / purgecss.config.json from --root (or --config),
expands its content globs, runs the extractors and writes used_tokens.json.

Environment (.env is honoured): PURGECSS_CONFIG, PURGECSS_ROOT, PURGECSS_JOBS.
"""
from __future__ import annotations

import argparse
import json
import logging
import os
import sys
from pathlib import Path

from dotenv import load_dotenv

from purge_tools.config_loader import load_config
from purge_tools.errors import PurgeConfigError
from purge_tools.extract_tokens import ExtractionResult, scan
from purge_tools.glob_resolver import relative_to


def build_report(result: ExtractionResult, config_path, root: Path) -> dict:
    return {
        'config': str(config_path) if config_path else None,
        'files_scanned': len(result.files) - len(result.errors),
        'token_count': len(result.tokens),
        'tokens': sorted(result.tokens),
        'errors': [
            {**e.to_dict(), 'path': relative_to(e.path, root)}
            for e in result.errors
        ],
    }


def parse_args(argv=None):
    p = argparse.ArgumentParser(description='Extract used CSS tokens from the files listed in a purge config.')
    p.add_argument('--root', default=os.getenv('PURGECSS_ROOT', '.'), help='Working directory content globs are resolved against')
    p.add_argument('--config', default=os.getenv('PURGECSS_CONFIG'), help='Config file, relative to the current directory or to --root (default: purgecss.config.py/.json in --root)')
    p.add_argument('--output', help='Report path (default: <root>/used_tokens.json)')
    p.add_argument('--jobs', type=int, default=os.getenv('PURGECSS_JOBS', '1'), help='Read/extract files on N threads')
    p.add_argument('--dry-run', action='store_true', help='Print the summary only; do not write the report')
    p.add_argument('--strict', action='store_true', help='Exit 1 when any file could not be read or extracted')
    p.add_argument('--verbose', '-v', action='store_true')
    return p.parse_args(argv)


def main(argv=None):
    load_dotenv()
    args = parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format='[%(levelname)s] %(message)s',
    )

    root = Path(args.root).resolve()
    if not root.is_dir():
        raise SystemExit(f"[ERROR] root directory not found: {root}")
    if args.jobs < 1:
        raise SystemExit('[ERROR] --jobs must be >= 1')

    try:
        config = load_config(args.config, root=root)
        result = scan(config, cwd=root, jobs=args.jobs)
    except PurgeConfigError as e:
        raise SystemExit(f"[ERROR] {e}")

    report = build_report(result, config.source, root)
    print(f"[EXTRACT] files={report['files_scanned']} tokens={report['token_count']} errors={len(report['errors'])}")
    for err in report['errors']:
        print(f"[EXTRACT] {err['kind']} error: {err['path']}: {err['reason']}", file=sys.stderr)

    if not args.dry_run:
        out = Path(args.output) if args.output else root / 'used_tokens.json'
        out.parent.mkdir(parents=True, exist_ok=True)
        out.write_text(json.dumps(report, ensure_ascii=False, indent=2), encoding='utf-8')
        print(f"[EXTRACT] Report: {out}")

    if args.strict and result.errors:
        return 1
    return 0


if __name__ == '__main__':
    sys.exit(main())
