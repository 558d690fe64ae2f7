#!/usr/bin/env python3
"""
Component Reuse Checker
Command-line entry point: checks React files for components the design system already provides.
"""

import argparse
import logging
import sys
from pathlib import Path

from catalog.catalog_loader import load_catalog_file, load_sample_catalog
from comparator.report_builder import ReportBuilder
from comparator.structural_matcher import MatchConfig
from core.reuse_checker import ReuseChecker
from utils.settings import load_settings

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description='Find hand-written React components that duplicate design-system components.'
    )
    parser.add_argument('path', help='React source file or directory to check')
    parser.add_argument('--threshold', type=float, help='Minimum combined score (0-100) to report a match')
    parser.add_argument('--catalog', help='Catalog JSON file (defaults to the built-in sample design system)')
    parser.add_argument('--settings', help='JSON settings file')
    parser.add_argument('--format', choices=['text', 'json', 'html'], default='text', help='Report format')
    parser.add_argument('--output', help='Write the report to this file instead of stdout')
    parser.add_argument('--verbose', action='store_true', help='Enable debug logging')
    return parser


def main(argv=None) -> int:
    """Main execution function."""
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format='%(levelname)s %(name)s: %(message)s',
    )

    try:
        settings = load_settings(args.settings)
        config = MatchConfig(threshold=args.threshold) if args.threshold is not None else settings.to_match_config()
    except (OSError, ValueError) as e:
        print(f"Invalid configuration: {e}", file=sys.stderr)
        return 2

    if not settings.enabled:
        print("Component reuse check is disabled.")
        return 0

    catalog_path = args.catalog or settings.catalog_path
    try:
        catalog = load_catalog_file(catalog_path) if catalog_path else load_sample_catalog()
    except (OSError, ValueError) as e:
        print(f"Could not load catalog: {e}", file=sys.stderr)
        return 2

    checker = ReuseChecker(catalog, config)
    target = Path(args.path)
    try:
        reports = checker.check_directory(target) if target.is_dir() else [checker.check_file(target)]
    except ValueError as e:
        print(str(e), file=sys.stderr)
        return 2

    builder = ReportBuilder()
    if args.output:
        builder.write_report(reports, args.output, args.format)
        print(f"Report saved to {args.output}")
    else:
        renderers = {'text': builder.render_text, 'json': builder.render_json, 'html': builder.render_html}
        print(renderers[args.format](reports))

    return 1 if any(report.status == 'error' for report in reports) else 0


if __name__ == "__main__":
    sys.exit(main())
