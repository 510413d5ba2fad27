#!/usr/bin/env python3
"""
Audit Runner

Scores one or more URLs from the command line and prints the result as JSON.

Usage:
    # Provider credentials are read from the environment or .env:
    export AHREFS_API_KEY=your_key
    export DATAFORSEO_LOGIN=your_login
    export DATAFORSEO_PASSWORD=your_password

    # Score a domain's pages:
    python scripts/run_audit.py example.com/ example.com/pricing

    # Against competitors (repeat --competitor, comma-separated URLs):
    python scripts/run_audit.py example.com/ \
        --competitor rival.com/,rival.com/pricing \
        --competitor other.io/
"""

import argparse
import asyncio
import json
import logging
import sys
from pathlib import Path

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from dotenv import load_dotenv

from sao_auditor.analyzer import AuditEngine
from sao_auditor.exceptions import NoAnalyzableURLsError
from sao_auditor.scoring import score_label
from sao_auditor.utils import configure_logging, get_settings

logger = logging.getLogger(__name__)


async def run_audit(urls, competitor_groups=None):
    """Run one batch and return its JSON-ready dict."""
    async with AuditEngine() as engine:
        for name, configured in engine.provider_status().items():
            logger.info(f"{name}: {'configured' if configured else 'NOT configured'}")

        result = await engine.analyze_batch(urls, competitor_groups)

    output = result.to_dict()
    output["label"] = score_label(result.primary.average.total)
    return output


def main():
    """Main entry point."""
    parser = argparse.ArgumentParser(
        description="Score URLs for search and AI-discovery readiness"
    )
    parser.add_argument(
        "urls",
        nargs="+",
        help="Primary domain URLs (e.g., example.com/pricing)"
    )
    parser.add_argument(
        "--competitor",
        action="append",
        default=[],
        help="Comma-separated URLs of one competitor domain (repeatable)"
    )
    parser.add_argument(
        "--log-level",
        default=None,
        help="Override LOG_LEVEL (default: from settings)"
    )
    parser.add_argument(
        "--output",
        default=None,
        help="Write JSON to this file instead of stdout"
    )

    args = parser.parse_args()

    load_dotenv()
    configure_logging(args.log_level or get_settings().LOG_LEVEL)

    competitor_groups = [
        [u.strip() for u in group.split(",") if u.strip()]
        for group in args.competitor
    ]

    try:
        output = asyncio.run(run_audit(args.urls, competitor_groups))
    except NoAnalyzableURLsError as e:
        print(f"ERROR: {e}", file=sys.stderr)
        for url in e.dropped:
            print(f"  dropped: {url}", file=sys.stderr)
        sys.exit(1)

    text = json.dumps(output, indent=2)
    if args.output:
        Path(args.output).write_text(text)
        print(f"Result saved to: {args.output}")
    else:
        print(text)


if __name__ == "__main__":
    main()
