#!/usr/bin/env python3
"""Check that an API key can reach the Klaviyo API.

Fetches the account's metrics and prints them, or prints the error
returned by the API.

Usage
-----
Set environment variables and run::

    export KLAVIYO_API_KEY="pk_..."
    python scripts/test_connection.py

Options::

    --json               Print the raw metric documents
    --verbose, -v        Enable debug logging
"""

from __future__ import annotations

import argparse
import asyncio
import json
import logging
import sys
from pathlib import Path

# Allow running from the repo root without installing the package.
_repo = Path(__file__).resolve().parent.parent
_src = _repo / "src"
if _src.is_dir():
    sys.path.insert(0, str(_src))

from pyklaviyo import KlaviyoClient, KlaviyoConfig, KlaviyoError, KlaviyoUpstreamError  # noqa: E402
from pyklaviyo._api.metrics import fetch_metrics  # noqa: E402
from pyklaviyo._api._common import response_data  # noqa: E402


async def run(json_mode: bool) -> int:
    try:
        config = KlaviyoConfig.from_env(cache_enabled=False)
    except KlaviyoError as exc:
        print(f"Configuration error: {exc}", file=sys.stderr)
        return 2

    async with KlaviyoClient(config) as client:
        try:
            # Bypass the helper's error handling so the API's error is shown.
            response = await client._gated(fetch_metrics)
        except KlaviyoUpstreamError as exc:
            print(f"Error: {exc}", file=sys.stderr)
            return 1

    metrics = response_data(response)
    print(f"Connection successful! {len(metrics)} metrics available.")
    if json_mode:
        print(json.dumps(metrics, indent=2, ensure_ascii=False))
    else:
        for metric in metrics:
            if not isinstance(metric, dict):
                continue
            attributes = metric.get("attributes") or {}
            print(f"  {metric.get('id', '?'):<10} {attributes.get('name', '')}")
    return 0


def main() -> None:
    parser = argparse.ArgumentParser(description="Test the Klaviyo API connection.")
    parser.add_argument("--json", action="store_true", dest="json_mode", help="Print the raw metric documents")
    parser.add_argument("--verbose", "-v", action="store_true", help="Enable debug logging")
    args = parser.parse_args()

    if args.verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(levelname)s %(name)s: %(message)s")
    else:
        logging.basicConfig(level=logging.WARNING)

    sys.exit(asyncio.run(run(args.json_mode)))


if __name__ == "__main__":
    main()
