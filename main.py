#!/usr/bin/env python3
"""
Program Report Navigator — launch the web page.

Usage:
    python main.py                          # http://localhost:8000
    python main.py --port 9000              # http://localhost:9000
    python main.py --host 0.0.0.0           # bind to all interfaces
    python main.py --nav-config nav.json    # bucket ranges / static menu items
    python main.py --reload                 # auto-reload on code changes

Upstream access is configured through QB_* environment variables
(see utils/config.py).
"""

from __future__ import annotations

import argparse
import os
import sys
import webbrowser
from pathlib import Path


def main() -> None:
    parser = argparse.ArgumentParser(
        description="Launch the program report navigation page.",
    )
    parser.add_argument(
        "--host", default=os.getenv("APP_HOST", "127.0.0.1"),
        help="Bind address (default: 127.0.0.1 or APP_HOST env var)",
    )
    parser.add_argument(
        "--port", type=int, default=int(os.getenv("APP_PORT", "8000")),
        help="Port to listen on (default: 8000 or APP_PORT env var)",
    )
    parser.add_argument(
        "--nav-config", type=Path, default=None,
        help="JSON file with menu buckets and static items (sets APP_NAV_CONFIG)",
    )
    parser.add_argument(
        "--reload", action="store_true",
        help="Enable auto-reload on file changes (development mode)",
    )
    parser.add_argument(
        "--no-browser", action="store_true",
        help="Don't open a browser window automatically",
    )
    args = parser.parse_args()

    if args.nav_config is not None:
        if not args.nav_config.exists():
            print(f"Error: nav config not found at {args.nav_config}")
            sys.exit(1)
        os.environ["APP_NAV_CONFIG"] = str(args.nav_config)

    missing = [v for v in ("QB_REPORTS_TABLE_ID", "QB_PROGRAMS_TABLE_ID",
                           "QB_CUSTOMERS_TABLE_ID") if not os.getenv(v)]
    if missing:
        print(f"Warning: {', '.join(missing)} not set; page loads will fail upstream.")
        print()

    try:
        import uvicorn
    except ImportError:
        print("Error: uvicorn is not installed.")
        print("  pip install uvicorn[standard]")
        sys.exit(1)

    url = f"http://{'localhost' if args.host == '0.0.0.0' else args.host}:{args.port}"
    print(f"Starting Program Report Navigator at {url}")
    print()

    if not args.no_browser:
        # Open browser after a short delay to let the server start
        import threading
        threading.Timer(1.5, webbrowser.open, args=(url,)).start()

    uvicorn.run(
        "api.app:app",
        host=args.host,
        port=args.port,
        reload=args.reload,
        log_level="info",
    )


if __name__ == "__main__":
    main()
