#!/usr/bin/env python
"""
Server Entry Point

Starts the dashboard API with Uvicorn.
Usage:
    Development:  python run_server.py --dev
    Production:   python run_server.py
    With data:    python run_server.py --data-file data/transactions.csv
"""

import argparse
import os
import sys
from pathlib import Path

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent))


def run_dev_server(port: int):
    """Run development server with auto-reload."""
    import uvicorn

    uvicorn.run(
        "src.main:app",
        host="0.0.0.0",
        port=port,
        reload=True,
        reload_dirs=["src"],
        log_level="debug",
        access_log=True,
    )


def run_prod_server(port: int):
    """Run production server with Uvicorn directly."""
    import uvicorn

    # The snapshot lives in process memory, so a single worker serves it
    uvicorn.run(
        "src.main:app",
        host=os.getenv("API_HOST", "0.0.0.0"),
        port=port,
        log_level=os.getenv("LOG_LEVEL", "info").lower(),
        access_log=True,
        proxy_headers=True,
        forwarded_allow_ips="*",
        server_header=False,
        date_header=True,
    )


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="ABT Analytics Dashboard API Server")
    parser.add_argument(
        "--dev",
        action="store_true",
        help="Run in development mode with auto-reload"
    )
    parser.add_argument(
        "--port",
        type=int,
        default=int(os.getenv("PORT", 8080)),
        help="Port to run on (default: 8080)"
    )
    parser.add_argument(
        "--data-file",
        help="Transactions CSV to ingest at startup (default: generated sample)"
    )

    args = parser.parse_args()

    # Settings are read from the environment by the app process
    os.environ["PORT"] = str(args.port)
    if args.data_file:
        os.environ["DATA_FILE_PATH"] = args.data_file

    if args.dev:
        print("Starting development server...")
        run_dev_server(args.port)
    else:
        print("Starting production server with Uvicorn...")
        run_prod_server(args.port)
