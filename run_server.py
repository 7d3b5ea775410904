#!/usr/bin/env python3
"""
Startup script for the Sandwich Slots API.

Usage:
    # Run with defaults from .env / environment
    python run_server.py

    # Run with custom port
    python run_server.py --port 8001

    # Run with reload for development
    python run_server.py --reload

    # Serve requests only; run the deadline sweep from cron instead
    python run_server.py --no-sweep
"""

import argparse
import os

from dotenv import load_dotenv


def main():
    parser = argparse.ArgumentParser(
        description="Run the Sandwich Slots API server"
    )
    parser.add_argument(
        "--host",
        default="0.0.0.0",
        help="Host to bind to (default: 0.0.0.0)",
    )
    parser.add_argument(
        "--port",
        "-p",
        type=int,
        default=8000,
        help="Port to run on (default: 8000)",
    )
    parser.add_argument(
        "--reload",
        "-r",
        action="store_true",
        help="Enable auto-reload for development",
    )
    parser.add_argument(
        "--no-sweep",
        action="store_true",
        help="Do not run the deadline sweep inside the server process",
    )

    args = parser.parse_args()

    load_dotenv()
    if args.no_sweep:
        # Read by config when the app module is imported
        os.environ["DEADLINE_SWEEP_ENABLED"] = "false"

    print(f"\n{'=' * 50}")
    print("Starting: Sandwich Slots API")
    print(f"Address:  {args.host}:{args.port}")
    print(f"Database: {os.getenv('DATABASE_URL', 'sqlite:///./sandwich_slots.db')}")
    print(f"{'=' * 50}\n")

    import uvicorn

    uvicorn.run(
        "sandwich_slots.main:app",
        host=args.host,
        port=args.port,
        reload=args.reload,
    )


if __name__ == "__main__":
    main()
