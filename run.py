#!/usr/bin/env python3
"""
LifeFlow — Application Runner
==============================
Starts the FastAPI server exposing the donor registry and heuristics.

Usage:
    python run.py                    # Default: http://localhost:8000
    python run.py --port 3000        # Custom port
    python run.py --host 127.0.0.1   # Bind to localhost only
"""

import argparse

import uvicorn

from lifeflow.config import API_HOST, API_PORT


def main():
    parser = argparse.ArgumentParser(description="LifeFlow — Server")
    parser.add_argument("--host", type=str, default=API_HOST, help="Bind host")
    parser.add_argument("--port", type=int, default=API_PORT, help="Bind port")
    parser.add_argument("--reload", action="store_true", help="Enable auto-reload")
    args = parser.parse_args()

    print("╔══════════════════════════════════════════════════╗")
    print("║  LifeFlow Blood Donation System                  ║")
    print(f"║  http://{args.host}:{args.port}                          ║")
    print("╚══════════════════════════════════════════════════╝")
    print()
    print("  API docs:  http://localhost:{}/docs".format(args.port))
    print()

    uvicorn.run(
        "lifeflow.api:create_app",
        factory=True,
        host=args.host,
        port=args.port,
        reload=args.reload,
    )


if __name__ == "__main__":
    main()
