#!/usr/bin/env python3
"""
Run the Slope Finder API server.

Usage:
    python run_api.py [--host HOST] [--port PORT] [--no-reload]

Host and port default to SLOPE_FINDER_HOST / SLOPE_FINDER_PORT.
"""

import argparse

import uvicorn

from config.settings import APP_NAME, API_HOST, API_PORT


def parse_args():
    parser = argparse.ArgumentParser(description=f"Run the {APP_NAME} API server")
    parser.add_argument("--host", default=API_HOST, help="Interface to bind")
    parser.add_argument("--port", type=int, default=API_PORT, help="Port to listen on")
    parser.add_argument("--no-reload", action="store_true",
                        help="Disable auto-reload on source changes")
    return parser.parse_args()


if __name__ == "__main__":
    args = parse_args()
    print(f"🚀 Starting {APP_NAME} API server...")
    print(f"📡 Upload tracks to: http://localhost:{args.port}/api/analyze-track")
    print(f"📚 Documentation at: http://localhost:{args.port}/docs")
    print("🛑 Press CTRL+C to stop\n")

    try:
        # reload needs the app as an import string
        uvicorn.run(
            "api.main:app",
            host=args.host,
            port=args.port,
            reload=not args.no_reload
        )
    except Exception as e:
        print(f"❌ Error starting server: {e}")
        import traceback
        traceback.print_exc()
