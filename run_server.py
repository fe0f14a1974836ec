#!/usr/bin/env python3
"""formula-deps - Web Server Launcher.

Run with: python run_server.py examples/budget.yaml
"""

import argparse

from formula_deps.server import run_server
from formula_deps.utils.logger import setup_logger

if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="formula-deps Web Server")
    parser.add_argument("document", help="YAML document to serve")
    parser.add_argument("--host", "-H", default=None, help="Host to bind to")
    parser.add_argument("--port", "-p", type=int, default=None, help="Port to bind to")
    args = parser.parse_args()

    setup_logger()
    run_server(args.document, host=args.host, port=args.port)
