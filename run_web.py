"""
Serve the rank API and its Socket.IO run updates.
"""

import argparse
import sys
from pathlib import Path

project_root = Path(__file__).parent
sys.path.insert(0, str(project_root))

from rich.console import Console

from tracker import setup_logging
from web.app import app, socketio

console = Console()


def parse_args(argv=None):
    parser = argparse.ArgumentParser(description="Keyword Rank Tracker API server")
    parser.add_argument("--host", default="127.0.0.1", help="Interface to bind")
    parser.add_argument("--port", type=int, default=5000, help="Port to listen on")
    parser.add_argument(
        "--log-file",
        type=Path,
        default=project_root / "logs" / "web.log",
        help="Log file path",
    )
    parser.add_argument("--debug", action="store_true", help="Enable Flask debug mode")
    return parser.parse_args(argv)


def main(argv=None):
    args = parse_args(argv)
    setup_logging(args.log_file)
    console.print(f"Rank API listening on [bold]http://{args.host}:{args.port}[/bold]")

    # Werkzeug is refused by newer Flask-SocketIO unless allowed explicitly
    socketio.run(
        app,
        host=args.host,
        port=args.port,
        debug=args.debug,
        use_reloader=False,
        allow_unsafe_werkzeug=True,
    )


if __name__ == "__main__":
    main()
