"""
Serve the number portability admin API.

Usage:
    python run.py
    python run.py --reload          # auto-reload while developing
    python run.py --host 0.0.0.0 --port 8080
"""
import argparse

import uvicorn

from mnp_admin.config.settings import get_settings


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Serve the number portability admin API")
    parser.add_argument("--host", default="127.0.0.1", help="bind address (default: %(default)s)")
    parser.add_argument("--port", type=int, default=8000, help="bind port (default: %(default)s)")
    parser.add_argument("--reload", action="store_true", help="restart on code changes")
    parser.add_argument(
        "--workers",
        type=int,
        default=1,
        help="worker processes; each one holds its own feed and session (default: %(default)s)"
    )
    return parser


def main():
    args = build_parser().parse_args()
    settings = get_settings()
    workers = 1 if args.reload else args.workers
    
    print(f"mnp-admin on http://{args.host}:{args.port} "
          f"(env={settings.environment}, feed={settings.feed_mode if settings.feed_enabled else 'off'}, "
          f"workers={workers}, reload={args.reload})")
    
    uvicorn.run(
        "mnp_admin.main:app",
        host=args.host,
        port=args.port,
        reload=args.reload,
        workers=workers,
        log_level=settings.log_level.lower(),
    )


if __name__ == "__main__":
    main()
