#!/usr/bin/env python
"""
QuestHire API launcher

Usage:
    python run.py                    # 127.0.0.1:8000
    python run.py -p 8080            # custom port
    python run.py --host 0.0.0.0     # listen on all interfaces
    python run.py --reload           # auto-reload for development
"""
import argparse
import shutil
import sys
from pathlib import Path

ROOT_DIR = Path(__file__).parent
sys.path.insert(0, str(ROOT_DIR))


def parse_args():
    parser = argparse.ArgumentParser(
        description="QuestHire API launcher",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument(
        "-p", "--port",
        type=int,
        default=8000,
        help="Port (default: 8000)"
    )
    parser.add_argument(
        "--host",
        type=str,
        default="127.0.0.1",
        help="Bind address (default: 127.0.0.1)"
    )
    parser.add_argument(
        "--reload",
        action="store_true",
        help="Reload on code changes"
    )
    parser.add_argument(
        "--workers",
        type=int,
        default=1,
        help="Worker processes (default: 1)"
    )
    return parser.parse_args()


def check_env():
    """Create .env from the example and the SQLite data directory when missing"""
    env_file = ROOT_DIR / ".env"
    env_example = ROOT_DIR / ".env.example"

    if not env_file.exists():
        if env_example.exists():
            print("No .env found, copying .env.example")
            shutil.copy(env_example, env_file)
        else:
            print("No .env found, using defaults")

    data_dir = ROOT_DIR / "data"
    if not data_dir.exists():
        data_dir.mkdir(parents=True)
        print(f"Created data directory: {data_dir}")


def main():
    args = parse_args()

    print("=" * 50)
    print("  QuestHire API")
    print("=" * 50)

    check_env()

    print(f"\nListening on http://{args.host}:{args.port}")
    print(f"Docs:    http://{args.host}:{args.port}/docs")
    print(f"Reload:  {'on' if args.reload else 'off'}")
    print(f"Workers: {args.workers}")
    print("\n" + "-" * 50 + "\n")

    import uvicorn
    try:
        uvicorn.run(
            "questhire.main:app",
            host=args.host,
            port=args.port,
            reload=args.reload,
            workers=args.workers if not args.reload else 1,
            log_level="info",
        )
    except KeyboardInterrupt:
        print("\nStopped")


if __name__ == "__main__":
    main()
