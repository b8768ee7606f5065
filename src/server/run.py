"""CLI entry point for launching the FastAPI app with uvicorn."""

import argparse

import uvicorn


def parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Run the AI Diary API server.")
    parser.add_argument("--host", default="0.0.0.0", help="Bind address (default: 0.0.0.0)")
    parser.add_argument("--port", type=int, default=3004, help="Port (default: 3004)")
    parser.add_argument("--reload", action="store_true", help="Enable auto reload for development")
    return parser.parse_args()


def main() -> None:
    """Run the development server."""
    args = parse_args()
    uvicorn.run(
        "src.server.app:app",
        host=args.host,
        port=args.port,
        reload=args.reload,
        reload_dirs=["src"] if args.reload else None,
    )


if __name__ == "__main__":
    main()
