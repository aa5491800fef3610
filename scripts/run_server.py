#!/usr/bin/env python
"""Server runner script.

Usage:
    python scripts/run_server.py [--mode dev|prod] [--host HOST] [--port PORT]

Examples:
    python scripts/run_server.py                    # Development mode (default)
    python scripts/run_server.py --mode prod        # Production mode
    python scripts/run_server.py --port 8080        # Custom port
"""

import argparse
import os
import sys
from pathlib import Path

import uvicorn

# Allow running from a source checkout without installing the package
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Run the Agent Network server",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
    python scripts/run_server.py                    # Development mode
    python scripts/run_server.py --mode prod        # Production mode
    python scripts/run_server.py --host 127.0.0.1   # Localhost only
    python scripts/run_server.py --env-file .env    # Load credentials from .env
        """,
    )
    parser.add_argument(
        "--mode",
        choices=["dev", "prod"],
        default="dev",
        help="Server mode: dev (with reload) or prod (with workers)",
    )
    parser.add_argument("--host", type=str, default=None, help="Host to bind to")
    parser.add_argument("--port", type=int, default=None, help="Port to bind to")
    parser.add_argument(
        "--workers",
        type=int,
        default=4,
        help="Number of worker processes (prod mode only, default: 4)",
    )
    parser.add_argument(
        "--log-level",
        choices=["debug", "info", "warning", "error"],
        default=None,
        help="Log level (default: info for dev, warning for prod)",
    )
    parser.add_argument("--config", type=str, default=None, help="YAML config path")
    parser.add_argument("--env-file", type=str, default=None, help="Path to .env file")
    return parser


def main() -> None:
    """Run the server with the specified configuration."""
    args = build_parser().parse_args()

    from agent_network.utils.config import init_config

    config_path = args.config
    if config_path is None:
        default_config = project_root / "configs" / "app.yaml"
        if default_config.exists():
            config_path = str(default_config)

    config = init_config(yaml_path=config_path, env_file=args.env_file)

    host = args.host or config.app.host
    port = args.port or config.app.port

    # Picked up again by the app's own config load
    if args.host:
        os.environ["APP_HOST"] = args.host
    if args.port:
        os.environ["APP_PORT"] = str(args.port)

    dev = args.mode == "dev"
    log_level = args.log_level or ("info" if dev else "warning")

    print(f"\n{'='*60}")
    print(f"  Agent Network - {'Development' if dev else 'Production'} Server")
    print(f"{'='*60}")
    print(f"  Host:      {host}")
    print(f"  Port:      {port}")
    print(f"  Provider:  {config.llm.provider}")
    print(f"  Store:     {'supabase' if config.supabase.enabled else 'in-memory'}")
    print(f"  Log Level: {log_level}")
    if dev:
        print(f"  Docs:      http://{host}:{port}/docs")
    print(f"{'='*60}\n")

    if dev:
        uvicorn.run(
            "agent_network.main:app",
            host=host,
            port=port,
            reload=True,
            reload_dirs=[str(project_root / "agent_network")],
            log_level=log_level,
        )
    else:
        uvicorn.run(
            "agent_network.main:app",
            host=host,
            port=port,
            reload=False,
            workers=args.workers,
            log_level=log_level,
            access_log=False,
        )


if __name__ == "__main__":
    main()
