"""CLI entry point for the OAuth relay.

Commands:
  serve     Run the relay with uvicorn (default)
  check     Validate configuration from the environment
  version   Show version
"""
import argparse
import sys
from pathlib import Path

from dotenv import load_dotenv

from config import VERSION, Config, load_config


def _load_env():
    # Load environment: .env (local override)
    env_file = Path(".env")
    if env_file.exists():
        load_dotenv(env_file)


def cmd_check(config: Config) -> int:
    """Print the effective configuration; non-zero when incomplete."""
    print("=" * 60)
    print("  GitHub OAuth Relay - Configuration")
    print("=" * 60)
    print(f"  Client ID:     {config.client_id or '(missing)'}")
    print(f"  Client secret: {'set' if config.client_secret else '(missing)'}")
    print(f"  Redirect URL:  {config.redirect_url or '(missing)'}")
    print(f"  Default scope: {config.scopes}")
    print("  Allowed origins:")
    for entry in config.origins:
        print(f"    - {entry}")
    if not config.origins:
        print("    (none)")
    print()

    if not config.is_valid():
        print(f"[ERROR] Missing env. Required: {', '.join(config.missing())}")
        return 1
    print("[OK] Configuration complete")
    return 0


def cmd_serve(config: Config, host: str = None, port: int = None, reload: bool = False) -> int:
    """Run the relay with uvicorn."""
    import uvicorn

    host = host or config.host
    port = port or config.port
    print(f"OAuth provider listening on {host}:{port}")
    uvicorn.run("main:app", host=host, port=port, reload=reload)
    return 0


def cmd_version() -> int:
    print(f"oauth-relay {VERSION}")
    return 0


def main(argv=None) -> int:
    """Main entry point for CLI."""
    parser = argparse.ArgumentParser(
        prog="oauth-relay",
        description="GitHub OAuth relay for static CMS front ends",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  oauth-relay serve --port 3000
  oauth-relay check
"""
    )
    parser.add_argument(
        "command",
        nargs="?",
        default="serve",
        choices=["serve", "check", "version"],
        help="Command to run (default: serve)"
    )
    parser.add_argument("--host", help="Bind address (default: HOST or 0.0.0.0)")
    parser.add_argument("--port", type=int, help="Bind port (default: PORT or 3000)")
    parser.add_argument("--reload", action="store_true", help="Reload on code changes")

    args = parser.parse_args(argv)

    if args.command == "version":
        return cmd_version()

    _load_env()
    config = load_config()

    if args.command == "check":
        return cmd_check(config)
    return cmd_serve(config, host=args.host, port=args.port, reload=args.reload)


if __name__ == "__main__":
    sys.exit(main())
