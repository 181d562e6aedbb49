"""Main entry point for DevPilot CLI."""

from __future__ import annotations

import logging
import sys

from devpilot_cli import __version__
from devpilot_cli.auth import login, logout
from devpilot_cli.config import Config
from devpilot_cli.repl import Repl


def print_help():
    """Print help message."""
    print(f"""
DevPilot CLI v{__version__}

Usage:
  devpilot [options] [command]

Commands:
  login             Sign in with email and password
  signup            Create an account and sign in
  logout            Forget the stored session

Options:
  --api-url URL     Override API endpoint (default: http://localhost:8000)
  --open LINK       Start the editor from a share link
  --offline         Use canned AI output instead of the server
  --all             With logout: forget every environment
  -h, --help        Show this help
  -v, --version     Show version

Environment:
  DEVPILOT_API_URL  Override API endpoint (same as --api-url)

Examples:
  devpilot login --api-url http://localhost:8000
  devpilot --open "http://localhost:8000/editor?code=PGgxPkhpPC9oMT4="
  devpilot --offline
""")


def parse_args(args: list[str]) -> dict:
    """
    Parse command line arguments.

    Returns dict with:
        command: str | None (login, signup, logout, None for REPL)
        api_url: str | None
        share_link: str | None
        offline: bool
        logout_all: bool
        show_help: bool
        show_version: bool
    """
    result = {
        "command": None,
        "api_url": None,
        "share_link": None,
        "offline": False,
        "logout_all": False,
        "show_help": False,
        "show_version": False,
    }

    i = 0
    while i < len(args):
        arg = args[i]

        if arg in ("login", "signup", "logout"):
            result["command"] = arg
        elif arg in ("--api-url", "--open"):
            if i + 1 >= len(args):
                print(f"Error: {arg} requires a value")
                sys.exit(1)
            key = "api_url" if arg == "--api-url" else "share_link"
            result[key] = args[i + 1]
            i += 1
        elif arg == "--offline":
            result["offline"] = True
        elif arg == "--all":
            result["logout_all"] = True
        elif arg in ("--help", "-h"):
            result["show_help"] = True
        elif arg in ("--version", "-v"):
            result["show_version"] = True
        elif arg.startswith("-"):
            print(f"Unknown option: {arg}")
            print("Run 'devpilot --help' for usage.")
            sys.exit(1)
        else:
            print(f"Unknown command: {arg}")
            print("Run 'devpilot --help' for usage.")
            sys.exit(1)

        i += 1

    return result


def main():
    """Main entry point."""
    args = parse_args(sys.argv[1:])

    if args["show_help"]:
        print_help()
        return

    if args["show_version"]:
        print(f"devpilot-cli {__version__}")
        return

    logging.basicConfig(level=logging.WARNING, format="%(levelname)s %(name)s: %(message)s")
    config = Config(api_url_override=args["api_url"])

    if args["command"] in ("login", "signup"):
        success = login(config, create_account=args["command"] == "signup")
        sys.exit(0 if success else 1)

    elif args["command"] == "logout":
        success = logout(config, logout_all=args["logout_all"])
        sys.exit(0 if success else 1)

    else:
        if not args["offline"] and not config.is_authenticated:
            print(f"Not signed in to {config.api_url}")
            print("Run 'devpilot login' first.")
            sys.exit(1)

        Repl(config, offline=args["offline"]).start(share_link=args["share_link"])


if __name__ == "__main__":
    main()
