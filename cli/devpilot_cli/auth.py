"""Authentication flow for DevPilot CLI."""

from __future__ import annotations

import getpass

import httpx

from devpilot_cli.client import ApiClient
from devpilot_cli.config import Config
from engine.editor.types import AuthError


def _prompt_credentials() -> tuple[str, str]:
    email = input("Email: ").strip()
    password = getpass.getpass("Password: ")
    return email, password


def login(config: Config, create_account: bool = False) -> bool:
    """
    Sign in (or sign up) with email and password and store the session.

    Returns True if successful, False otherwise.
    """
    client = ApiClient(config.api_url)
    try:
        email, password = _prompt_credentials()
        if not email or not password:
            print("Email and password are required.")
            return False

        if create_account:
            token, identity = client.sign_up(email, password)
        else:
            token, identity = client.sign_in(email, password)

        config.token = token
        config.email = identity.get("email") or email
        print(f"Signed in as {config.email}")
        print(f"Session saved to {config.config_file}")
        return True

    except AuthError as e:
        print(f"Sign-in failed: {e.message}")
        return False
    except httpx.HTTPError as e:
        print(f"Could not reach {config.api_url}: {e}")
        return False
    finally:
        client.close()


def logout(config: Config, logout_all: bool = False) -> bool:
    """
    Forget stored sessions.

    Args:
        config: Config instance
        logout_all: If True, clear all environments. If False, only current.

    Returns True if successful, False otherwise.
    """
    if logout_all:
        envs = config.list_environments()
        if not envs:
            print("No signed-in environments.")
            return True
        for env in envs:
            print(f"  Signing out of {env['url']} ({env.get('email') or 'unknown'})")
        config.clear_all()
        print("Signed out of all environments.")
        return True

    if not config.is_authenticated:
        print(f"Not signed in to {config.api_url}")
        return False

    email = config.email or "unknown"
    config.clear_environment()
    print(f"Signed out of {config.api_url} ({email})")
    return True
