"""
Repository layer for DevPilot.

All SQL lives here and ONLY here. No database access outside this module.
"""

from backend.repos.user_repo import UserRepo

__all__ = [
    "UserRepo",
]
