"""
FOCUSFLOW Analytics API - Authentication Module

Bearer token verification. Tokens are issued by the external auth service.
"""

from focusflow.auth.dependencies import get_current_owner, CurrentOwner

__all__ = ["get_current_owner", "CurrentOwner"]
