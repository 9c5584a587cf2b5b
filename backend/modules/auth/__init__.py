"""modules/auth — admin sign-in boundary over the hosted auth API."""

from modules.auth.client import AuthClient, AuthState

__all__ = ["AuthClient", "AuthState"]
