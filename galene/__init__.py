"""Tokens, conditional-request and HTTP helpers for a videoconferencing server."""

__version__ = "0.1.0"

__all__ = [
    "auth",
    "errors",
    "httputil",
    "jwt_token",
    "paths",
    "precondition",
    "stateful",
    "unbounded",
]