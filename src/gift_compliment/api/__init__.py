"""Request boundary for the compliment service."""

from .compliment import ComplimentAPI, ValidationError, parse_request

__all__ = ["ComplimentAPI", "ValidationError", "parse_request"]
