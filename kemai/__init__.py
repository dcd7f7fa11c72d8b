"""Kimai time tracking client: API types, JSON parsing, HTTP client, cache, session state and view models."""

__version__ = "0.1.0"