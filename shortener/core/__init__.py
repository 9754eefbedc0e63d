"""Core module for the URL shortener service."""

from shortener.core.config import settings

__all__ = ["settings"]
