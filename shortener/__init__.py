"""URL shortener service: random aliases, stored pairs and redirects."""

__version__ = "0.1.0"
