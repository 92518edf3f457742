"""Models, database repositories, schema migrations and avatars for a CTF game-tracking service."""

__version__ = "0.1.0"