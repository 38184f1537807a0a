"""Buildkite API client.

Authenticated GraphQL and REST access to the Buildkite API, with organization
resolution at construction time and retry classification for GraphQL errors.
"""

__version__ = "0.1.0"
