"""Clients for external metadata APIs."""

from .oembed_client import OEmbedClient

__all__ = ["OEmbedClient"]
