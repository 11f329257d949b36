# src/resolver/resolver_factory.py — v1
"""Factory for resolver instantiation."""

from __future__ import annotations

from playerbook.config.settings import Settings
from playerbook.resolver.base_resolver import BaseResolver


class UnsupportedResolverError(ValueError):
    """Raised when a resolver backend is not registered."""


def create_resolver(settings: Settings | None = None) -> BaseResolver:
    """Instantiate the configured resolver backend.

    Args:
        settings: Application settings. Defaults to the Mojang backend.

    Returns:
        Configured BaseResolver implementation.
    """
    backend = "mojang" if settings is None else settings.resolver_backend

    if backend == "mojang":
        from playerbook.resolver.mojang_resolver import MojangResolver
        if settings is None:
            return MojangResolver()
        return MojangResolver(
            api_url=settings.mojang_api_url,
            session_url=settings.mojang_session_url,
            timeout_s=settings.resolver_timeout_s,
        )

    if backend == "static":
        from playerbook.resolver.static_resolver import StaticResolver
        if settings is None or not settings.static_resolver_file:
            return StaticResolver()
        return StaticResolver.from_file(settings.static_resolver_file)

    raise UnsupportedResolverError(f"Unsupported resolver backend: {backend!r}")
