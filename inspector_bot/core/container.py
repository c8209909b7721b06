"""Dependency-injection container.

Wires the session store from configuration so the entry point and the tests
build it the same way.
"""

from dependency_injector import containers, providers

from inspector_bot.services.session_store import create_session_store


class Container(containers.DeclarativeContainer):
    """DI container for the application."""

    config = providers.Configuration()

    # Services
    session_store = providers.Singleton(
        create_session_store,
        redis_url=config.session.redis_url,
        key_prefix=config.session.key_prefix,
        ttl=config.session.ttl,
    )
