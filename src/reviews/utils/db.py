"""Schema management for the SQL providers behind the reviews domain."""

from protean.domain import Domain
from sqlalchemy import create_engine

SQL_PROVIDERS = ("sqlite", "postgresql")


def _sql_providers(domain: Domain):
    return [provider for provider in domain.providers.values() if provider.conn_info["provider"] in SQL_PROVIDERS]


def _register_models(domain: Domain, provider) -> None:
    """Load the DAO of every record stored in ``provider`` so its table joins the metadata."""
    records = [*domain.registry.aggregates.values(), *domain.registry.entities.values()]
    for record in records:
        if record.cls.meta_.provider == provider.name:
            domain.repository_for(record.cls)._dao  # noqa: B018


def setup_db(domain: Domain) -> list[str]:
    """Create tables for users, reviews and feedback. Returns the provider names touched."""
    touched = []
    with domain.domain_context():
        for provider in _sql_providers(domain):
            _register_models(domain, provider)
            provider._metadata.create_all(create_engine(provider.conn_info["database_uri"]))
            touched.append(provider.name)
    return touched


def drop_db(domain: Domain) -> list[str]:
    touched = []
    with domain.domain_context():
        for provider in _sql_providers(domain):
            _register_models(domain, provider)
            provider._metadata.drop_all(create_engine(provider.conn_info["database_uri"]))
            touched.append(provider.name)
    return touched


def reset_db(domain: Domain) -> list[str]:
    drop_db(domain)
    return setup_db(domain)
