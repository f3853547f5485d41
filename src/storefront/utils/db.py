"""Database lifecycle: connection check, schema management, seed data.

``DatabaseService`` is constructed explicitly around a domain and owns the
SQLAlchemy engine it opens. Providers without a SQL backend (the in-memory
provider used in development and tests) need no connection and no schema.
"""

import os
import signal
import sys

from protean.domain import Domain
from protean.exceptions import ConfigurationError
from sqlalchemy import create_engine, text
from sqlalchemy.exc import SQLAlchemyError

from storefront.utils.logging import get_logger, log_duration

logger = get_logger(__name__)

SQL_PROVIDERS = ("sqlite", "postgresql")

POOL_SIZE = 10
POOL_TIMEOUT = 5  # seconds
CONNECT_TIMEOUT = 45  # seconds

DEFAULT_CATEGORIES = [
    {"name": "Electronics", "slug": "electronics", "sort_order": 1},
    {"name": "Clothing", "slug": "clothing", "sort_order": 2},
    {"name": "Home & Garden", "slug": "home-garden", "sort_order": 3},
    {"name": "Sports & Outdoors", "slug": "sports-outdoors", "sort_order": 4},
    {"name": "Books", "slug": "books", "sort_order": 5},
]

DEFAULT_ADMIN_EMAIL = "admin@ecommerce.com"
DEFAULT_ADMIN_PASSWORD = "Admin123!"


def _engine_options(database_uri: str) -> dict:
    if database_uri.startswith("postgresql"):
        return {
            "pool_size": POOL_SIZE,
            "pool_timeout": POOL_TIMEOUT,
            "pool_pre_ping": True,
            "connect_args": {"connect_timeout": CONNECT_TIMEOUT},
        }
    return {}


def _force_daos(domain: Domain, provider) -> None:
    """Touch every repository DAO on ``provider`` so its table is registered.

    SQLAlchemy models are built lazily on first DAO access; ``create_all``
    only knows about the tables that exist by then.
    """
    for _, aggregate_record in domain.registry.aggregates.items():
        if aggregate_record.cls.meta_.provider == provider.name:
            domain.repository_for(aggregate_record.cls)._dao  # noqa: B018

    for _, entity_record in domain.registry.entities.items():
        if entity_record.cls.meta_.provider == provider.name:
            domain.repository_for(entity_record.cls)._dao  # noqa: B018


class DatabaseService:
    def __init__(self, domain: Domain, database_uri: str | None = None):
        self.domain = domain
        self.database_uri = database_uri
        self._engine = None
        self._connected = False

    # -------------------------------------------------------------------
    # Connection lifecycle
    # -------------------------------------------------------------------
    def _default_conn_info(self) -> dict:
        with self.domain.domain_context():
            return dict(self.domain.providers["default"].conn_info)

    @property
    def provider_name(self) -> str:
        if self.database_uri:
            return self.database_uri.split(":", 1)[0].split("+", 1)[0]
        return self._default_conn_info()["provider"]

    @property
    def is_connected(self) -> bool:
        return self._connected

    def connect(self) -> None:
        """Open the engine and prove the database answers.

        Raises ConfigurationError when a SQL provider has no connection string.
        SQLAlchemy errors are logged and re-raised.
        """
        if self._connected:
            return

        provider = self.provider_name
        if provider not in SQL_PROVIDERS:
            self._connected = True
            logger.info("database_connected", provider=provider)
            return

        database_uri = self.database_uri or self._default_conn_info().get("database_uri")
        if not database_uri:
            raise ConfigurationError("DATABASE_URL is not configured")

        engine = create_engine(database_uri, **_engine_options(database_uri))
        try:
            with log_duration(logger, "database_connect", provider=provider):
                with engine.connect() as connection:
                    connection.execute(text("SELECT 1"))
        except SQLAlchemyError as exc:
            engine.dispose()
            logger.error("database_connection_failed", provider=provider, error=str(exc))
            raise

        self._engine = engine
        self._connected = True
        logger.info("database_connected", provider=provider)

    def close(self) -> None:
        if self._engine is not None:
            self._engine.dispose()
            self._engine = None

        if self._connected:
            self._connected = False
            logger.info("database_disconnected")

    def health_check(self) -> dict:
        """Report whether the database currently answers a trivial query."""
        if not self._connected:
            return {"status": "disconnected", "provider": self.provider_name}

        if self._engine is None:
            return {"status": "healthy", "provider": self.provider_name}

        try:
            with self._engine.connect() as connection:
                connection.execute(text("SELECT 1"))
        except SQLAlchemyError as exc:
            logger.warning("database_health_check_failed", error=str(exc))
            return {"status": "unhealthy", "provider": self.provider_name, "error": str(exc)}

        return {"status": "healthy", "provider": self.provider_name}

    def install_signal_handlers(self) -> None:
        """Close connections on SIGINT and SIGTERM before the process exits."""
        signal.signal(signal.SIGINT, self._handle_termination)
        signal.signal(signal.SIGTERM, self._handle_termination)

    def _handle_termination(self, signum, frame):
        logger.info("termination_signal_received", signal=signal.Signals(signum).name)
        try:
            self.close()
        except Exception:
            logger.exception("database_close_failed")
            sys.exit(1)
        sys.exit(0)

    # -------------------------------------------------------------------
    # Schema
    # -------------------------------------------------------------------
    def setup_schema(self) -> None:
        """Create tables for every SQL-backed provider."""
        with self.domain.domain_context():
            for _, provider in self.domain.providers.items():
                if provider.conn_info["provider"] in SQL_PROVIDERS:
                    engine = create_engine(provider.conn_info["database_uri"])
                    _force_daos(self.domain, provider)
                    provider._metadata.create_all(engine)
                    engine.dispose()
                    logger.info("schema_created", provider=provider.name)

    def drop_schema(self) -> None:
        with self.domain.domain_context():
            for _, provider in self.domain.providers.items():
                if provider.conn_info["provider"] in SQL_PROVIDERS:
                    engine = create_engine(provider.conn_info["database_uri"])
                    provider._metadata.drop_all(engine)
                    engine.dispose()
                    logger.info("schema_dropped", provider=provider.name)

    # -------------------------------------------------------------------
    # Seed data
    # -------------------------------------------------------------------
    def seed(self) -> dict:
        """Create the default categories and the admin account when missing.

        Existing records are left alone, so running this twice is harmless.
        """
        from storefront.category.category import Category
        from storefront.category.management import CreateCategory
        from storefront.shared.types import UserRole
        from storefront.user.user import User

        created = {"categories": 0, "admin": False}

        with self.domain.domain_context():
            category_repo = self.domain.repository_for(Category)
            for category in DEFAULT_CATEGORIES:
                if category_repo.find_by_name(category["name"]) is None:
                    self.domain.process(CreateCategory(**category), asynchronous=False)
                    created["categories"] += 1

            admin_email = os.getenv("ADMIN_EMAIL", DEFAULT_ADMIN_EMAIL)
            user_repo = self.domain.repository_for(User)
            if user_repo.find_by_email(admin_email) is None:
                admin = User.register(
                    email=admin_email,
                    password=os.getenv("ADMIN_PASSWORD", DEFAULT_ADMIN_PASSWORD),
                    first_name="Admin",
                    last_name="User",
                    role=UserRole.ADMIN.value,
                    is_email_verified=True,
                )
                user_repo.add(admin)
                created["admin"] = True

        logger.info("database_seeded", **created)
        return created
