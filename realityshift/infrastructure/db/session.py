# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from collections.abc import Iterator
from contextlib import contextmanager

from sqlalchemy import create_engine, text
from sqlalchemy.engine import Engine
from sqlalchemy.orm import DeclarativeBase, Session, sessionmaker
from sqlalchemy.pool import StaticPool

from realityshift.shared.config import DatabaseConfig
from realityshift.shared.logging import logger


class Base(DeclarativeBase):
    pass


def _is_memory_sqlite(url: str) -> bool:
    return url in ("sqlite://", "sqlite:///:memory:") or "mode=memory" in url


class Database:
    """Engine plus session factory with an explicit create/dispose lifecycle."""

    def __init__(self, config: DatabaseConfig) -> None:
        self.url = config.url
        self.engine: Engine = self._create_engine(config)
        self.session_factory = sessionmaker(
            bind=self.engine, autoflush=False, autocommit=False, expire_on_commit=False
        )

    @staticmethod
    def _create_engine(config: DatabaseConfig) -> Engine:
        if config.url.startswith("sqlite"):
            connect_args: dict[str, object] = {
                "check_same_thread": False,
                "timeout": int(config.pool_timeout),
            }
            if _is_memory_sqlite(config.url):
                # One shared connection, otherwise each checkout sees an empty database
                return create_engine(
                    config.url, connect_args=connect_args, poolclass=StaticPool
                )
            return create_engine(config.url, connect_args=connect_args, pool_pre_ping=True)

        return create_engine(
            config.url,
            echo=False,
            pool_pre_ping=True,
            pool_size=config.pool_size,
            max_overflow=config.max_overflow,
            pool_timeout=config.pool_timeout,
        )

    def create_all(self) -> None:
        from realityshift.infrastructure.db import models  # noqa: F401

        Base.metadata.create_all(bind=self.engine)
        logger.info("Database schema ensured")

    def drop_all(self) -> None:
        Base.metadata.drop_all(bind=self.engine)

    def ping(self) -> bool:
        with self.engine.connect() as connection:
            connection.execute(text("SELECT 1"))
        return True

    def dispose(self) -> None:
        self.engine.dispose()
        logger.info("Database engine disposed")

    @contextmanager
    def session_scope(self) -> Iterator[Session]:
        session = self.session_factory()
        logger.debug("db.session: opened session")
        try:
            yield session
            session.commit()
            logger.debug("db.session: committed session")
        except Exception:
            logger.exception("db.session: error, rolling back")
            session.rollback()
            raise
        finally:
            session.close()
            logger.debug("db.session: closed session")


__all__ = ["Base", "Database"]
