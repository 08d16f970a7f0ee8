"""Persistence-only base repository over SQLAlchemy 2.x ``select()``.

Repositories never begin, commit or roll back: the Unit of Work that hands
them a session owns the transaction. Lookups and updates go through
per-repository whitelists so a caller cannot filter on, or overwrite,
columns such as ``client_secret`` or ``vendor_customer_id`` by accident.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any, Generic, TypeVar, cast

from sqlalchemy import Select, and_, select
from sqlalchemy.orm import InstrumentedAttribute, Session

from customer_auth.core.extensions import db

E = TypeVar("E")  # SQLAlchemy mapped entity type


class BaseRepository(Generic[E]):
    """CRUD helpers for one mapped model.

    Subclasses set ``model`` and widen ``_filterable_fields`` /
    ``_updatable_fields``; both whitelists are empty by default.
    """

    #: SQLAlchemy mapped model (must be set by subclasses)
    model: type[E]

    def __init__(self, session: Session | None = None) -> None:
        self._session: Session | None = session

    @property
    def session(self) -> Session:
        """Return the injected session, or the Flask-scoped one."""
        if self._session is not None:
            return self._session
        return cast(Session, db.session)

    # ------------------------------ Extensibility ----------------------------

    def _filterable_fields(self) -> Mapping[str, InstrumentedAttribute[Any]]:
        """Whitelist mapping of public filter keys to model attributes."""
        return {}

    def _updatable_fields(self) -> set[str]:
        """Whitelist of public keys that can be assigned on update."""
        return set()

    # ------------------------------ Internals --------------------------------

    def _apply_equality_filters(
        self,
        stmt: Select[Any],
        filters: Mapping[str, Any],
    ) -> Select[Any]:
        """Apply whitelisted equality filters.

        :raises ValueError: If a key is not in ``_filterable_fields``.
        """
        allowed = self._filterable_fields()
        clauses: list[Any] = []
        for key, value in filters.items():
            col = allowed.get(key)
            if col is None:
                raise ValueError(f"Unknown or non-filterable field: {key!r}")
            clauses.append(col == value)
        return stmt.where(and_(*clauses)) if clauses else stmt

    def _sanitize_update_fields(self, fields: Mapping[str, Any]) -> dict[str, Any]:
        """Return ``fields`` after checking every key against the whitelist.

        :raises ValueError: If unknown keys are present.
        """
        allowed = self._updatable_fields()
        unknown = sorted(k for k in fields if k not in allowed)
        if unknown:
            raise ValueError(f"Unknown or non-updatable fields: {unknown}")
        return dict(fields)

    # --------------------------------- CRUD ----------------------------------

    def add(self, instance: E) -> E:
        """Stage a new entity and flush to materialize defaults such as the PK."""
        self.session.add(instance)
        self.flush()
        return instance

    def get(self, entity_id: Any) -> E | None:
        """Retrieve a single entity by primary key."""
        stmt = select(self.model).where(self.model.id == entity_id)  # type: ignore[attr-defined]
        return cast(E | None, self.session.execute(stmt).scalars().first())

    def find_one(self, **filters: Any) -> E | None:
        """Find a single entity by whitelisted equality filters."""
        stmt = self._apply_equality_filters(select(self.model), filters)
        return cast(E | None, self.session.execute(stmt).scalars().first())

    def list_all(self) -> list[E]:
        """Return every row ordered by creation time."""
        stmt = select(self.model).order_by(self.model.created_at)  # type: ignore[attr-defined]
        return list(self.session.execute(stmt).scalars())

    def flush(self) -> None:
        """Flush pending changes to the database without committing."""
        self.session.flush()

    def detach(self, instance: E) -> E:
        """Expunge ``instance`` so its loaded columns outlive the transaction."""
        self.session.expunge(instance)
        return instance

    # ----------------------------- Safe updates -------------------------------

    def assign_updates(self, instance: E, fields: Mapping[str, Any]) -> E:
        """Assign whitelisted fields onto ``instance`` (no flush)."""
        for key, value in self._sanitize_update_fields(fields).items():
            setattr(instance, key, value)
        return instance

    def update(self, entity_id: Any, **fields: Any) -> E | None:
        """Load by PK, assign whitelisted fields and flush.

        :returns: Updated entity, or ``None`` when no row has that id.
        :raises ValueError: If a non-updatable field is supplied.
        """
        instance = self.get(entity_id)
        if instance is None:
            return None
        self.assign_updates(instance, fields)
        self.flush()
        return instance
