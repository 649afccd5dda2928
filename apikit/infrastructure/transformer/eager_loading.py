"""Eager loading for SQLAlchemy result collections.

Endpoints return a ``ModelCollection`` instead of a plain list to let the
transformer adapter load the relations a client requested with one
``selectinload`` query, rather than one lazy load per item.

Usage:
    @router.get("/users")
    async def index(session: AsyncSession = Depends(get_session)):
        users = (await session.scalars(select(User))).all()
        return ModelCollection(users, session)

    # GET /api/users?include=posts loads User.posts for every user at once
"""

import inspect
from collections.abc import Awaitable, Iterable
from typing import Any

from sqlalchemy import inspect as sa_inspect
from sqlalchemy import select, tuple_
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import selectinload

from apikit.core.enums import ErrorCode
from apikit.core.result import Failure, Result, Success
from apikit.domain.errors import EagerLoadError

LoadResult = Result[None, EagerLoadError]


class ModelCollection(list):
    """List of ORM instances of one mapped class bound to a session.

    Args:
        items: ORM instances (all of the same mapped class).
        session: ``Session`` or ``AsyncSession`` the instances belong to.
    """

    def __init__(self, items: Iterable[Any] = (), session: Any = None) -> None:
        super().__init__(items)
        self.session = session

    def load(self, *relations: str) -> LoadResult | Awaitable[LoadResult]:
        """Load relations for every item.

        Returns:
            Result (sync session) or an awaitable Result (async session).
            Unknown relations and database errors give Failure.
        """
        if not self or not relations:
            return Success(value=None)

        model = type(self[0])
        unknown = [name for name in relations if not hasattr(model, name)]
        if unknown:
            return Failure(
                error=EagerLoadError(
                    code=ErrorCode.EAGER_LOAD_FAILED,
                    message=f"Unknown relations on {model.__name__}: {', '.join(unknown)}",
                )
            )

        if any(sa_inspect(item).identity is None for item in self):
            return Failure(
                error=EagerLoadError(
                    code=ErrorCode.EAGER_LOAD_FAILED,
                    message=f"Cannot eager load unsaved {model.__name__} instances",
                )
            )

        statement = self._statement(model, relations)
        try:
            result = self.session.execute(statement)
        except SQLAlchemyError as exc:
            return self._failure(model, exc)

        if inspect.isawaitable(result):
            return self._load_async(model, result)

        result.scalars().all()
        return Success(value=None)

    async def _load_async(self, model: type, pending: Awaitable[Any]) -> LoadResult:
        try:
            result = await pending
        except SQLAlchemyError as exc:
            return self._failure(model, exc)
        result.scalars().all()
        return Success(value=None)

    def _statement(self, model: type, relations: tuple[str, ...]) -> Any:
        mapper = sa_inspect(model)
        primary_key = mapper.primary_key
        identities = [sa_inspect(item).identity for item in self]

        if len(primary_key) == 1:
            condition = primary_key[0].in_([identity[0] for identity in identities])
        else:
            condition = tuple_(*primary_key).in_(identities)

        return (
            select(model)
            .where(condition)
            .options(*(selectinload(getattr(model, name)) for name in relations))
            .execution_options(populate_existing=True)
        )

    @staticmethod
    def _failure(model: type, exc: SQLAlchemyError) -> LoadResult:
        return Failure(
            error=EagerLoadError(
                code=ErrorCode.EAGER_LOAD_FAILED,
                message=f"Failed to eager load {model.__name__} relations: {exc}",
            )
        )
