from datetime import datetime, timezone
from typing import Any

from sqlalchemy import ColumnElement, Select, and_, func, or_, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from campus_market.application.interfaces.catalog_store import CatalogStore
from campus_market.domain.entities.listing import Listing
from campus_market.domain.enums.listing_status import ListingStatus
from campus_market.domain.search.query_plan import (
    ListingField,
    Operator,
    Predicate,
    QueryPlan,
)
from campus_market.infrastructure.database.errors import storage_errors
from campus_market.infrastructure.database.models import ListingModel, ListingStatusHistoryModel

_COLUMNS: dict[ListingField, Any] = {
    ListingField.ID: ListingModel.id,
    ListingField.NAME: ListingModel.name,
    ListingField.DESCRIPTION: ListingModel.description,
    ListingField.PRICE: ListingModel.price,
    ListingField.CATEGORY: ListingModel.category_id,
    ListingField.CONDITION: ListingModel.condition,
    ListingField.STATUS: ListingModel.status,
    ListingField.CREATED_AT: ListingModel.created_at,
}


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _compare(column: Any, operator: Operator, value: Any) -> ColumnElement[bool]:
    if operator is Operator.CONTAINS:
        # autoescape keeps % and _ in the keyword literal
        return column.icontains(value, autoescape=True)
    if operator is Operator.EQUALS:
        return column == value
    if operator is Operator.AT_LEAST:
        return column >= value
    if operator is Operator.AT_MOST:
        return column <= value
    if operator is Operator.ONE_OF:
        return column.in_(list(value))
    raise ValueError(f"Unsupported operator {operator!r}")


def compile_predicate(predicate: Predicate) -> ColumnElement[bool]:
    clauses = [_compare(_COLUMNS[f], predicate.operator, predicate.value) for f in predicate.fields]
    return clauses[0] if len(clauses) == 1 else or_(*clauses)


def _filtered(stmt: Select, plan: QueryPlan) -> Select:  # type: ignore[type-arg]
    if plan.predicates:
        stmt = stmt.where(and_(*(compile_predicate(p) for p in plan.predicates)))
    return stmt


def _ordered(stmt: Select, plan: QueryPlan) -> Select:  # type: ignore[type-arg]
    for term in plan.ordering:
        column = _COLUMNS[term.field]
        stmt = stmt.order_by(column.desc() if term.descending else column.asc())
    return stmt


def build_select(plan: QueryPlan) -> Select:  # type: ignore[type-arg]
    """SELECT for a plan; every predicate value becomes a bind parameter."""
    return _ordered(_filtered(select(ListingModel), plan), plan)


def build_count(plan: QueryPlan) -> Select:  # type: ignore[type-arg]
    return _filtered(select(func.count()).select_from(ListingModel), plan)


def _to_domain(model: ListingModel) -> Listing:
    return Listing(
        id=model.id,
        name=model.name,
        description=model.description,
        price=model.price,
        condition=model.condition,
        category_id=model.category_id,
        seller_id=model.seller_id,
        status=ListingStatus(model.status),
        created_at=model.created_at,
        status_changed_at=model.status_changed_at,
    )


def _to_model(listing: Listing) -> ListingModel:
    return ListingModel(
        name=listing.name,
        description=listing.description,
        price=listing.price,
        condition=listing.condition,
        category_id=listing.category_id,
        seller_id=listing.seller_id,
        status=listing.status,
        created_at=listing.created_at,
        status_changed_at=listing.status_changed_at,
    )


class SqlAlchemyCatalogStore(CatalogStore):
    """SQLAlchemy implementation of the catalog store."""

    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def find(self, plan: QueryPlan, *, limit: int, offset: int) -> list[Listing]:
        with storage_errors("find"):
            result = await self._session.execute(build_select(plan).limit(limit).offset(offset))
            return [_to_domain(m) for m in result.scalars().all()]

    async def count(self, plan: QueryPlan) -> int:
        with storage_errors("count"):
            result = await self._session.execute(build_count(plan))
            return int(result.scalar_one())

    async def conditional_update_status(
        self,
        listing_id: int,
        expected: ListingStatus,
        new: ListingStatus,
        *,
        triggered_by: str,
    ) -> bool:
        now = _utcnow()
        try:
            with storage_errors("conditional_update_status"):
                result = await self._session.execute(
                    update(ListingModel)
                    .where(ListingModel.id == listing_id, ListingModel.status == expected)
                    .values(status=new, status_changed_at=now)
                )
                if result.rowcount != 1:
                    await self._session.rollback()
                    return False

                self._session.add(
                    ListingStatusHistoryModel(
                        listing_id=listing_id,
                        from_status=expected,
                        to_status=new,
                        transitioned_at=now,
                        triggered_by=triggered_by,
                    )
                )
                await self._session.commit()
                return True
        except Exception:
            await self._session.rollback()
            raise

    async def add(self, listing: Listing) -> Listing:
        model = _to_model(listing)
        try:
            with storage_errors("add"):
                self._session.add(model)
                await self._session.flush()
                self._session.add(
                    ListingStatusHistoryModel(
                        listing_id=model.id,
                        from_status=None,
                        to_status=model.status,
                        transitioned_at=model.status_changed_at,
                        triggered_by=f"seller:{model.seller_id}",
                    )
                )
                await self._session.commit()
        except Exception:
            await self._session.rollback()
            raise
        return _to_domain(model)

    async def get_by_id(self, listing_id: int) -> Listing | None:
        with storage_errors("get_by_id"):
            model = await self._session.get(ListingModel, listing_id, populate_existing=True)
        return _to_domain(model) if model is not None else None

    async def list_for_seller(self, seller_id: int) -> list[Listing]:
        with storage_errors("list_for_seller"):
            result = await self._session.execute(
                select(ListingModel)
                .where(ListingModel.seller_id == seller_id)
                .order_by(ListingModel.id.asc())
            )
            return [_to_domain(m) for m in result.scalars().all()]

    async def list_all(self) -> list[Listing]:
        with storage_errors("list_all"):
            result = await self._session.execute(select(ListingModel).order_by(ListingModel.id.asc()))
            return [_to_domain(m) for m in result.scalars().all()]

    async def suggest_names(self, plan: QueryPlan, *, limit: int) -> list[str]:
        stmt = _ordered(_filtered(select(ListingModel.name), plan), plan)
        with storage_errors("suggest_names"):
            result = await self._session.execute(stmt.limit(limit))
            return list(result.scalars().all())
