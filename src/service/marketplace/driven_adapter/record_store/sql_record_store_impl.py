"""
SQL Record Store Implementation

Record store over SQLAlchemy async ORM (PostgreSQL via asyncpg, SQLite via aiosqlite).

Every operation runs in its own transaction. A guarded create locks the guard
row (SELECT ... FOR UPDATE on PostgreSQL), compares its revision and inserts in
the same transaction, so an order can never be written against a product that
changed after it was read.

An update given an expected revision only matches the row while it is still at
that revision; a stale writer touches nothing and gets RecordConflictError.
"""

from datetime import datetime, timezone
from typing import Any, Optional

from sqlalchemy import delete, select, update
from sqlalchemy.exc import SQLAlchemyError
from uuid_utils import uuid7

from src.platform.config.core_setting import Settings
from src.platform.database.orm_db_setting import Base, Database
from src.platform.logging.loguru_io import Logger
from src.service.marketplace.app.interface.i_record_store import (
    IRecordStore,
    Record,
    RecordConflictError,
    RecordGuard,
    RecordNotFoundError,
    RecordStoreError,
    Table,
)
from src.service.marketplace.driven_adapter.model import OrderModel, ProductModel


class SqlRecordStoreImpl(IRecordStore):
    TABLE_MODELS: dict[Table, type[ProductModel] | type[OrderModel]] = {
        Table.PRODUCTS: ProductModel,
        Table.ORDERS: OrderModel,
    }

    def __init__(self, *, database: Database, settings: Settings) -> None:
        self.database = database
        self.settings = settings

    async def initialize(self) -> None:
        if not self.settings.DB_AUTO_CREATE_TABLES:
            return
        try:
            await self.database.create_tables()
        except SQLAlchemyError as e:
            raise RecordStoreError(f'Failed to create tables: {e}') from e

    async def close(self) -> None:
        await self.database.dispose()
        Logger.base.info('🔌 [SQL] Record store closed')

    async def find(self, table: Table, record_id: str) -> Record:
        model = self.TABLE_MODELS[table]
        try:
            async with self.database.session() as session:
                row = await session.get(model, record_id)
        except SQLAlchemyError as e:
            raise RecordStoreError(str(e)) from e
        if row is None:
            raise RecordNotFoundError(table, record_id)
        return self._to_record(row)

    async def list(self, table: Table, where: Optional[dict[str, Any]] = None) -> list[Record]:
        model = self.TABLE_MODELS[table]
        stmt = select(model)
        for attr, value in self._to_columns(model, where or {}).items():
            stmt = stmt.where(getattr(model, attr) == value)
        # uuid7 ids sort in creation order
        stmt = stmt.order_by(model.id)
        try:
            async with self.database.session() as session:
                rows = (await session.execute(stmt)).scalars().all()
        except SQLAlchemyError as e:
            raise RecordStoreError(str(e)) from e
        return [self._to_record(row) for row in rows]

    async def create(
        self, table: Table, fields: dict[str, Any], *, guard: Optional[RecordGuard] = None
    ) -> Record:
        model = self.TABLE_MODELS[table]
        columns = {attr: None for attr in model.FIELD_COLUMNS.values()}
        columns.update(self._to_columns(model, fields))
        try:
            async with self.database.session() as session:
                async with session.begin():
                    if guard is not None:
                        await self._check_guard(session, guard)
                    row = model(
                        id=str(uuid7()),
                        revision=1,
                        created_time=datetime.now(timezone.utc),
                        **columns,
                    )
                    session.add(row)
        except SQLAlchemyError as e:
            raise RecordStoreError(str(e)) from e
        return self._to_record(row)

    async def update(
        self,
        table: Table,
        record_id: str,
        fields: dict[str, Any],
        *,
        expected_revision: Optional[str] = None,
    ) -> Record:
        model = self.TABLE_MODELS[table]
        columns = self._to_columns(model, fields)
        # Compare-and-set in the UPDATE itself: atomic on SQLite and PostgreSQL alike
        stmt = (
            update(model)
            .where(model.id == record_id)
            .values(**columns, revision=model.revision + 1)
            .execution_options(synchronize_session=False)
        )
        if expected_revision is not None:
            stmt = stmt.where(model.revision == self._parse_revision(expected_revision))
        try:
            async with self.database.session() as session:
                async with session.begin():
                    result = await session.execute(stmt)
                    if result.rowcount == 0:
                        current = await session.get(model, record_id)
                        if current is None:
                            raise RecordNotFoundError(table, record_id)
                        Logger.base.warning(
                            f'⚠️ [SQL] Stale write on {table.value}/{record_id}: '
                            f'expected revision {expected_revision}, found {current.revision}'
                        )
                        raise RecordConflictError(
                            RecordGuard(table=table, id=record_id, revision=expected_revision)
                        )
                    row = (
                        await session.execute(
                            select(model)
                            .where(model.id == record_id)
                            .execution_options(populate_existing=True)
                        )
                    ).scalar_one()
        except SQLAlchemyError as e:
            raise RecordStoreError(str(e)) from e
        return self._to_record(row)

    async def destroy(self, table: Table, record_id: str) -> None:
        model = self.TABLE_MODELS[table]
        try:
            async with self.database.session() as session:
                async with session.begin():
                    result = await session.execute(delete(model).where(model.id == record_id))
        except SQLAlchemyError as e:
            raise RecordStoreError(str(e)) from e
        if result.rowcount == 0:
            raise RecordNotFoundError(table, record_id)

    async def _check_guard(self, session, guard: RecordGuard) -> None:
        guard_model = self.TABLE_MODELS[guard.table]
        stmt = (
            select(guard_model.revision)
            .where(guard_model.id == guard.id)
            .with_for_update()  # not rendered on SQLite
        )
        current = (await session.execute(stmt)).scalar_one_or_none()
        if current is None or str(current) != guard.revision:
            Logger.base.warning(
                f'⚠️ [SQL] Guard failed for {guard.table.value}/{guard.id}: '
                f'expected revision {guard.revision}, found {current}'
            )
            raise RecordConflictError(guard)

    @staticmethod
    def _to_columns(model: type[Base], fields: dict[str, Any]) -> dict[str, Any]:
        field_columns: dict[str, str] = model.FIELD_COLUMNS  # type: ignore[attr-defined]
        unknown = [name for name in fields if name not in field_columns]
        if unknown:
            raise RecordStoreError(
                f'Unknown field(s) for {model.__tablename__}: {", ".join(unknown)}'
            )
        return {field_columns[name]: value for name, value in fields.items()}

    @staticmethod
    def _to_record(row: ProductModel | OrderModel) -> Record:
        fields = {
            name: getattr(row, attr)
            for name, attr in row.FIELD_COLUMNS.items()
            if getattr(row, attr) is not None
        }
        return Record(
            id=row.id,
            fields=fields,
            revision=str(row.revision),
            created_time=row.created_time,
        )

    @staticmethod
    def _parse_revision(revision: str) -> int:
        # revisions from this store are integer counters; anything else can never match
        return int(revision) if revision.isdigit() else -1
