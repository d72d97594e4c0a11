"""
Record store port

A narrow contract over a tabular record service holding the marketplace
tables. Records are addressed by an opaque string id and carry a revision
string that changes on every write.
"""

from abc import ABC, abstractmethod
from datetime import datetime
from enum import StrEnum
from typing import Any, Optional

import attrs


class Table(StrEnum):
    PRODUCTS = 'Products'
    ORDERS = 'Orders'


@attrs.define(frozen=True)
class Record:
    id: str
    fields: dict[str, Any]
    revision: str
    created_time: Optional[datetime] = None


@attrs.define(frozen=True)
class RecordGuard:
    """A write only proceeds while `table/id` still exists at `revision`."""

    table: Table
    id: str
    revision: Optional[str]


class RecordStoreError(Exception):
    """Any backend failure that is not a missing record or a guard mismatch."""


class RecordNotFoundError(RecordStoreError):
    def __init__(self, table: Table, record_id: str) -> None:
        self.table = table
        self.record_id = record_id
        super().__init__(f'{table.value} record {record_id} not found')


class RecordConflictError(RecordStoreError):
    def __init__(self, guard: RecordGuard) -> None:
        self.guard = guard
        super().__init__(f'{guard.table.value} record {guard.id} changed since it was read')


class IRecordStore(ABC):
    @abstractmethod
    async def initialize(self) -> None:
        pass

    @abstractmethod
    async def close(self) -> None:
        pass

    @abstractmethod
    async def find(self, table: Table, record_id: str) -> Record:
        pass

    @abstractmethod
    async def list(self, table: Table, where: Optional[dict[str, Any]] = None) -> list[Record]:
        pass

    @abstractmethod
    async def create(
        self, table: Table, fields: dict[str, Any], *, guard: Optional[RecordGuard] = None
    ) -> Record:
        pass

    @abstractmethod
    async def update(
        self,
        table: Table,
        record_id: str,
        fields: dict[str, Any],
        *,
        expected_revision: Optional[str] = None,
    ) -> Record:
        """
        With `expected_revision`, the write happens only while the record is still
        at that revision; otherwise RecordConflictError and nothing is written.
        """
        pass

    @abstractmethod
    async def destroy(self, table: Table, record_id: str) -> None:
        pass
