"""
Airtable Record Store Implementation

Record store over the Airtable REST API (https://airtable.com/developers/web/api).

- Records: {"id": "rec...", "createdTime": "...", "fields": {...}}
- list follows the `offset` cursor until the table is exhausted
- revision is the record's `updatedAt` field, falling back to `createdTime`
- guarded creates re-read the guard record right before writing; Airtable has
  no transactions so the window is narrowed, not closed; updates given an
  expected revision do the same
- linked-record fields (orders.productId) are written as a list of record ids
"""

from datetime import datetime
from typing import Any, Optional
from urllib.parse import quote

import httpx
import orjson

from src.platform.config.core_setting import Settings
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


NOT_FOUND_ERROR_TYPES = frozenset({'NOT_FOUND', 'INVALID_RECORD_ID', 'MODEL_ID_NOT_FOUND'})
PAGE_SIZE = 100

# Fields that are "Link to another record" columns in the base
LINK_FIELDS: dict[Table, frozenset[str]] = {
    Table.PRODUCTS: frozenset(),
    Table.ORDERS: frozenset({'productId'}),
}


def escape_formula_value(value: Any) -> str:
    text = str(value)
    return text.replace('\\', '\\\\').replace("'", "\\'")


def build_filter_formula(where: dict[str, Any]) -> str:
    """{'buyerId': 'u1'} -> AND({buyerId} = 'u1')"""
    clauses = [f"{{{field}}} = '{escape_formula_value(value)}'" for field, value in where.items()]
    return f'AND({", ".join(clauses)})'


def _parse_created_time(value: Optional[str]) -> Optional[datetime]:
    if not value:
        return None
    return datetime.fromisoformat(value.replace('Z', '+00:00'))


class AirtableRecordStoreImpl(IRecordStore):
    def __init__(
        self, *, settings: Settings, transport: Optional[httpx.AsyncBaseTransport] = None
    ) -> None:
        self.settings = settings
        self.transport = transport
        self.table_names = {
            Table.PRODUCTS: settings.AIRTABLE_PRODUCTS_TABLE,
            Table.ORDERS: settings.AIRTABLE_ORDERS_TABLE,
        }
        self._client: Optional[httpx.AsyncClient] = None

    async def initialize(self) -> None:
        if not self.settings.AIRTABLE_BASE_ID:
            raise RecordStoreError('AIRTABLE_BASE_ID is not configured')
        self._get_client()
        Logger.base.info(f'🔗 [AIRTABLE] Connected to base {self.settings.AIRTABLE_BASE_ID}')

    async def close(self) -> None:
        if self._client is not None:
            await self._client.aclose()
            self._client = None
        Logger.base.info('🔌 [AIRTABLE] Record store closed')

    async def find(self, table: Table, record_id: str) -> Record:
        data = await self._request('GET', table, record_id)
        return self._to_record(data)

    async def list(self, table: Table, where: Optional[dict[str, Any]] = None) -> list[Record]:
        params: dict[str, Any] = {'pageSize': PAGE_SIZE}
        if where:
            params['filterByFormula'] = build_filter_formula(where)

        records: list[Record] = []
        while True:
            data = await self._request('GET', table, params=params)
            records.extend(self._to_record(item) for item in data.get('records', []))
            offset = data.get('offset')
            if not offset:
                return records
            params = {**params, 'offset': offset}

    async def create(
        self, table: Table, fields: dict[str, Any], *, guard: Optional[RecordGuard] = None
    ) -> Record:
        if guard is not None:
            try:
                current = await self.find(guard.table, guard.id)
            except RecordNotFoundError:
                raise RecordConflictError(guard)
            if current.revision != guard.revision:
                raise RecordConflictError(guard)

        payload = {'fields': self._to_api_fields(table, fields), 'typecast': True}
        data = await self._request('POST', table, payload=payload)
        return self._to_record(data)

    async def update(
        self,
        table: Table,
        record_id: str,
        fields: dict[str, Any],
        *,
        expected_revision: Optional[str] = None,
    ) -> Record:
        if expected_revision is not None:
            current = await self.find(table, record_id)
            if current.revision != expected_revision:
                Logger.base.warning(
                    f'⚠️ [AIRTABLE] Stale write on {table.value}/{record_id}: '
                    f'expected revision {expected_revision}, found {current.revision}'
                )
                raise RecordConflictError(
                    RecordGuard(table=table, id=record_id, revision=expected_revision)
                )

        payload = {'fields': self._to_api_fields(table, fields), 'typecast': True}
        data = await self._request('PATCH', table, record_id, payload=payload)
        return self._to_record(data)

    async def destroy(self, table: Table, record_id: str) -> None:
        await self._request('DELETE', table, record_id)

    def _get_client(self) -> httpx.AsyncClient:
        if self._client is None:
            api_key = self.settings.AIRTABLE_API_KEY.get_secret_value()
            self._client = httpx.AsyncClient(
                base_url=f'{self.settings.AIRTABLE_API_URL.rstrip("/")}/{self.settings.AIRTABLE_BASE_ID}',
                headers={
                    'Authorization': f'Bearer {api_key}',
                    'Content-Type': 'application/json',
                },
                timeout=self.settings.AIRTABLE_TIMEOUT,
                transport=self.transport,
            )
        return self._client

    async def _request(
        self,
        method: str,
        table: Table,
        record_id: Optional[str] = None,
        *,
        params: Optional[dict[str, Any]] = None,
        payload: Optional[dict[str, Any]] = None,
    ) -> dict[str, Any]:
        path = f'/{quote(self.table_names[table], safe="")}'
        if record_id is not None:
            path = f'{path}/{quote(record_id, safe="")}'

        try:
            response = await self._get_client().request(
                method,
                path,
                params=params,
                content=orjson.dumps(payload) if payload is not None else None,
            )
        except httpx.HTTPError as e:
            raise RecordStoreError(f'Airtable request failed: {e}') from e

        if response.is_success:
            return orjson.loads(response.content) if response.content else {}

        error_type, message = self._parse_error(response)
        if record_id is not None and (
            response.status_code == 404 or error_type in NOT_FOUND_ERROR_TYPES
        ):
            raise RecordNotFoundError(table, record_id)
        Logger.base.error(
            f'❌ [AIRTABLE] {method} {path} -> {response.status_code} {error_type}: {message}'
        )
        raise RecordStoreError(message or f'Airtable returned {response.status_code}')

    @staticmethod
    def _parse_error(response: httpx.Response) -> tuple[Optional[str], Optional[str]]:
        try:
            body = orjson.loads(response.content)
        except orjson.JSONDecodeError:
            return None, response.text or None
        error = body.get('error') if isinstance(body, dict) else None
        if isinstance(error, dict):
            return error.get('type'), error.get('message') or error.get('type')
        if isinstance(error, str):
            return error, error
        return None, None

    @staticmethod
    def _to_api_fields(table: Table, fields: dict[str, Any]) -> dict[str, Any]:
        """{'productId': 'recP'} -> {'productId': ['recP']} for link columns"""
        link_fields = LINK_FIELDS[table]
        return {
            name: [value] if name in link_fields and not isinstance(value, list) else value
            for name, value in fields.items()
        }

    @staticmethod
    def _to_record(data: dict[str, Any]) -> Record:
        fields = data.get('fields') or {}
        created_time = data.get('createdTime')
        return Record(
            id=data['id'],
            fields=fields,
            revision=str(fields.get('updatedAt') or created_time or ''),
            created_time=_parse_created_time(created_time),
        )
