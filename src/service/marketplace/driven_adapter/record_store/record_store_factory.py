from src.platform.config.core_setting import Settings
from src.platform.database.orm_db_setting import Database
from src.platform.logging.loguru_io import Logger
from src.service.marketplace.app.interface.i_record_store import IRecordStore
from src.service.marketplace.driven_adapter.record_store.airtable_record_store_impl import (
    AirtableRecordStoreImpl,
)
from src.service.marketplace.driven_adapter.record_store.sql_record_store_impl import (
    SqlRecordStoreImpl,
)


def build_record_store(*, settings: Settings) -> IRecordStore:
    Logger.base.info(f'🗃️ [STORE] Using {settings.RECORD_STORE_BACKEND} record store')
    if settings.RECORD_STORE_BACKEND == 'airtable':
        return AirtableRecordStoreImpl(settings=settings)
    return SqlRecordStoreImpl(database=Database(settings=settings), settings=settings)
