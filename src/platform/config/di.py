"""
https://python-dependency-injector.ets-labs.org/index.html
https://python-dependency-injector.ets-labs.org/examples/fastapi-sqlalchemy.html
"""

from dependency_injector import containers, providers

from src.platform.config.core_setting import Settings
from src.service.marketplace.app.interface.i_record_store import IRecordStore
from src.service.marketplace.driven_adapter.record_store.record_store_factory import (
    build_record_store,
)
from src.service.marketplace.driven_adapter.repo.order_repo_impl import OrderRepoImpl
from src.service.marketplace.driven_adapter.repo.product_repo_impl import ProductRepoImpl


class Container(containers.DeclarativeContainer):
    config_service = providers.Singleton(Settings)

    # Backend chosen by RECORD_STORE_BACKEND
    record_store = providers.Singleton(build_record_store, settings=config_service)

    # Stateless, share the record store handle
    product_repo = providers.Singleton(ProductRepoImpl, record_store=record_store)
    order_repo = providers.Singleton(OrderRepoImpl, record_store=record_store)


container = Container()


async def open_record_store() -> IRecordStore:
    """Fail fast: tables are created / the Airtable base is checked before serving."""
    record_store = container.record_store()
    await record_store.initialize()
    return record_store


async def close_record_store() -> None:
    await container.record_store().close()
    # The next open builds a fresh store (new engine / HTTP client)
    container.reset_singletons()
