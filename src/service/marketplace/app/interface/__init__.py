"""Application layer interfaces (Ports)"""

from src.service.marketplace.app.interface.i_order_repo import IOrderRepo
from src.service.marketplace.app.interface.i_product_repo import IProductRepo
from src.service.marketplace.app.interface.i_record_store import IRecordStore
