from prometheus_client import Counter


class MarketplaceMetrics:
    """
    Marketplace Core Metrics Collector

    Tracks product listings, order placement and order lifecycle transitions,
    plus record store failures
    """

    def __init__(self):
        # ========== Product Metrics ==========
        self.products_created = Counter(
            'marketplace_products_created_total',
            'Total products listed',
        )

        self.products_deleted = Counter(
            'marketplace_products_deleted_total',
            'Total products removed',
        )

        # ========== Order Metrics ==========
        self.orders_created = Counter(
            'marketplace_orders_created_total',
            'Total orders placed',
            ['result'],  # result: success/conflict
        )

        self.order_status_transitions = Counter(
            'marketplace_order_status_transitions_total',
            'Order status changes',
            ['from_status', 'to_status'],
        )

        # ========== Record Store Metrics ==========
        self.record_store_failures = Counter(
            'marketplace_record_store_failures_total',
            'Record store operations that failed',
            ['operation'],
        )

    # ========== Helper Methods ==========

    def record_product_created(self):
        self.products_created.inc()

    def record_product_deleted(self):
        self.products_deleted.inc()

    def record_order_created(self, *, result: str):
        self.orders_created.labels(result=result).inc()

    def record_status_transition(self, *, from_status: str, to_status: str):
        self.order_status_transitions.labels(from_status=from_status, to_status=to_status).inc()

    def record_store_failure(self, *, operation: str):
        self.record_store_failures.labels(operation=operation).inc()


# Global metrics instance
metrics = MarketplaceMetrics()
