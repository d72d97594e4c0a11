# API Route Constants

API_BASE = '/api'

# Product routes
PRODUCT_BASE = f'{API_BASE}/products'
PRODUCT_GET = f'{PRODUCT_BASE}/{{product_id}}'

# Order routes
ORDER_BASE = f'{API_BASE}/orders'
ORDER_GET = f'{ORDER_BASE}/{{order_id}}'
ORDER_UPDATE_STATUS = f'{ORDER_BASE}/{{order_id}}/status'

# System routes
HEALTH = '/health'
METRICS = '/metrics'

# Headers
USER_ID_HEADER = 'X-User-Id'  # caller identity
REQUEST_ID_HEADER = 'X-Request-Id'
