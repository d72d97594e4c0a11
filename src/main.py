"""
Production FastAPI Application

Marketplace API: product listings, order placement and order status lifecycle.
Run with `uvicorn src.main:app`.
"""

from fastapi.responses import RedirectResponse

from src.platform.app_factory import build_lifespan, create_app


app = create_app(lifespan=build_lifespan('Marketplace'))


@app.get('/', include_in_schema=False)
async def root() -> RedirectResponse:
    return RedirectResponse(url='/docs')
