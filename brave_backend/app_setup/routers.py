"""
Registre central des routers.
- API v1: catalogue (courses, schedule), inscriptions (physical-checkout), bKash (checkout + callback)
- Health
"""
from fastapi import FastAPI
from brave_backend.catalog import views as catalog_views
from brave_backend.registrations import views as registrations_views
from brave_backend.bkash import views as bkash_views
from brave_backend.health.router import router as health_router

def register_routers(app: FastAPI) -> None:
    # API v1
    app.include_router(catalog_views.router)
    app.include_router(registrations_views.router)
    app.include_router(bkash_views.router)
    # Health & monitoring
    app.include_router(health_router)
