"""
Middlewares transverses de l'application.
- register_basic_middlewares: CORS (front autorisé, credentials) et confiance en X-Forwarded-*.
- register_security_middleware: en-têtes de sécurité de base sur toutes les réponses.
"""
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
try:
    from uvicorn.middleware.proxy_headers import ProxyHeadersMiddleware
except ImportError:
    ProxyHeadersMiddleware = None
from brave_backend.config import CORS_ORIGINS

def register_basic_middlewares(app: FastAPI) -> None:
    """
    - CORSMiddleware: autorise l'origine du front (CORS_ORIGINS) avec credentials.
    - ProxyHeadersMiddleware (si dispo): fait confiance aux en-têtes du proxy (x-forwarded-*).
    """
    app.add_middleware(
        CORSMiddleware,
        allow_origins=CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    # Fait confiance aux en-têtes X-Forwarded-* (Render, Nginx, etc.)
    if ProxyHeadersMiddleware:
        app.add_middleware(ProxyHeadersMiddleware, trusted_hosts=["*"])

def register_security_middleware(app: FastAPI) -> None:
    @app.middleware("http")
    async def security_headers(request: Request, call_next):
        response = await call_next(request)
        response.headers.setdefault("X-Content-Type-Options", "nosniff")
        response.headers.setdefault("X-Frame-Options", "DENY")
        response.headers.setdefault("Referrer-Policy", "no-referrer")
        return response
