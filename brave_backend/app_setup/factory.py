"""
Factory d'application pour les entrypoints (ex: brave_backend.asgi).
Ordonne les étapes d'initialisation de manière lisible et testable.
"""
from fastapi import FastAPI
from .lifespan import lifespan
from .middlewares import register_basic_middlewares, register_security_middleware
from .exceptions import register_exception_handlers
from .routes import register_routes
from .routers import register_routers

def create_app() -> FastAPI:
    """
    Construit l'app FastAPI avec le lifespan et enregistre:
      - middlewares de base (CORS, proxy) et en-têtes de sécurité
      - gestionnaires d'exceptions ({message, error} en 400)
      - route d'accueil et tous les routers (catalogue, inscriptions, bKash, health)
    """
    app = FastAPI(title="Brave Education API", version="1.0.0", lifespan=lifespan)
    register_basic_middlewares(app)
    register_security_middleware(app)
    register_exception_handlers(app)
    register_routes(app)
    register_routers(app)
    return app
