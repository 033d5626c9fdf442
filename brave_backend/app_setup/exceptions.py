"""
Gestionnaires d'exceptions de l'API.
- BraveError (validation, introuvable, doublon, passerelle, base) -> 400 {message: "error", error}
- RequestValidationError FastAPI -> même forme 400 (pas de 422 pour le front)
- HTTPException: réponse JSON standard (ex: 429 du rate limiting)
"""
import logging
from fastapi import FastAPI, HTTPException, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from brave_backend.errors import BraveError, GatewayError
from brave_backend.utils.responses import error_response

logger = logging.getLogger(__name__)

def register_exception_handlers(app: FastAPI) -> None:
    @app.exception_handler(BraveError)
    async def brave_error_handler(request: Request, exc: BraveError):
        if isinstance(exc, GatewayError):
            logger.warning("%s on %s: %s details=%s", type(exc).__name__, request.url.path, exc, exc.details)
        else:
            logger.info("%s on %s: %s", type(exc).__name__, request.url.path, exc)
        return error_response(exc)

    @app.exception_handler(RequestValidationError)
    async def request_validation_handler(request: Request, exc: RequestValidationError):
        fields = ", ".join(".".join(str(p) for p in err.get("loc", ())) for err in exc.errors())
        return error_response(f"Invalid request: {fields}")

    @app.exception_handler(HTTPException)
    async def http_exception_handler(request: Request, exc: HTTPException):
        return JSONResponse(status_code=exc.status_code, content={"detail": exc.detail})
