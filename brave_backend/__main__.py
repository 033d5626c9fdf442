"""
Point d'entrée principal pour le backend FastAPI.

Usage:
    python -m brave_backend

Variables d'environnement:
- PORT: port d'écoute (par défaut 4000)
- UVICORN_RELOAD: active le reload auto en dev ("1"/"true"/"yes")
- LOG_LEVEL: niveau de logs uvicorn (ex: "info", "debug")
"""
import os
import uvicorn
from brave_backend.config import PORT

if __name__ == "__main__":
    reload_flag = os.environ.get("UVICORN_RELOAD", "").lower() in ("1", "true", "yes")
    log_level = os.environ.get("LOG_LEVEL", "info")
    uvicorn.run(
        "brave_backend.asgi:app",
        host="0.0.0.0",
        port=PORT,
        reload=reload_flag,
        log_level=log_level,
    )
