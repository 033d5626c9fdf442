"""
ASGI entrypoint: expose `app` pour les process managers / déploiements.

- En production, un process manager (ex: gunicorn -k uvicorn.workers.UvicornWorker) importe
  `brave_backend.asgi:app`. Un seul worker: les checkouts bKash en attente vivent en mémoire du process.
"""

from brave_backend.app import app

if __name__ == "__main__":
    import uvicorn
    from brave_backend.config import PORT

    uvicorn.run("brave_backend.asgi:app", host="0.0.0.0", port=PORT, reload=True)
