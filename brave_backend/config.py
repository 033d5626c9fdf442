# brave_backend.config
from pathlib import Path
import os
from dotenv import load_dotenv

# Calculer le chemin du projet puis charger .env de manière explicite
BASE_DIR = Path(__file__).resolve().parent.parent
ENV_PATH = BASE_DIR / ".env"
load_dotenv(dotenv_path=ENV_PATH, override=True)

"""
Configuration centrale du backend.

- Charge le fichier .env à la racine du projet (BASE_DIR/.env)
- Normalise et expose les secrets/URLs (Supabase, bKash)
- Expose CORS, port d'écoute et URL du front pour les redirections de checkout
"""

def _clean_env(v: str) -> str:
    """
    Nettoie une valeur d'environnement:
    - supprime les espaces et guillemets (simples, doubles) et backticks
    - retourne toujours une chaîne (jamais None)
    """
    return (v or "").strip().strip("'").strip('"').strip("`")

def _int_env(name: str, default: int) -> int:
    try:
        return int(_clean_env(os.getenv(name)) or default)
    except ValueError:
        return default

# Supabase: URLs et clés (anon/service)
SUPABASE_URL = _clean_env(os.getenv("SUPABASE_URL") or "")
SUPABASE_KEY = _clean_env(os.getenv("SUPABASE_KEY") or os.getenv("SUPABASE_ANON_KEY") or "")
SUPABASE_SERVICE_KEY = _clean_env(os.getenv("SUPABASE_SERVICE_KEY") or "")

if SUPABASE_URL and not SUPABASE_URL.startswith("http"):
    SUPABASE_URL = "https://" + SUPABASE_URL
if SUPABASE_URL.endswith("/"):
    SUPABASE_URL = SUPABASE_URL.rstrip("/")

# bKash (tokenized checkout): endpoints et identifiants marchand
BKASH_GRANT_TOKEN_URL = _clean_env(os.getenv("BKASH_GRANT_TOKEN_URL") or "")
BKASH_CREATE_PAYMENT_URL = _clean_env(os.getenv("BKASH_CREATE_PAYMENT_URL") or "")
BKASH_EXECUTE_PAYMENT_URL = _clean_env(os.getenv("BKASH_EXECUTE_PAYMENT_URL") or "")
BKASH_APP_KEY = _clean_env(os.getenv("BKASH_APP_KEY") or "")
BKASH_APP_SECRET = _clean_env(os.getenv("BKASH_APP_SECRET") or "")
BKASH_USERNAME = _clean_env(os.getenv("BKASH_USERNAME") or "")
BKASH_PASSWORD = _clean_env(os.getenv("BKASH_PASSWORD") or "")
BKASH_CALLBACK_URL = _clean_env(
    os.getenv("BKASH_CALLBACK_URL") or "http://localhost:4000/api/v1/bkash-execute-payment"
)
BKASH_CURRENCY = _clean_env(os.getenv("BKASH_CURRENCY") or "BDT")
BKASH_TIMEOUT_SECONDS = _int_env("BKASH_TIMEOUT_SECONDS", 30)

# Durée de vie d'un checkout bKash en attente du callback (abandon => purge)
PENDING_CHECKOUT_TTL_SECONDS = _int_env("PENDING_CHECKOUT_TTL_SECONDS", 30 * 60)

# Front: base des redirections /checkout?status=...
FRONTEND_URL = _clean_env(os.getenv("FRONTEND_URL") or "http://localhost:5173").rstrip("/")

CORS_ORIGINS = [o.strip() for o in os.getenv("CORS_ORIGINS", "http://localhost:5173").split(",") if o.strip()]

PORT = _int_env("PORT", 4000)
