"""
Accès aux données pour la feature 'registrations'.
- find_registration: recherche rapide d'un doublon (cours, nom, téléphone)
- insert_registration: insertion; la contrainte unique en base fait foi (voir sql/schema.sql)
"""
from typing import Any, Dict, Optional
import logging
from postgrest.exceptions import APIError
import brave_backend.infra.supabase_client as supabase_client
from brave_backend.errors import DuplicateRegistrationError, PersistenceError, UidCollisionError

logger = logging.getLogger(__name__)

# Code Postgres d'une violation de contrainte unique
UNIQUE_VIOLATION = "23505"
# Noms des contraintes uniques de la table (sql/schema.sql)
REGISTRANT_CONSTRAINT = "registrations_course_name_phone_key"
UID_CONSTRAINT = "registrations_uid_key"

def _violated_constraint(e: APIError) -> str:
    """Nom de la contrainte citée par l'erreur Postgres (message ou details), '' si absent."""
    text = " ".join(str(getattr(e, attr, None) or "") for attr in ("message", "details"))
    for name in (REGISTRANT_CONSTRAINT, UID_CONSTRAINT):
        if name in text:
            return name
    return ""

# module brave_backend.registrations.repository
def find_registration(course_id: str, name: str, phone: str) -> Optional[dict]:
    """
    Retourne l'inscription existante pour (course, name, phone), sinon None.
    - Lève PersistenceError si la lecture échoue.
    """
    try:
        res = (
            supabase_client.get_supabase()
            .table("registrations")
            .select("*")
            .eq("course", course_id)
            .eq("name", name)
            .eq("phone", phone)
            .limit(1)
            .execute()
        )
    except Exception as e:
        logger.exception("registrations.repository.find_registration failed course=%s", course_id)
        raise PersistenceError(str(e)) from e
    rows = res.data or []
    return rows[0] if rows else None

def insert_registration(record: Dict[str, Any]) -> Any:
    """
    Insère une inscription et retourne l'identifiant généré.
    - DuplicateRegistrationError si la contrainte unique (course, name, phone) est violée
    - UidCollisionError si le uid est déjà pris (l'appelant peut réessayer avec un autre)
    - PersistenceError si l'écriture est refusée ou ne renvoie aucune ligne
    """
    try:
        res = (
            supabase_client.get_service_supabase()
            .table("registrations")
            .insert(record)
            .execute()
        )
    except APIError as e:
        constraint = _violated_constraint(e) if getattr(e, "code", None) == UNIQUE_VIOLATION else ""
        if constraint == REGISTRANT_CONSTRAINT:
            # Deux soumissions concurrentes ont passé la vérification préalable
            logger.warning(
                "registrations.repository.insert_registration duplicate race course=%s uid=%s",
                record.get("course"), record.get("uid"),
            )
            raise DuplicateRegistrationError() from e
        if constraint == UID_CONSTRAINT:
            logger.warning("registrations.repository.insert_registration uid collision uid=%s", record.get("uid"))
            raise UidCollisionError(record.get("uid")) from e
        logger.exception("registrations.repository.insert_registration failed uid=%s", record.get("uid"))
        raise PersistenceError(getattr(e, "message", None) or str(e)) from e
    except Exception as e:
        logger.exception("registrations.repository.insert_registration failed uid=%s", record.get("uid"))
        raise PersistenceError(str(e)) from e

    rows = res.data or []
    if isinstance(rows, list) and rows and rows[0].get("id") is not None:
        return rows[0]["id"]
    raise PersistenceError("Failed to insert in DB")
