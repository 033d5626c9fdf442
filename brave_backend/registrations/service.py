"""
Cas d'usage 'registrations': checkout physique (espèces) et commit d'une inscription.
Partagé avec le checkout bKash (bkash.service) pour la vérification de doublon et l'insertion.
"""
from typing import Any, Dict
from uuid import uuid4
import logging

from brave_backend.catalog import repository as catalog_repository
from brave_backend.catalog.service import offer_price
from brave_backend.errors import DuplicateRegistrationError, NotFoundError, UidCollisionError

from . import repository
from .models import RegistrantDetails, build_registration_record

logger = logging.getLogger(__name__)

UID_PREFIX = "BE"
# Tirages de uid avant abandon (5 caractères hexadécimaux: collisions rares mais possibles)
UID_ATTEMPTS = 5

def generate_uid() -> str:
    """Identifiant court d'inscription: 'BE' + 5 caractères hexadécimaux."""
    return UID_PREFIX + uuid4().hex[:5]

def ensure_not_registered(course_id: str, details: RegistrantDetails) -> None:
    """Vérification rapide (non atomique) d'un doublon; lève DuplicateRegistrationError."""
    if repository.find_registration(course_id, details.name, details.phone):
        raise DuplicateRegistrationError()

def commit_registration(course_id: str, details: RegistrantDetails, paid: bool) -> str:
    """
    Génère un uid, insère l'inscription et retourne l'uid.
    - uid déjà pris: nouveau tirage, au plus UID_ATTEMPTS essais
    - au-delà: UidCollisionError (PersistenceError)
    """
    for attempt in range(1, UID_ATTEMPTS + 1):
        uid = generate_uid()
        record = build_registration_record(course_id, details, uid=uid, paid=paid)
        try:
            repository.insert_registration(record)
        except UidCollisionError:
            if attempt == UID_ATTEMPTS:
                logger.error("registrations.commit uid collisions exhausted course=%s attempts=%s", course_id, attempt)
                raise
            continue
        return uid

def physical_checkout(course_id: str, details: RegistrantDetails) -> Dict[str, Any]:
    """
    Inscription directe (paiement sur place), sans passerelle.
    - Doublon (cours, nom, téléphone) => DuplicateRegistrationError
    - Cours introuvable => NotFoundError
    - paid = True uniquement si le prix d'offre vaut exactement 0
    """
    ensure_not_registered(course_id, details)

    course = catalog_repository.get_course(course_id)
    if not course:
        raise NotFoundError("Course not found", resource=course_id)

    price = offer_price(course)
    paid = price is not None and price == 0
    uid = commit_registration(course_id, details, paid=paid)
    logger.info("registrations.physical_checkout course=%s uid=%s paid=%s", course_id, uid, paid)
    return {"message": "success", "uid": uid, "paid": paid}
