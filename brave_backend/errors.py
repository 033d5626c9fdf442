"""
Exceptions métier du backend d'inscription.

Hiérarchie:
- BraveError: base commune, convertie en HTTP 400 {message, error} par app_setup.exceptions
  - ValidationError: entrée invalide ou manquante
  - NotFoundError: cours/planning introuvable
  - DuplicateRegistrationError: même (cours, nom, téléphone) déjà inscrit
  - GatewayError: échec côté passerelle bKash
    - GatewayAuthError: obtention du token refusée
    - GatewayRequestError: création/exécution de paiement refusée (ou timeout)
  - PersistenceError: écriture/lecture refusée par la base
    - UidCollisionError: uid généré déjà pris
"""
from typing import Any, Dict, Optional


class BraveError(Exception):
    """Base de toutes les erreurs métier exposées à la frontière HTTP."""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None) -> None:
        self.message = message
        self.details = details or {}
        super().__init__(self.message)

    def to_dict(self) -> Dict[str, Any]:
        return {"message": "error", "error": self.message}


class ValidationError(BraveError):
    pass


class NotFoundError(BraveError):
    def __init__(self, message: str = "Resource not found", resource: Optional[str] = None) -> None:
        self.resource = resource
        super().__init__(message, {"resource": resource} if resource else None)


class DuplicateRegistrationError(BraveError):
    def __init__(self, message: str = "You already registered in this course.") -> None:
        super().__init__(message)


class GatewayError(BraveError):
    """
    Erreur de la passerelle de paiement.

    Attributs:
        status_code: code HTTP renvoyé par bKash, si une réponse a été reçue
        gateway_code: statusCode bKash (ex: "2001"), si présent dans la réponse
    """

    def __init__(
        self,
        message: str,
        status_code: Optional[int] = None,
        gateway_code: Optional[str] = None,
    ) -> None:
        self.status_code = status_code
        self.gateway_code = gateway_code
        details: Dict[str, Any] = {}
        if status_code is not None:
            details["status_code"] = status_code
        if gateway_code:
            details["gateway_code"] = gateway_code
        super().__init__(message, details)


class GatewayAuthError(GatewayError):
    pass


class GatewayRequestError(GatewayError):
    pass


class PersistenceError(BraveError):
    pass


class UidCollisionError(PersistenceError):
    """Le uid généré existe déjà (contrainte unique 'uid'); l'appelant en tire un autre."""

    def __init__(self, uid: Optional[str] = None) -> None:
        self.uid = uid
        super().__init__("Registration uid already taken", {"uid": uid} if uid else None)
