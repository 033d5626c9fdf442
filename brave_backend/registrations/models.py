# module brave_backend.registrations.models
"""Schémas d'entrée des checkouts (physique et bKash).
- CheckoutRequest: {"courseId": "...", "details": {...}}
- RegistrantDetails: name/phone obligatoires, email optionnel, autres champs conservés (extra).
"""
from typing import Any, Dict, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic import ValidationError as PydanticValidationError

from brave_backend.errors import ValidationError


class RegistrantDetails(BaseModel):
    model_config = ConfigDict(extra="allow")

    name: str
    phone: str
    email: Optional[str] = None

    @field_validator("name", "phone")
    @classmethod
    def _not_blank(cls, v: str) -> str:
        v = (v or "").strip()
        if not v:
            raise ValueError("ne doit pas être vide")
        return v

    def extra_fields(self) -> Dict[str, Any]:
        """Champs libres envoyés par le front (hors name/phone/email)."""
        return dict(self.model_extra or {})


class CheckoutRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    course_id: str = Field(alias="courseId", min_length=1)
    details: RegistrantDetails


def parse_checkout_request(body: Any) -> CheckoutRequest:
    """Valide le corps JSON d'un checkout; lève ValidationError (400) sinon."""
    if not isinstance(body, dict):
        raise ValidationError("Invalid checkout payload")
    try:
        return CheckoutRequest.model_validate(body)
    except PydanticValidationError as e:
        fields = ", ".join(".".join(str(p) for p in err.get("loc", ())) for err in e.errors())
        raise ValidationError(f"Invalid checkout payload: {fields}") from e


def build_registration_record(course_id: str, details: RegistrantDetails, uid: str, paid: bool) -> Dict[str, Any]:
    """
    Ligne 'registrations' prête à l'insertion.
    - Colonnes connues: course, name, phone, email, uid, paid
    - Les champs libres vont dans la colonne JSON 'extra'
    """
    extra = details.extra_fields()
    # Le front envoie parfois 'course' dans details: la valeur de courseId fait foi
    extra.pop("course", None)
    extra.pop("uid", None)
    extra.pop("paid", None)
    return {
        "course": course_id,
        "name": details.name,
        "phone": details.phone,
        "email": details.email,
        "extra": extra,
        "uid": uid,
        "paid": paid,
    }
