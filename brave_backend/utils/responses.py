from fastapi.responses import JSONResponse


def error_response(error: Exception | str, status_code: int = 400) -> JSONResponse:
    """Corps d'erreur commun de l'API: {"message": "error", "error": "<texte>"}."""
    text = error if isinstance(error, str) else (getattr(error, "message", None) or str(error))
    return JSONResponse(status_code=status_code, content={"message": "error", "error": text})
