from __future__ import annotations

from django.utils.translation import gettext, get_language

from directorio.utils.rutas import TABLA


def derive_english_from_code(code: str) -> str:
    """Best-effort English label from a subcategory code or route segment.
    Example: "street-food" -> "Street Food", "vacation-rental" -> "Vacation Rental".
    """
    if not code:
        return ""
    words = code.replace("-", "_").split("_")
    pretty = " ".join(w.capitalize() for w in words if w)
    replacements = {
        "And": "and",
        "Of": "of",
        "De": "de",
        "Y": "y",
    }
    return " ".join(replacements.get(token, token) for token in pretty.split())


def _idioma_activo() -> str:
    return "en" if (get_language() or "").lower().startswith("en") else "es"


def get_localized_subcategoria(negocio) -> str:
    """Return the localized subcategory label for a Negocio.

    - Try gettext on the Spanish label from get_subcategoria_display().
    - In English with no translation available, derive it from the code.
    """
    spanish_label = getattr(negocio, "get_subcategoria_display", lambda: "")() or getattr(negocio, "subcategoria", "")
    translated = gettext(spanish_label)
    if _idioma_activo() == "en" and translated == spanish_label:
        return derive_english_from_code(getattr(negocio, "subcategoria", ""))
    return translated


def titulo_seccion(ruta: str, idioma: str | None = None) -> str:
    """Heading for a section page, from the last segment of its localized route.

    ``hospedaje/rentas-vacacionales`` -> "Rentas Vacacionales" / "Rentals".
    """
    idioma = idioma or _idioma_activo()
    localizada = TABLA.a_idioma(ruta, idioma)
    ultimo = localizada.strip("/").rsplit("/", 1)[-1]
    return derive_english_from_code(ultimo)
