from __future__ import annotations

from dataclasses import dataclass

from directorio.utils.rutas import IDIOMA_POR_DEFECTO, IDIOMAS, es_idioma_valido

COOKIE_IDIOMA = "locale"
COOKIE_MAX_AGE = 60 * 60 * 24 * 30  # 30 días
HEADER_ZONA_HORARIA = "X-Timezone"


@dataclass(frozen=True)
class ContextoIdioma:
    idioma: str
    origen: str  # 'cookie' | 'header' | 'default' | 'path'


def _idioma_desde_accept_language(valor: str) -> str | None:
    # "en-US,en;q=0.9" -> ["en-us", "en"]; gana el primero con prefijo soportado
    for parte in valor.split(","):
        codigo = parte.split(";")[0].strip().lower()
        for idioma in IDIOMAS:
            if codigo.startswith(idioma):
                return idioma
    return None


def detectar_idioma(cookies, headers) -> ContextoIdioma:
    """Pick the locale for a request that has no locale segment in its path.

    Order: ``locale`` cookie, ``Accept-Language``, the ``X-Timezone`` hint
    (anything in Mexico means Spanish), then the default locale. Unsupported
    values are ignored, so this never fails.
    """
    cookie = cookies.get(COOKIE_IDIOMA)
    if es_idioma_valido(cookie):
        return ContextoIdioma(cookie, "cookie")

    accept_language = headers.get("Accept-Language")
    if accept_language:
        idioma = _idioma_desde_accept_language(accept_language)
        if idioma:
            return ContextoIdioma(idioma, "header")

    zona_horaria = headers.get(HEADER_ZONA_HORARIA)
    if zona_horaria and "Mexico" in zona_horaria:
        return ContextoIdioma("es", "header")

    return ContextoIdioma(IDIOMA_POR_DEFECTO, "default")


def idioma_desde_request(request) -> ContextoIdioma:
    return detectar_idioma(request.COOKIES, request.headers)


def fijar_cookie_idioma(response, idioma):
    response.set_cookie(
        COOKIE_IDIOMA,
        idioma,
        max_age=COOKIE_MAX_AGE,
        samesite="Lax",
    )
    return response
