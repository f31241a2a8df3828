from django.conf import settings

from directorio.utils.rutas import IDIOMA_POR_DEFECTO, IDIOMAS, es_idioma_valido


def idioma_context(request):
    idioma = getattr(request, "LANGUAGE_CODE", IDIOMA_POR_DEFECTO)
    if not es_idioma_valido(idioma):
        idioma = IDIOMA_POR_DEFECTO
    return {
        'IDIOMA_ACTUAL': idioma,
        'IDIOMAS_DISPONIBLES': IDIOMAS,
        'SITE_URL': settings.SITE_URL,
        'CSP_NONCE': getattr(request, "csp_nonce", ""),
    }
