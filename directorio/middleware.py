import base64
import logging
import re
import uuid

from django.conf import settings
from django.http import HttpResponseRedirect
from django.utils import translation

from directorio.utils.idioma import ContextoIdioma, fijar_cookie_idioma, idioma_desde_request
from directorio.utils.rutas import ruta_localizada, separar_idioma

logger = logging.getLogger(__name__)

RUTAS_EXCLUIDAS = (
    r"^/(api|admin|cuentas|static|media|i18n)(/|$)"
    r"|^/(sitemap\.xml|robots\.txt|favicon\.ico)$"
    r"|\.(?i:jpg|jpeg|png|gif|svg|webp|ico)$"
)


class RedireccionIdiomaMiddleware:
    """Every public page lives under ``/es`` or ``/en``.

    A request without a locale segment gets a single 302 to the localized
    path, with the chosen locale stored in the ``locale`` cookie. A request
    that already carries one is served in that language and refreshes the
    cookie. API, admin, account, static and sitemap paths are left alone.
    """

    def __init__(self, get_response):
        self.get_response = get_response
        self.excluidas = re.compile(getattr(settings, "IDIOMA_RUTAS_EXCLUIDAS", RUTAS_EXCLUIDAS))

    def __call__(self, request):
        if self.excluidas.search(request.path_info):
            contexto = idioma_desde_request(request)
            self._activar(request, contexto)
            return self.get_response(request)

        idioma, _ = separar_idioma(request.path_info)
        if idioma is None:
            return self._redirigir(request)

        self._activar(request, ContextoIdioma(idioma, "path"))
        response = self.get_response(request)
        response.setdefault("Content-Language", idioma)
        return fijar_cookie_idioma(response, idioma)

    def _activar(self, request, contexto):
        translation.activate(contexto.idioma)
        request.LANGUAGE_CODE = contexto.idioma
        request.contexto_idioma = contexto

    def _redirigir(self, request):
        contexto = idioma_desde_request(request)
        # Se traducen también los segmentos (/hospedaje -> /en/stay), no solo
        # el prefijo, para que /{idioma}{ruta} no necesite un segundo 301.
        destino = ruta_localizada(request.path_info, contexto.idioma)
        query = request.META.get("QUERY_STRING")
        if query:
            destino = f"{destino}?{query}"
        logger.debug("Sin idioma en %s -> %s (%s)", request.path_info, destino, contexto.origen)
        return fijar_cookie_idioma(HttpResponseRedirect(destino), contexto.idioma)


class CabecerasSeguridadMiddleware:
    """CSP with a per-request nonce plus Permissions-Policy.

    The nonce is exposed as ``request.csp_nonce`` for inline scripts in
    templates and echoed in ``X-Nonce``.
    """

    def __init__(self, get_response):
        self.get_response = get_response

    def __call__(self, request):
        nonce = base64.b64encode(str(uuid.uuid4()).encode()).decode()
        request.csp_nonce = nonce
        response = self.get_response(request)

        response.setdefault("Content-Security-Policy", self.politica(nonce))
        response["X-Nonce"] = nonce
        response.setdefault(
            "Permissions-Policy",
            "geolocation=(self), camera=(), microphone=(), payment=(), usb=()",
        )
        return response

    @staticmethod
    def politica(nonce):
        directivas = [
            "default-src 'self'",
            f"script-src 'self' 'nonce-{nonce}' 'strict-dynamic'" + (" 'unsafe-eval'" if settings.DEBUG else ""),
            "style-src 'self' 'unsafe-inline' https://fonts.googleapis.com",
            "font-src 'self' data: https://fonts.gstatic.com",
            "img-src 'self' data: https: blob:",
            "connect-src 'self'",
            "worker-src 'self' blob:",
            "frame-ancestors 'none'",
            "base-uri 'self'",
            "form-action 'self'",
        ]
        if not settings.DEBUG:
            directivas.append("upgrade-insecure-requests")
        return "; ".join(directivas)
