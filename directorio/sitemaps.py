import logging
from urllib.parse import urlsplit

from django.conf import settings
from django.contrib.sitemaps import Sitemap
from django.utils.translation import get_language

from directorio.models import Evento, rutas_de_negocios
from directorio.utils.rutas import (
    IDIOMAS,
    RUTAS_PRIORITARIAS,
    RUTAS_SECUNDARIAS,
    TABLA,
    frecuencia_cambio,
    prioridad_ruta,
    ruta_localizada,
)

logger = logging.getLogger(__name__)


class SitemapLocalizado(Sitemap):
    """Base i18n sitemap: one ``<url>`` per item and locale, with es/en alternates.

    Protocol and domain come from ``SITE_URL`` and locations from the route
    table, so every URL equals ``url_alternativa(ruta, idioma)``.
    """
    i18n = True
    alternates = True
    # x-default lo emite la plantilla base; aquí apuntaría a la ruta sin prefijo
    x_default = False
    languages = list(IDIOMAS)

    def get_protocol(self, protocol=None):
        return urlsplit(settings.SITE_URL).scheme or "https"

    def get_domain(self, site=None):
        partes = urlsplit(settings.SITE_URL)
        return partes.netloc + partes.path.rstrip("/")

    def location(self, ruta):
        return ruta_localizada(ruta, get_language())


class StaticViewSitemap(SitemapLocalizado):
    """Sitemap para las secciones estáticas (portada, secciones y subsecciones)."""

    def items(self):
        rutas = list(RUTAS_PRIORITARIAS) + list(RUTAS_SECUNDARIAS)
        return sorted(rutas, key=lambda ruta: (-prioridad_ruta(ruta), ruta))

    def priority(self, ruta):
        return prioridad_ruta(ruta)

    def changefreq(self, ruta):
        return frecuencia_cambio(ruta)


class NegociosSitemap(SitemapLocalizado):
    """Sitemap para las fichas de negocios.

    Si el enumerador de negocios falla se registra el error y la sección
    queda vacía; el resto del sitemap se sigue sirviendo.
    """
    changefreq = "weekly"
    priority = 0.6

    def items(self):
        vistos = {}
        try:
            for entrada in rutas_de_negocios():
                ruta = TABLA.canonica(f"/{entrada.idioma}/{entrada.categoria}/{entrada.slug}")
                vistos.setdefault(ruta, entrada.lastmod)
        except Exception:
            logger.exception("No se pudieron enumerar los negocios para el sitemap")
            return []
        return [{"ruta": ruta, "lastmod": lastmod} for ruta, lastmod in vistos.items()]

    def location(self, item):
        return super().location(item["ruta"])

    def lastmod(self, item):
        return item["lastmod"]


class EventosSitemap(SitemapLocalizado):
    """Fichas de eventos activos, pasados incluidos (la página sigue existiendo)."""
    changefreq = "weekly"
    priority = 0.5

    def items(self):
        try:
            return list(Evento.objects.activos().only("slug", "fecha_actualizacion").order_by("slug"))
        except Exception:
            logger.exception("No se pudieron enumerar los eventos para el sitemap")
            return []

    def location(self, evento):
        return super().location(evento.ruta)

    def lastmod(self, evento):
        return evento.fecha_actualizacion


sitemaps = {
    "static": StaticViewSitemap,
    "negocios": NegociosSitemap,
    "eventos": EventosSitemap,
}
