from __future__ import annotations

from dataclasses import dataclass
from types import MappingProxyType

from django.conf import settings
from django.core.exceptions import ImproperlyConfigured

IDIOMAS = ("es", "en")
IDIOMA_POR_DEFECTO = "es"


@dataclass(frozen=True)
class EntradaRuta:
    segmento_es: str
    segmento_en: str


# ────────────────────────────────────────────────────────────────
# Tabla estática ES <-> EN (la forma en español es la canónica)
# ────────────────────────────────────────────────────────────────

TABLA_RUTAS = (
    # Descubre
    EntradaRuta("descubre", "discover"),
    EntradaRuta("descubre/tepoztlan", "discover/tepoztlan"),
    EntradaRuta("descubre/amatlan", "discover/amatlan"),
    EntradaRuta("descubre/ocotitlan", "discover/ocotitlan"),
    EntradaRuta("descubre/san-juan-tlacotenco", "discover/san-juan-tlacotenco"),
    # Hospedaje
    EntradaRuta("hospedaje", "stay"),
    EntradaRuta("hospedaje/hoteles", "stay/hotels"),
    EntradaRuta("hospedaje/eco-lodges", "stay/eco-lodges"),
    EntradaRuta("hospedaje/rentas-vacacionales", "stay/rentals"),
    EntradaRuta("hospedaje/hostales", "stay/hostels"),
    EntradaRuta("hospedaje/retiros", "stay/retreats"),
    EntradaRuta("hospedaje/camping", "stay/camping"),
    # Comer
    EntradaRuta("comer", "eat"),
    EntradaRuta("comer/restaurantes", "eat/restaurants"),
    EntradaRuta("comer/cafeterias", "eat/cafes"),
    EntradaRuta("comer/comida-callejera", "eat/street-food"),
    EntradaRuta("comer/bares", "eat/bars"),
    EntradaRuta("comer/experiencias-gastronomicas", "eat/food-experiences"),
    # Experiencias
    EntradaRuta("experiencias", "experience"),
    EntradaRuta("experiencias/piramide-tepozteco", "experience/tepozteco-pyramid"),
    EntradaRuta("experiencias/senderismo", "experience/hiking"),
    EntradaRuta("experiencias/bienestar", "experience/wellness"),
    EntradaRuta("experiencias/cultura", "experience/cultural"),
    EntradaRuta("experiencias/aventura", "experience/adventure"),
    EntradaRuta("experiencias/espiritual", "experience/spiritual"),
    EntradaRuta("experiencias/tours", "experience/tours"),
    # Eventos
    EntradaRuta("eventos", "events"),
    EntradaRuta("eventos/calendario", "events/calendar"),
    EntradaRuta("eventos/festivales", "events/festivals"),
    EntradaRuta("eventos/mercados", "events/markets"),
    # Compras
    EntradaRuta("compras", "shop"),
    EntradaRuta("compras/mercados", "shop/markets"),
    EntradaRuta("compras/artesanos", "shop/artisans"),
    EntradaRuta("compras/galerias", "shop/galleries"),
    # Servicios
    EntradaRuta("servicios", "services"),
    EntradaRuta("servicios/transporte", "services/transportation"),
    EntradaRuta("servicios/medicos", "services/medical"),
    EntradaRuta("servicios/financieros", "services/financial"),
    # Otras
    EntradaRuta("mapa", "map"),
    EntradaRuta("buscar", "search"),
    EntradaRuta("planificar", "plan"),
    EntradaRuta("blog", "blog"),
    EntradaRuta("comunidad", "community"),
    EntradaRuta("negocios", "business"),
    EntradaRuta("usuario", "user"),
    EntradaRuta("informacion", "info"),
)

# Rutas canónicas que se publican en el sitemap ("" es la portada)
RUTAS_PRIORITARIAS = (
    "",
    "descubre",
    "descubre/tepoztlan",
    "hospedaje",
    "hospedaje/hoteles",
    "comer",
    "comer/restaurantes",
    "experiencias",
    "experiencias/piramide-tepozteco",
    "eventos",
    "buscar",
)

RUTAS_SECUNDARIAS = (
    "descubre/amatlan",
    "descubre/san-juan-tlacotenco",
    "descubre/ocotitlan",
    "hospedaje/eco-lodges",
    "hospedaje/rentas-vacacionales",
    "hospedaje/hostales",
    "hospedaje/retiros",
    "hospedaje/camping",
    "comer/cafeterias",
    "comer/comida-callejera",
    "comer/bares",
    "comer/experiencias-gastronomicas",
    "experiencias/senderismo",
    "experiencias/bienestar",
    "experiencias/cultura",
    "experiencias/aventura",
    "experiencias/espiritual",
    "experiencias/tours",
    "eventos/calendario",
    "eventos/festivales",
    "eventos/mercados",
    "compras",
    "compras/mercados",
    "compras/artesanos",
    "compras/galerias",
    "servicios",
    "servicios/transporte",
    "servicios/medicos",
    "servicios/financieros",
    "mapa",
    "planificar",
    "blog",
    "comunidad",
    "negocios",
    "usuario",
    "informacion",
)


class TablaRutas:
    """Bidirectional route table built once from a list of entries.

    Keeps one dict per direction so lookups are O(1) both ways. The mapping
    must be a bijection: no Spanish or English spelling may appear twice, and
    an English spelling may only equal a Spanish one within the same entry
    (e.g. ``blog``).
    """

    def __init__(self, entradas):
        a_ingles = {}
        a_espanol = {}
        for entrada in entradas:
            es, en = entrada.segmento_es.strip("/"), entrada.segmento_en.strip("/")
            if es in a_ingles:
                raise ImproperlyConfigured(f"Ruta en español duplicada: {es!r}")
            if en in a_espanol:
                raise ImproperlyConfigured(f"Ruta en inglés duplicada: {en!r}")
            a_ingles[es] = en
            a_espanol[en] = es

        for en, es in a_espanol.items():
            if en in a_ingles and a_ingles[en] != en:
                raise ImproperlyConfigured(
                    f"La ruta {en!r} ({es!r} en español) choca con otra entrada de la tabla"
                )

        self._a_ingles = MappingProxyType(a_ingles)
        self._a_espanol = MappingProxyType(a_espanol)

    def __contains__(self, ruta):
        ruta = ruta.strip("/")
        return ruta in self._a_ingles or ruta in self._a_espanol

    def __len__(self):
        return len(self._a_ingles)

    def _buscar(self, ruta, idioma):
        if idioma == "en":
            if ruta in self._a_ingles:
                return self._a_ingles[ruta]
            if ruta in self._a_espanol:
                return ruta
        else:
            if ruta in self._a_espanol:
                return self._a_espanol[ruta]
            if ruta in self._a_ingles:
                return ruta
        return None

    def a_idioma(self, segmento, idioma):
        """Return ``segmento`` spelled for ``idioma``; unmapped input comes back unchanged."""
        traducido = self._buscar(segmento.strip("/"), idioma)
        return segmento if traducido is None else traducido

    def localizar(self, ruta, idioma):
        """Translate a whole path, e.g. ``/es/hospedaje/hoteles/x`` -> ``/en/stay/hotels/x``.

        The longest mapped prefix is translated; the remaining segments
        (slugs) are kept as they are.
        """
        _, resto = separar_idioma(ruta)
        partes = [p for p in resto.split("/") if p]
        if not partes:
            return f"/{idioma}"

        for corte in range(len(partes), 0, -1):
            traducido = self._buscar("/".join(partes[:corte]), idioma)
            if traducido is not None:
                partes = traducido.split("/") + partes[corte:]
                break
        return f"/{idioma}/" + "/".join(partes)

    def canonica(self, ruta):
        """Spanish spelling of ``ruta`` without locale prefix ('' for the home page)."""
        return self.localizar(ruta, IDIOMA_POR_DEFECTO)[len(IDIOMA_POR_DEFECTO) + 2:]


TABLA = TablaRutas(TABLA_RUTAS)


def es_idioma_valido(idioma) -> bool:
    return idioma in IDIOMAS


def separar_idioma(ruta: str) -> tuple[str | None, str]:
    """Split ``/en/stay/hotels`` into ``('en', 'stay/hotels')``.

    Paths without a supported locale segment return ``(None, path)``.
    """
    limpia = (ruta or "").split("?", 1)[0].strip("/")
    primero, _, resto = limpia.partition("/")
    if es_idioma_valido(primero):
        return primero, resto
    return None, limpia


def ruta_localizada(ruta: str, idioma: str) -> str:
    return TABLA.localizar(ruta, idioma)


def url_absoluta(ruta: str) -> str:
    return settings.SITE_URL.rstrip("/") + ruta


def url_alternativa(ruta: str, idioma: str) -> str:
    """Absolute URL of ``ruta`` in ``idioma``.

    Hreflang tags, the sitemap and the language switcher all go through
    here, so they always produce the same string.
    """
    return url_absoluta(ruta_localizada(ruta, idioma))


# ────────────────────────────────────────────────────────────────
# Metadatos para el sitemap
# ────────────────────────────────────────────────────────────────

def prioridad_ruta(ruta: str) -> float:
    if ruta == "":
        return 1.0
    if ruta in RUTAS_PRIORITARIAS:
        return 0.9
    profundidad = len(ruta.split("/"))
    if profundidad == 1:
        return 0.8
    if profundidad == 2:
        return 0.7
    return 0.6


def frecuencia_cambio(ruta: str) -> str:
    if "eventos" in ruta:
        return "daily"
    if any(clave in ruta for clave in ("hoteles", "restaurantes", "hospedaje", "comer")):
        return "weekly"
    if "informacion" in ruta:
        return "monthly"
    if ruta in RUTAS_PRIORITARIAS:
        return "weekly"
    return "monthly"
