import os

import django

os.environ.setdefault("DJANGO_SETTINGS_MODULE", "Tepoztlan.settings_test")
django.setup()

from django.http import HttpResponse
from django.test import RequestFactory, SimpleTestCase

from directorio.utils.idioma import (
    COOKIE_IDIOMA,
    COOKIE_MAX_AGE,
    ContextoIdioma,
    detectar_idioma,
    fijar_cookie_idioma,
    idioma_desde_request,
)


class DetectarIdiomaTestCase(SimpleTestCase):
    """Orden: cookie, Accept-Language, zona horaria, por defecto."""

    def test_cookie_gana(self):
        contexto = detectar_idioma({"locale": "en"}, {"Accept-Language": "es-MX,es;q=0.9"})
        self.assertEqual(contexto, ContextoIdioma("en", "cookie"))

    def test_cookie_no_soportada_se_ignora(self):
        contexto = detectar_idioma({"locale": "fr"}, {"Accept-Language": "en-US,en;q=0.9"})
        self.assertEqual(contexto, ContextoIdioma("en", "header"))

    def test_accept_language_ingles(self):
        self.assertEqual(detectar_idioma({}, {"Accept-Language": "en-US,en;q=0.9"}).idioma, "en")

    def test_accept_language_espanol(self):
        self.assertEqual(detectar_idioma({}, {"Accept-Language": "es-MX,es;q=0.9"}).idioma, "es")

    def test_accept_language_primero_soportado(self):
        contexto = detectar_idioma({}, {"Accept-Language": "fr-FR,fr;q=0.9,en;q=0.8"})
        self.assertEqual(contexto, ContextoIdioma("en", "header"))

    def test_zona_horaria_de_mexico(self):
        contexto = detectar_idioma({}, {"Accept-Language": "de-DE", "X-Timezone": "America/Mexico_City"})
        self.assertEqual(contexto, ContextoIdioma("es", "header"))

    def test_por_defecto(self):
        self.assertEqual(detectar_idioma({}, {}), ContextoIdioma("es", "default"))
        self.assertEqual(detectar_idioma({}, {"X-Timezone": "Europe/Berlin"}), ContextoIdioma("es", "default"))


class IdiomaRequestTestCase(SimpleTestCase):

    def test_idioma_desde_request(self):
        request = RequestFactory().get("/", HTTP_ACCEPT_LANGUAGE="en-GB,en;q=0.8")
        self.assertEqual(idioma_desde_request(request), ContextoIdioma("en", "header"))

        request = RequestFactory().get("/")
        request.COOKIES[COOKIE_IDIOMA] = "es"
        self.assertEqual(idioma_desde_request(request).origen, "cookie")

    def test_fijar_cookie(self):
        response = fijar_cookie_idioma(HttpResponse(), "en")
        cookie = response.cookies[COOKIE_IDIOMA]
        self.assertEqual(cookie.value, "en")
        self.assertEqual(cookie["samesite"], "Lax")
        self.assertEqual(int(cookie["max-age"]), COOKIE_MAX_AGE)
