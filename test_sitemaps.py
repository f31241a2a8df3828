import os

import django

os.environ.setdefault("DJANGO_SETTINGS_MODULE", "Tepoztlan.settings_test")
django.setup()

from unittest import mock

from django.template import Context, Template
from django.test import RequestFactory, TestCase

from directorio.models import Negocio
from directorio.sitemaps import NegociosSitemap, StaticViewSitemap
from directorio.utils.rutas import RUTAS_PRIORITARIAS, RUTAS_SECUNDARIAS, url_alternativa


class StaticViewSitemapTestCase(TestCase):

    def setUp(self):
        self.urls = StaticViewSitemap().get_urls()

    def test_una_entrada_por_ruta_e_idioma(self):
        total = len(RUTAS_PRIORITARIAS) + len(RUTAS_SECUNDARIAS)
        self.assertEqual(len(self.urls), total * 2)

    def test_ubicaciones_y_alternativas_coinciden_con_url_alternativa(self):
        for entrada in self.urls:
            ruta, idioma = entrada["item"]
            self.assertEqual(entrada["location"], url_alternativa(ruta, idioma))
            alternativas = {alt["lang_code"]: alt["location"] for alt in entrada["alternates"]}
            self.assertEqual(alternativas, {
                "es": url_alternativa(ruta, "es"),
                "en": url_alternativa(ruta, "en"),
            })

    def test_portada_primero_con_prioridad_maxima(self):
        primera = self.urls[0]
        self.assertEqual(primera["item"], ("", "es"))
        self.assertEqual(primera["priority"], "1.0")
        self.assertEqual(primera["location"], "https://tepoztlan.com/es")

    def test_frecuencias(self):
        por_ruta = {entrada["item"][0]: entrada["changefreq"] for entrada in self.urls}
        self.assertEqual(por_ruta["eventos/calendario"], "daily")
        self.assertEqual(por_ruta["informacion"], "monthly")


class NegociosSitemapTestCase(TestCase):

    def test_fichas_en_ambos_idiomas(self):
        Negocio.objects.create(
            nombre_es="Casa Azul", nombre_en="Blue House",
            descripcion_es="Renta.", descripcion_en="Rental.",
            categoria="hotel", subcategoria="vacation-rental", slug="casa-azul",
        )
        urls = NegociosSitemap().get_urls()
        ubicaciones = sorted(entrada["location"] for entrada in urls)
        self.assertEqual(ubicaciones, [
            "https://tepoztlan.com/en/stay/rentals/casa-azul",
            "https://tepoztlan.com/es/hospedaje/rentas-vacacionales/casa-azul",
        ])
        self.assertTrue(all(entrada["lastmod"] for entrada in urls))

    def test_error_del_enumerador_deja_la_seccion_vacia(self):
        with mock.patch("directorio.sitemaps.rutas_de_negocios", side_effect=RuntimeError("db caída")):
            with self.assertLogs("directorio.sitemaps", "ERROR"):
                self.assertEqual(NegociosSitemap().items(), [])

    def test_sitemap_xml_sobrevive_al_error(self):
        with mock.patch("directorio.sitemaps.rutas_de_negocios", side_effect=RuntimeError("db caída")):
            with self.assertLogs("directorio.sitemaps", "ERROR"):
                response = self.client.get("/sitemap.xml")
        self.assertEqual(response.status_code, 200)
        self.assertContains(response, "<loc>https://tepoztlan.com/en/stay/hotels</loc>")

    def test_sitemap_xml_con_alternativas(self):
        response = self.client.get("/sitemap.xml")
        self.assertEqual(response.status_code, 200)
        self.assertContains(
            response,
            '<xhtml:link rel="alternate" hreflang="en" href="https://tepoztlan.com/en/eat/cafes"/>',
        )


class CoherenciaEnlacesTestCase(TestCase):
    """hreflang, sitemap y selector de idioma apuntan a la misma URL."""

    def test_misma_url_en_los_tres_sitios(self):
        plantilla = Template("{% load form_tags %}{% hreflang_tags %}|{% translate_url_to 'en' %}")
        request = RequestFactory().get("/es/comer/cafeterias")
        salida = plantilla.render(Context({"request": request}))
        hreflang, selector = salida.split("|")

        esperada = url_alternativa("comer/cafeterias", "en")
        self.assertIn(f'hreflang="en" href="{esperada}"', hreflang)
        self.assertIn('hreflang="x-default" href="https://tepoztlan.com/es/comer/cafeterias"', hreflang)
        self.assertEqual(selector, esperada)

        del_sitemap = [
            entrada["location"] for entrada in StaticViewSitemap().get_urls()
            if entrada["item"] == ("comer/cafeterias", "en")
        ]
        self.assertEqual(del_sitemap, [esperada])

    def test_sin_etiquetas_fuera_de_paginas_localizadas(self):
        plantilla = Template("{% load form_tags %}{% hreflang_tags %}{% canonical_tag %}")
        request = RequestFactory().get("/cuentas/")
        self.assertEqual(plantilla.render(Context({"request": request})), "")


class RobotsTxtTestCase(TestCase):

    def test_contenido(self):
        response = self.client.get("/robots.txt")
        self.assertEqual(response.status_code, 200)
        self.assertTrue(response["Content-Type"].startswith("text/plain"))
        contenido = response.content.decode()
        self.assertIn("Disallow: /api/", contenido)
        self.assertIn("User-agent: Googlebot", contenido)
        self.assertIn("Sitemap: https://tepoztlan.com/sitemap.xml", contenido)
