import os

import django

os.environ.setdefault("DJANGO_SETTINGS_MODULE", "Tepoztlan.settings_test")
django.setup()

from django.core.exceptions import ImproperlyConfigured
from django.test import SimpleTestCase, override_settings

from directorio.utils.rutas import (
    IDIOMAS,
    RUTAS_PRIORITARIAS,
    RUTAS_SECUNDARIAS,
    TABLA,
    TABLA_RUTAS,
    EntradaRuta,
    TablaRutas,
    frecuencia_cambio,
    prioridad_ruta,
    ruta_localizada,
    separar_idioma,
    url_alternativa,
)


class TablaRutasTestCase(SimpleTestCase):
    """Tabla de rutas es <-> en."""

    def test_ida_y_vuelta_para_todas_las_entradas(self):
        for entrada in TABLA_RUTAS:
            en = TABLA.a_idioma(entrada.segmento_es, "en")
            self.assertEqual(en, entrada.segmento_en)
            self.assertEqual(TABLA.a_idioma(en, "es"), entrada.segmento_es)
            self.assertEqual(TABLA.a_idioma(TABLA.a_idioma(entrada.segmento_en, "es"), "en"), entrada.segmento_en)

    def test_segmento_desconocido_se_devuelve_igual(self):
        self.assertEqual(TABLA.a_idioma("posada-del-tepozteco", "en"), "posada-del-tepozteco")
        self.assertEqual(TABLA.a_idioma("posada-del-tepozteco", "es"), "posada-del-tepozteco")

    def test_acepta_cualquier_ortografia_de_entrada(self):
        self.assertEqual(TABLA.a_idioma("stay/hotels", "en"), "stay/hotels")
        self.assertEqual(TABLA.a_idioma("hospedaje/hoteles", "es"), "hospedaje/hoteles")

    def test_localizar_usa_el_prefijo_mas_largo(self):
        self.assertEqual(
            TABLA.localizar("/es/hospedaje/rentas-vacacionales/casa-azul", "en"),
            "/en/stay/rentals/casa-azul",
        )
        self.assertEqual(
            TABLA.localizar("/en/eat/cafes/cafe-tepoz", "es"),
            "/es/comer/cafeterias/cafe-tepoz",
        )

    def test_localizar_portada_y_rutas_sin_prefijo(self):
        self.assertEqual(TABLA.localizar("/", "en"), "/en")
        self.assertEqual(TABLA.localizar("/es", "en"), "/en")
        self.assertEqual(TABLA.localizar("hospedaje", "en"), "/en/stay")
        self.assertEqual(TABLA.localizar("/hospedaje/hoteles/", "es"), "/es/hospedaje/hoteles")

    def test_ruta_desconocida_conserva_segmentos(self):
        self.assertEqual(TABLA.localizar("/en/no-existe/algo", "es"), "/es/no-existe/algo")

    def test_canonica(self):
        self.assertEqual(TABLA.canonica("/en/stay/hotels/posada"), "hospedaje/hoteles/posada")
        self.assertEqual(TABLA.canonica("/en"), "")

    def test_contains_y_len(self):
        self.assertIn("stay/hotels", TABLA)
        self.assertIn("/hospedaje/", TABLA)
        self.assertNotIn("hoteles", TABLA)
        self.assertEqual(len(TABLA), len(TABLA_RUTAS))

    def test_espanol_duplicado_falla(self):
        with self.assertRaises(ImproperlyConfigured):
            TablaRutas([EntradaRuta("comer", "eat"), EntradaRuta("comer", "food")])

    def test_ingles_duplicado_falla(self):
        with self.assertRaises(ImproperlyConfigured):
            TablaRutas([EntradaRuta("comer", "eat"), EntradaRuta("comida", "eat")])

    def test_ingles_que_choca_con_otra_entrada_espanola_falla(self):
        with self.assertRaises(ImproperlyConfigured):
            TablaRutas([EntradaRuta("mapa", "map"), EntradaRuta("map", "mapa-viejo")])

    def test_misma_ortografia_en_ambos_idiomas_es_valida(self):
        tabla = TablaRutas([EntradaRuta("blog", "blog")])
        self.assertEqual(tabla.a_idioma("blog", "en"), "blog")


class FuncionesRutasTestCase(SimpleTestCase):

    def test_separar_idioma(self):
        self.assertEqual(separar_idioma("/en/stay/hotels"), ("en", "stay/hotels"))
        self.assertEqual(separar_idioma("/es"), ("es", ""))
        self.assertEqual(separar_idioma("/es/?q=1"), ("es", ""))
        self.assertEqual(separar_idioma("/esto/otro"), (None, "esto/otro"))
        self.assertEqual(separar_idioma("/fr/algo"), (None, "fr/algo"))

    @override_settings(SITE_URL="https://ejemplo.mx")
    def test_url_alternativa_usa_site_url(self):
        self.assertEqual(url_alternativa("/es/hospedaje/hoteles", "en"), "https://ejemplo.mx/en/stay/hotels")
        self.assertEqual(url_alternativa("", "es"), "https://ejemplo.mx/es")

    def test_rutas_del_sitemap_estan_en_la_tabla(self):
        for ruta in (*RUTAS_PRIORITARIAS, *RUTAS_SECUNDARIAS):
            if ruta:
                self.assertIn(ruta, TABLA)
            for idioma in IDIOMAS:
                self.assertTrue(ruta_localizada(ruta, idioma).startswith(f"/{idioma}"))

    def test_prioridad(self):
        self.assertEqual(prioridad_ruta(""), 1.0)
        self.assertEqual(prioridad_ruta("hospedaje/hoteles"), 0.9)
        self.assertEqual(prioridad_ruta("mapa"), 0.8)
        self.assertEqual(prioridad_ruta("comer/bares"), 0.7)
        self.assertEqual(prioridad_ruta("descubre/tepoztlan/historia"), 0.6)

    def test_frecuencia(self):
        self.assertEqual(frecuencia_cambio("eventos/calendario"), "daily")
        self.assertEqual(frecuencia_cambio("comer/bares"), "weekly")
        self.assertEqual(frecuencia_cambio("informacion"), "monthly")
        self.assertEqual(frecuencia_cambio("descubre"), "weekly")
        self.assertEqual(frecuencia_cambio("blog"), "monthly")
