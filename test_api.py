import os

import django

os.environ.setdefault("DJANGO_SETTINGS_MODULE", "Tepoztlan.settings_test")
django.setup()

import json
from decimal import Decimal
from unittest import mock

from django.apps import apps
from django.contrib.auth import get_user_model
from django.core import mail
from django.test import TestCase

from directorio.models import Favorito, MensajeContacto, Negocio, Resena, SuscripcionNewsletter

User = get_user_model()


class ApiTestCase(TestCase):
    """Base: limpia los limitadores entre pruebas y ofrece helpers JSON."""

    def setUp(self):
        limites = apps.get_app_config("directorio").limites
        limites.reiniciar()
        self.addCleanup(limites.reiniciar)
        self.negocio = Negocio.objects.create(
            nombre_es="Café Luna", nombre_en="Moon Cafe",
            descripcion_es="Café de especialidad.", descripcion_en="Specialty coffee.",
            categoria="cafe", subcategoria="cafe",
        )

    def post_json(self, url, datos, **extra):
        return self.client.post(url, json.dumps(datos), content_type="application/json", **extra)

    def delete(self, url):
        return self.client.delete(url)


class ContactoApiTestCase(ApiTestCase):
    url = "/api/contacto/"

    def datos(self, **cambios):
        datos = {
            "name": "Lucía Pérez",
            "email": "lucia@example.com",
            "phone": "+52 739 000 0000",
            "subject": "Información de hospedaje",
            "message": "Quisiera saber si hay disponibilidad en marzo.",
            "type": "general",
            "language": "es",
        }
        datos.update(cambios)
        return datos

    def test_mensaje_valido(self):
        response = self.post_json(self.url, self.datos(), REMOTE_ADDR="10.0.0.5")
        self.assertEqual(response.status_code, 200)
        body = response.json()
        self.assertTrue(body["success"])

        mensaje = MensajeContacto.objects.get(pk=body["id"])
        self.assertEqual(mensaje.asunto, "Información de hospedaje")
        self.assertEqual(mensaje.ip_address, "10.0.0.5")
        self.assertFalse(mensaje.leido)

        self.assertEqual(len(mail.outbox), 2)
        self.assertEqual(mail.outbox[0].to, ["admin@tepoztlan.com"])
        self.assertEqual(mail.outbox[1].to, ["lucia@example.com"])
        self.assertEqual(mail.outbox[1].subject, "Recibimos tu mensaje")

    def test_respuesta_en_ingles(self):
        response = self.post_json(self.url, self.datos(language="en"))
        self.assertEqual(response.json()["message"], "Thank you for your message! We'll get back to you soon")
        self.assertEqual(mail.outbox[1].subject, "We received your message")

    def test_tipo_por_defecto(self):
        datos = self.datos()
        del datos["type"]
        response = self.post_json(self.url, datos)
        self.assertEqual(MensajeContacto.objects.get(pk=response.json()["id"]).tipo, "general")

    def test_datos_invalidos(self):
        response = self.post_json(self.url, self.datos(email="no-es-correo", message="corto"))
        self.assertEqual(response.status_code, 400)
        body = response.json()
        self.assertFalse(body["success"])
        self.assertEqual(body["error"], "Datos inválidos")
        self.assertIn("email", body["details"])
        self.assertIn("mensaje", body["details"])
        self.assertFalse(MensajeContacto.objects.exists())
        self.assertEqual(len(mail.outbox), 0)

    def test_json_invalido(self):
        response = self.client.post(self.url, "{no json", content_type="application/json")
        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.json()["error"], "JSON inválido")

    def test_solo_post(self):
        self.assertEqual(self.client.get(self.url).status_code, 405)

    def test_limite_de_cinco_por_ventana(self):
        for _ in range(5):
            self.assertEqual(self.post_json(self.url, self.datos()).status_code, 200)
        response = self.post_json(self.url, self.datos())
        self.assertEqual(response.status_code, 429)
        self.assertIn("Retry-After", response)
        self.assertEqual(MensajeContacto.objects.count(), 5)

    def test_fallo_de_correo_no_rompe_la_peticion(self):
        with mock.patch("directorio.utils.correo.send_mail", side_effect=OSError("smtp caído")):
            with self.assertLogs("directorio.utils.correo", "ERROR"):
                response = self.post_json(self.url, self.datos())
        self.assertEqual(response.status_code, 200)
        self.assertEqual(MensajeContacto.objects.count(), 1)


class FavoritosApiTestCase(ApiTestCase):

    def setUp(self):
        super().setUp()
        self.usuario = User.objects.create_user("ana@example.com", "secreta123")

    def test_requiere_sesion(self):
        response = self.client.post(f"/api/favoritos/{self.negocio.pk}/")
        self.assertEqual(response.status_code, 401)
        self.assertEqual(response.json()["error"], "Debes iniciar sesión")

    def test_agregar_y_quitar(self):
        self.client.force_login(self.usuario)
        url = f"/api/favoritos/{self.negocio.pk}/"

        response = self.client.post(url)
        self.assertEqual(response.status_code, 201)
        self.assertTrue(response.json()["isFavorited"])

        response = self.client.post(url)
        self.assertEqual(response.status_code, 400)
        self.assertEqual(Favorito.objects.count(), 1)

        response = self.delete(url)
        self.assertEqual(response.status_code, 200)
        self.assertFalse(Favorito.objects.exists())

    def test_negocio_inexistente(self):
        self.client.force_login(self.usuario)
        self.assertEqual(self.client.post("/api/favoritos/9999/").status_code, 404)

    def test_alternar(self):
        self.client.force_login(self.usuario)
        url = f"/api/favoritos/{self.negocio.pk}/alternar/"
        self.assertTrue(self.client.post(url).json()["isFavorited"])
        self.assertFalse(self.client.post(url).json()["isFavorited"])

    def test_estado_y_lista(self):
        estado = f"/api/favoritos/{self.negocio.pk}/estado/"
        self.assertFalse(self.client.get(estado).json()["isFavorited"])

        Favorito.objects.create(usuario=self.usuario, negocio=self.negocio)
        self.client.force_login(self.usuario)
        self.assertTrue(self.client.get(estado).json()["isFavorited"])

        favoritos = self.client.get("/api/favoritos/?lang=en").json()["favorites"]
        self.assertEqual(len(favoritos), 1)
        self.assertEqual(favoritos[0]["name"], "Moon Cafe")
        self.assertEqual(favoritos[0]["url"], f"/en/eat/cafes/{self.negocio.slug}")


class ResenasApiTestCase(ApiTestCase):

    def setUp(self):
        super().setUp()
        self.usuario = User.objects.create_user("ana@example.com", "secreta123")
        self.url = f"/api/negocios/{self.negocio.pk}/resenas/"

    def test_requiere_sesion(self):
        response = self.post_json(self.url, {"rating": 5, "comment": "Excelente"})
        self.assertEqual(response.status_code, 401)

    def test_crear_resena_actualiza_rating(self):
        self.client.force_login(self.usuario)
        response = self.post_json(self.url, {"rating": 4, "comment": "Muy buen café"})
        self.assertEqual(response.status_code, 201)
        review = response.json()["review"]
        self.assertEqual(review["rating"], 4)
        self.assertEqual(review["contentEs"], "Muy buen café")
        self.assertEqual(review["contentEn"], "")

        self.negocio.refresh_from_db()
        self.assertEqual(self.negocio.rating, Decimal("4.00"))
        self.assertEqual(self.negocio.total_resenas, 1)

    def test_comentario_en_ingles(self):
        self.client.force_login(self.usuario)
        response = self.post_json(self.url, {"rating": 5, "comment": "Great coffee", "locale": "en"})
        review = response.json()["review"]
        self.assertEqual(review["contentEn"], "Great coffee")
        self.assertEqual(review["contentEs"], "")

    def test_resena_duplicada(self):
        self.client.force_login(self.usuario)
        self.post_json(self.url, {"rating": 4, "comment": "Bien"})
        response = self.post_json(self.url, {"rating": 2, "comment": "Otra vez", "locale": "en"})
        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.json()["error"], "You have already reviewed this business")
        self.assertEqual(Resena.objects.count(), 1)

    def test_datos_invalidos(self):
        self.client.force_login(self.usuario)
        response = self.post_json(self.url, {"rating": 6, "comment": ""})
        self.assertEqual(response.status_code, 400)
        self.assertIn("rating", response.json()["details"])

    def test_negocio_inexistente(self):
        self.client.force_login(self.usuario)
        response = self.post_json("/api/negocios/9999/resenas/", {"rating": 4, "comment": "Bien"})
        self.assertEqual(response.status_code, 404)

    def test_limite_de_tres_por_hora(self):
        self.client.force_login(self.usuario)
        for _ in range(3):
            self.post_json(self.url, {"rating": 4, "comment": "Bien"})
        self.assertEqual(self.post_json(self.url, {"rating": 4, "comment": "Bien"}).status_code, 429)

    def test_listar_y_mias(self):
        otro = User.objects.create_user("beto@example.com", "x")
        Resena.objects.create(negocio=self.negocio, usuario=otro, rating=3, contenido_es="Normal")
        Resena.objects.create(negocio=self.negocio, usuario=self.usuario, rating=5, contenido_en="Great")

        reviews = self.client.get(self.url).json()["reviews"]
        self.assertEqual(len(reviews), 2)

        self.client.force_login(self.usuario)
        mias = self.client.get("/api/resenas/mias/").json()["reviews"]
        self.assertEqual([r["contentEn"] for r in mias], ["Great"])

    def test_util(self):
        resena = Resena.objects.create(negocio=self.negocio, usuario=self.usuario, rating=5, contenido_es="Rico")
        self.client.force_login(self.usuario)
        self.client.post(f"/api/resenas/{resena.pk}/util/")
        response = self.client.post(f"/api/resenas/{resena.pk}/util/")
        self.assertEqual(response.json()["helpful"], 2)
        self.assertEqual(self.client.post("/api/resenas/9999/util/").status_code, 404)

    def test_borrar_propia(self):
        self.client.force_login(self.usuario)
        self.post_json(self.url, {"rating": 2, "comment": "Frío"})
        resena = Resena.objects.get()

        response = self.delete(f"/api/resenas/{resena.pk}/")
        self.assertEqual(response.status_code, 200)
        self.assertFalse(Resena.objects.exists())
        self.negocio.refresh_from_db()
        self.assertEqual(self.negocio.total_resenas, 0)
        self.assertEqual(self.negocio.rating, Decimal("0"))

    def test_no_puede_borrar_ajena(self):
        resena = Resena.objects.create(negocio=self.negocio, usuario=self.usuario, rating=5, contenido_es="Rico")
        self.client.force_login(User.objects.create_user("beto@example.com", "x"))
        self.assertEqual(self.delete(f"/api/resenas/{resena.pk}/").status_code, 403)
        self.assertTrue(Resena.objects.exists())

    def test_admin_puede_borrar_cualquiera(self):
        resena = Resena.objects.create(negocio=self.negocio, usuario=self.usuario, rating=5, contenido_es="Rico")
        admin = User.objects.create_user("admin@example.com", "x", rol=User.ROL_ADMIN)
        self.client.force_login(admin)
        self.assertEqual(self.delete(f"/api/resenas/{resena.pk}/").status_code, 200)


class NewsletterApiTestCase(ApiTestCase):
    url = "/api/newsletter/"

    def test_suscripcion_nueva(self):
        response = self.post_json(self.url, {"email": "Nuevo@Example.com", "name": "Nuevo", "language": "en"})
        self.assertEqual(response.status_code, 201)
        self.assertEqual(response.json()["message"], "Thank you for subscribing! Check your email to confirm")

        suscripcion = SuscripcionNewsletter.objects.get()
        self.assertEqual(suscripcion.email, "nuevo@example.com")
        self.assertTrue(suscripcion.activo)
        self.assertFalse(suscripcion.confirmado)
        self.assertEqual(len(mail.outbox), 1)
        self.assertIn(f"/api/newsletter/confirmar/{suscripcion.token_confirmacion}/", mail.outbox[0].body)

    def test_correo_ya_suscrito(self):
        SuscripcionNewsletter.objects.create(email="ana@example.com")
        response = self.post_json(self.url, {"email": "ana@example.com"})
        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.json()["error"], "Este correo ya está suscrito a nuestro boletín")

    def test_reactivar(self):
        suscripcion = SuscripcionNewsletter.objects.create(email="ana@example.com")
        suscripcion.desactivar()
        response = self.post_json(self.url, {"email": "ana@example.com"})
        self.assertEqual(response.status_code, 200)
        suscripcion.refresh_from_db()
        self.assertTrue(suscripcion.activo)
        self.assertIsNone(suscripcion.fecha_baja)

    def test_email_invalido(self):
        response = self.post_json(self.url, {"email": "no-es-correo"})
        self.assertEqual(response.status_code, 400)
        self.assertIn("email", response.json()["details"])

    def test_baja(self):
        SuscripcionNewsletter.objects.create(email="ana@example.com")
        response = self.post_json("/api/newsletter/baja/", {"email": "ANA@example.com"})
        self.assertEqual(response.status_code, 200)
        suscripcion = SuscripcionNewsletter.objects.get()
        self.assertFalse(suscripcion.activo)
        self.assertIsNotNone(suscripcion.fecha_baja)

        response = self.post_json("/api/newsletter/baja/", {"email": "ana@example.com"})
        self.assertEqual(response.status_code, 404)

    def test_confirmar(self):
        suscripcion = SuscripcionNewsletter.objects.create(email="ana@example.com", idioma="en")
        response = self.client.get(f"/api/newsletter/confirmar/{suscripcion.token_confirmacion}/")
        self.assertEqual(response.status_code, 302)
        self.assertEqual(response["Location"], "/en?newsletter=confirmado")
        suscripcion.refresh_from_db()
        self.assertTrue(suscripcion.confirmado)
        self.assertIsNotNone(suscripcion.fecha_confirmacion)

    def test_confirmar_token_desconocido(self):
        self.assertEqual(self.client.get("/api/newsletter/confirmar/nada/").status_code, 404)

    def test_limite_de_dos_por_hora(self):
        for i in range(2):
            self.post_json(self.url, {"email": f"u{i}@example.com"})
        self.assertEqual(self.post_json(self.url, {"email": "u9@example.com"}).status_code, 429)


class BuscarApiTestCase(ApiTestCase):

    def test_resultados(self):
        response = self.client.get("/api/buscar/?q=luna&lang=en")
        self.assertEqual(response.status_code, 200)
        body = response.json()
        self.assertEqual(body["count"], 1)
        self.assertEqual(body["results"][0]["name"], "Moon Cafe")
        self.assertEqual(body["results"][0]["url"], f"/en/eat/cafes/{self.negocio.slug}")

    def test_consulta_corta(self):
        response = self.client.get("/api/buscar/?q=l")
        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.json()["error"], "Escribe al menos 2 caracteres")

    def test_idioma_de_la_cabecera(self):
        response = self.client.get("/api/buscar/?q=l", HTTP_ACCEPT_LANGUAGE="en-US")
        self.assertEqual(response.json()["error"], "Type at least 2 characters")
