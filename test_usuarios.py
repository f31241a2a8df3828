import os

import django

os.environ.setdefault("DJANGO_SETTINGS_MODULE", "Tepoztlan.settings_test")
django.setup()

from django.contrib.auth import get_user_model
from django.test import TestCase

from usuarios.forms import UserRegisterForm

User = get_user_model()


class UserManagerTestCase(TestCase):

    def test_create_user(self):
        user = User.objects.create_user("Ana@EXAMPLE.com", "secreta123")
        self.assertEqual(user.email, "Ana@example.com")
        self.assertTrue(user.check_password("secreta123"))
        self.assertEqual(user.rol, User.ROL_USUARIO)
        self.assertFalse(user.is_staff)
        self.assertFalse(user.es_admin)

    def test_create_superuser(self):
        user = User.objects.create_superuser("root@example.com", "secreta123")
        self.assertTrue(user.is_superuser)
        self.assertEqual(user.rol, User.ROL_ADMIN)
        self.assertTrue(user.es_admin)

    def test_email_obligatorio(self):
        with self.assertRaises(ValueError):
            User.objects.create_user("", "secreta123")

    def test_nombres(self):
        user = User(email="ana.lopez@example.com")
        self.assertEqual(user.get_full_name(), "ana.lopez@example.com")
        self.assertEqual(user.get_short_name(), "ana.lopez")


class RegistroTestCase(TestCase):

    def test_contrasenas_distintas(self):
        form = UserRegisterForm(data={
            "email": "ana@example.com",
            "full_name": "Ana",
            "idioma_preferido": "es",
            "password1": "Tepoz-Valle-2024",
            "password2": "otra-cosa",
        })
        self.assertFalse(form.is_valid())
        self.assertIn("password2", form.errors)

    def test_contrasena_debil(self):
        form = UserRegisterForm(data={
            "email": "ana@example.com",
            "full_name": "Ana",
            "idioma_preferido": "es",
            "password1": "12345678",
            "password2": "12345678",
        })
        self.assertFalse(form.is_valid())
        self.assertIn("password2", form.errors)

    def test_correo_repetido_sin_importar_mayusculas(self):
        User.objects.create_user("ana@example.com", "x")
        form = UserRegisterForm(data={
            "email": "ANA@example.com",
            "full_name": "Ana",
            "idioma_preferido": "es",
            "password1": "Tepoz-Valle-2024",
            "password2": "Tepoz-Valle-2024",
        })
        self.assertFalse(form.is_valid())
        self.assertIn("email", form.errors)

    def test_registro_inicia_sesion_y_redirige(self):
        response = self.client.post("/cuentas/registro/", {
            "email": "john@example.com",
            "full_name": "John",
            "idioma_preferido": "en",
            "password1": "Tepoz-Valle-2024",
            "password2": "Tepoz-Valle-2024",
        })
        self.assertEqual(response.status_code, 302)
        self.assertEqual(response["Location"], "/en/user")
        user = User.objects.get(email="john@example.com")
        self.assertEqual(int(self.client.session["_auth_user_id"]), user.pk)


class LoginTestCase(TestCase):

    def setUp(self):
        self.user = User.objects.create_user("ana@example.com", "secreta123", idioma_preferido="es")

    def test_pagina_de_login(self):
        response = self.client.get("/cuentas/")
        self.assertEqual(response.status_code, 200)
        self.assertTemplateUsed(response, "usuarios/login.html")

    def test_login_correcto(self):
        response = self.client.post("/cuentas/", {"email": "ana@example.com", "password": "secreta123"})
        self.assertEqual(response.status_code, 302)
        self.assertEqual(response["Location"], "/es/usuario")

    def test_login_respeta_next_local(self):
        response = self.client.post(
            "/cuentas/",
            {"email": "ana@example.com", "password": "secreta123", "next": "/es/hospedaje"},
        )
        self.assertEqual(response["Location"], "/es/hospedaje")

    def test_login_ignora_next_externo(self):
        response = self.client.post(
            "/cuentas/",
            {"email": "ana@example.com", "password": "secreta123", "next": "https://malo.example.com/"},
        )
        self.assertEqual(response["Location"], "/es/usuario")

    def test_login_incorrecto(self):
        response = self.client.post("/cuentas/", {"email": "ana@example.com", "password": "mala"})
        self.assertEqual(response.status_code, 200)
        self.assertFalse(response.context["form"].is_valid())

    def test_logout(self):
        self.client.force_login(self.user)
        response = self.client.get("/cuentas/salir/", HTTP_ACCEPT_LANGUAGE="en")
        self.assertEqual(response["Location"], "/en")
        self.assertNotIn("_auth_user_id", self.client.session)
