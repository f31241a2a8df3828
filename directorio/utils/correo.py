"""Correos transaccionales del directorio (contacto y newsletter).

Un fallo del backend de correo se registra y no interrumpe la petición: el
mensaje o la suscripción ya quedaron guardados.
"""
import logging

from django.conf import settings
from django.core.mail import send_mail

from directorio.utils.rutas import url_absoluta

logger = logging.getLogger(__name__)


def _enviar(asunto, cuerpo, destinatarios):
    try:
        send_mail(asunto, cuerpo, settings.DEFAULT_FROM_EMAIL, destinatarios, fail_silently=False)
    except Exception:
        logger.exception("Error enviando correo '%s' a %s", asunto, ", ".join(destinatarios))
        return False
    return True


def notificar_contacto(mensaje):
    """Aviso al administrador y confirmación al remitente."""
    cuerpo_admin = (
        f"Nombre: {mensaje.nombre}\n"
        f"Email: {mensaje.email}\n"
        f"Teléfono: {mensaje.telefono or '-'}\n"
        f"Tipo: {mensaje.get_tipo_display()}\n"
        f"Idioma: {mensaje.idioma}\n\n"
        f"{mensaje.mensaje}"
    )
    enviado_admin = _enviar(f"Nuevo contacto: {mensaje.asunto}", cuerpo_admin, [settings.CONTACT_EMAIL])

    if mensaje.idioma == "en":
        asunto = "We received your message"
        cuerpo = (
            f"Hello {mensaje.nombre},\n\n"
            "Thank you for contacting us. We'll get back to you soon.\n\n"
            f"Subject: {mensaje.asunto}\n\n"
            "The Tepoztlán team"
        )
    else:
        asunto = "Recibimos tu mensaje"
        cuerpo = (
            f"Hola {mensaje.nombre},\n\n"
            "Gracias por escribirnos. Te responderemos pronto.\n\n"
            f"Asunto: {mensaje.asunto}\n\n"
            "El equipo de Tepoztlán"
        )
    enviado_remitente = _enviar(asunto, cuerpo, [mensaje.email])
    return enviado_admin and enviado_remitente


def bienvenida_newsletter(suscripcion):
    enlace = url_absoluta(f"/api/newsletter/confirmar/{suscripcion.token_confirmacion}/")
    saludo_nombre = f" {suscripcion.nombre}" if suscripcion.nombre else ""
    if suscripcion.idioma == "en":
        asunto = "Welcome to Tepoztlán! 🌄"
        cuerpo = (
            f"Hello{saludo_nombre}!\n\n"
            "Thank you for subscribing to our newsletter. You'll receive the best "
            "recommendations, events and experiences from Tepoztlán.\n\n"
            f"Confirm your subscription: {enlace}\n\n"
            "If you prefer not to receive these emails, you can unsubscribe at any time.\n"
            "The Tepoztlán team"
        )
    else:
        asunto = "¡Bienvenido a Tepoztlán! 🌄"
        cuerpo = (
            f"¡Hola{saludo_nombre}!\n\n"
            "Gracias por suscribirte a nuestro boletín. Recibirás las mejores "
            "recomendaciones, eventos y experiencias de Tepoztlán.\n\n"
            f"Confirma tu suscripción: {enlace}\n\n"
            "Si prefieres no recibir estos correos, puedes darte de baja en cualquier momento.\n"
            "El equipo de Tepoztlán"
        )
    return _enviar(asunto, cuerpo, [suscripcion.email])
