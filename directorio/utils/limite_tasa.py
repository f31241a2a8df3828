"""Rate limiting por IP con ventana fija, sobre la librería ``limits``.

Cada endpoint protegido tiene un ``RateLimitItem`` con nombre propio; todos
comparten un almacén de ``limits`` (``memory://`` por defecto). El almacén en
memoria guarda ``clave -> conteo`` con su vencimiento y barre las entradas
vencidas en su propio temporizador.
"""
from __future__ import annotations

import logging
import math
import time
from dataclasses import dataclass
from datetime import datetime, timezone as dt_timezone
from functools import wraps

from django.apps import apps
from django.http import JsonResponse
from django.utils.translation import gettext as _
from limits import RateLimitItemPerSecond
from limits.storage import storage_from_string
from limits.strategies import FixedWindowRateLimiter

logger = logging.getLogger(__name__)

ALMACEN_POR_DEFECTO = "memory://"


@dataclass(frozen=True)
class ConfigLimite:
    ventana: int  # segundos
    maximo: int


@dataclass(frozen=True)
class ResultadoLimite:
    permitido: bool
    limite: int
    restantes: int
    reinicio: float
    reintentar_en: int = 0

    def cabeceras(self):
        return {
            "X-RateLimit-Limit": str(self.limite),
            "X-RateLimit-Remaining": str(self.restantes),
            "X-RateLimit-Reset": datetime.fromtimestamp(self.reinicio, tz=dt_timezone.utc).isoformat(),
        }


class LimitadorVentanaFija:
    """Un límite con nombre (``contacto``, ``resenas``...) sobre una estrategia de ventana fija."""

    def __init__(self, nombre: str, config: ConfigLimite, estrategia: FixedWindowRateLimiter):
        self.nombre = nombre
        self.config = config
        self.estrategia = estrategia
        self.item = RateLimitItemPerSecond(config.maximo, config.ventana, namespace=nombre)

    def verificar(self, clave: str) -> ResultadoLimite:
        permitido = self.estrategia.hit(self.item, clave)
        estado = self.estrategia.get_window_stats(self.item, clave)
        reintentar_en = 0
        if not permitido:
            reintentar_en = max(1, math.ceil(estado.reset_time - time.time()))
        return ResultadoLimite(
            permitido=permitido,
            limite=self.config.maximo,
            restantes=estado.remaining,
            reinicio=estado.reset_time,
            reintentar_en=reintentar_en,
        )

    def limpiar(self, clave: str):
        self.estrategia.clear(self.item, clave)


class ServicioLimites:
    """Named limiters, one per protected endpoint family, sharing one storage."""

    def __init__(self, configuraciones, almacen=ALMACEN_POR_DEFECTO):
        self.almacen = storage_from_string(almacen) if isinstance(almacen, str) else almacen
        estrategia = FixedWindowRateLimiter(self.almacen)
        self.limitadores = {
            nombre: LimitadorVentanaFija(
                nombre,
                config if isinstance(config, ConfigLimite) else ConfigLimite(**config),
                estrategia,
            )
            for nombre, config in configuraciones.items()
        }

    def __getitem__(self, nombre) -> LimitadorVentanaFija:
        return self.limitadores[nombre]

    def reiniciar(self):
        self.almacen.reset()


def ip_cliente(request) -> str:
    """Obtiene la IP real del cliente (proxies/CDN primero)."""
    cf_ip = request.META.get("HTTP_CF_CONNECTING_IP")
    if cf_ip:
        return cf_ip.strip()
    real_ip = request.META.get("HTTP_X_REAL_IP")
    if real_ip:
        return real_ip.strip()
    x_forwarded_for = request.META.get("HTTP_X_FORWARDED_FOR")
    if x_forwarded_for:
        return x_forwarded_for.split(",")[0].strip()
    return request.META.get("REMOTE_ADDR") or "unknown"


def respuesta_limite_excedido(resultado: ResultadoLimite) -> JsonResponse:
    response = JsonResponse(
        {
            "success": False,
            "error": _("Demasiadas solicitudes. Intenta más tarde."),
            "retryAfter": resultado.reintentar_en,
        },
        status=429,
    )
    for cabecera, valor in resultado.cabeceras().items():
        response[cabecera] = valor
    response["Retry-After"] = str(resultado.reintentar_en)
    return response


def limitar_tasa(nombre: str):
    """Decorador de vista: aplica el limitador ``nombre`` del servicio de la app."""

    def decorador(vista):
        @wraps(vista)
        def envoltura(request, *args, **kwargs):
            limitador = apps.get_app_config("directorio").limites[nombre]
            ip = ip_cliente(request)
            resultado = limitador.verificar(ip)
            if not resultado.permitido:
                logger.warning("Rate limit '%s' excedido para %s", nombre, ip)
                return respuesta_limite_excedido(resultado)

            response = vista(request, *args, **kwargs)
            for cabecera, valor in resultado.cabeceras().items():
                response[cabecera] = valor
            return response

        return envoltura

    return decorador
