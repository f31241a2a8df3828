import ipaddress
import json
import logging
from datetime import datetime, time, timedelta
from functools import wraps

from django.conf import settings
from django.db import DatabaseError, IntegrityError, transaction
from django.db.models import F, Q
from django.http import Http404, HttpResponseNotAllowed, HttpResponsePermanentRedirect, HttpResponseRedirect, JsonResponse
from django.shortcuts import render
from django.utils import timezone
from django.utils.dateparse import parse_date
from django.utils.http import urlencode
from django.views.decorators.csrf import csrf_exempt
from django.views.decorators.http import require_GET, require_http_methods, require_POST

from directorio.forms import ContactoForm, NewsletterForm, ResenaForm
from directorio.models import SECCION_EVENTOS, Evento, Favorito, Negocio, Resena, SuscripcionNewsletter
from directorio.utils.correo import bienvenida_newsletter, notificar_contacto
from directorio.utils.limite_tasa import ip_cliente, limitar_tasa
from directorio.utils.rutas import TABLA, TABLA_RUTAS, es_idioma_valido, ruta_localizada
from directorio.utils.types import titulo_seccion

logger = logging.getLogger(__name__)

# ────────────────────────────────────────────────────────────────────────
# Mensajes de la API (clave -> (es, en))
# ────────────────────────────────────────────────────────────────────────

MENSAJES = {
    "json_invalido": ("JSON inválido", "Invalid JSON"),
    "datos_invalidos": ("Datos inválidos", "Invalid data"),
    "error_interno": ("Ocurrió un error. Inténtalo de nuevo", "Something went wrong. Please try again"),
    "login_requerido": ("Debes iniciar sesión", "You must be logged in"),
    "negocio_no_encontrado": ("Negocio no encontrado", "Business not found"),
    "ya_favorito": ("Ya está en tus favoritos", "Already in favorites"),
    "resena_duplicada": ("Ya escribiste una reseña para este negocio", "You have already reviewed this business"),
    "resena_no_encontrada": ("Reseña no encontrada", "Review not found"),
    "solo_tus_resenas": ("Solo puedes borrar tus propias reseñas", "You can only delete your own reviews"),
    "contacto_ok": (
        "¡Gracias por tu mensaje! Te responderemos pronto",
        "Thank you for your message! We'll get back to you soon",
    ),
    "newsletter_existe": (
        "Este correo ya está suscrito a nuestro boletín",
        "This email is already subscribed to our newsletter",
    ),
    "newsletter_reactivada": (
        "¡Bienvenido de nuevo! Tu suscripción ha sido reactivada",
        "Welcome back! Your subscription has been reactivated",
    ),
    "newsletter_ok": (
        "¡Gracias por suscribirte! Revisa tu correo para confirmar",
        "Thank you for subscribing! Check your email to confirm",
    ),
    "newsletter_baja": ("Te diste de baja del boletín", "You have been unsubscribed"),
    "newsletter_no_encontrada": ("Suscripción no encontrada", "Subscription not found"),
    "busqueda_corta": ("Escribe al menos 2 caracteres", "Type at least 2 characters"),
}


def _mensaje(clave, idioma):
    es, en = MENSAJES[clave]
    return en if idioma == "en" else es


def _idioma_api(request, payload=None, campo="language"):
    """Idioma de la respuesta: el del payload si es válido, si no el de la petición."""
    valor = (payload or {}).get(campo)
    if es_idioma_valido(valor):
        return valor
    contexto = getattr(request, "contexto_idioma", None)
    return contexto.idioma if contexto else getattr(request, "LANGUAGE_CODE", "es")


def _error(clave, idioma, status, **extra):
    return JsonResponse({"success": False, "error": _mensaje(clave, idioma), **extra}, status=status)


def _leer_json(request):
    """Body JSON como dict, o None si no es JSON válido."""
    try:
        payload = json.loads(request.body.decode("utf-8") or "{}")
    except (UnicodeDecodeError, json.JSONDecodeError):
        return None
    return payload if isinstance(payload, dict) else None


def _ip_valida(ip):
    try:
        ipaddress.ip_address(ip)
    except ValueError:
        return None
    return ip


def login_requerido_json(vista):
    """Like ``login_required`` but answers 401 JSON instead of redirecting."""

    @wraps(vista)
    def envoltura(request, *args, **kwargs):
        if not request.user.is_authenticated:
            return _error("login_requerido", _idioma_api(request), 401)
        return vista(request, *args, **kwargs)

    return envoltura


def _negocio_o_none(negocio_id):
    return Negocio.objects.activos().filter(pk=negocio_id).first()


# ────────────────────────────────────────────────────────────────────────
# Páginas
# ────────────────────────────────────────────────────────────────────────

def _subsecciones(ruta):
    prefijo = f"{ruta}/"
    return [
        entrada.segmento_es for entrada in TABLA_RUTAS
        if entrada.segmento_es.startswith(prefijo) and "/" not in entrada.segmento_es[len(prefijo):]
    ]


def _enlaces(rutas, idioma):
    return [
        {"ruta": ruta, "url": ruta_localizada(ruta, idioma), "titulo": titulo_seccion(ruta, idioma)}
        for ruta in rutas
    ]


def pagina(request, lang, ruta=""):
    """Todas las páginas públicas: ``/{lang}`` y ``/{lang}/{ruta}``.

    Una ruta escrita con los segmentos del otro idioma (``/en/hospedaje``)
    se redirige con 301 a su forma correcta (``/en/stay``).
    """
    esperada = ruta_localizada(ruta, lang)
    actual = "/" + request.path_info.strip("/")
    if actual != esperada:
        query = request.META.get("QUERY_STRING")
        return HttpResponsePermanentRedirect(f"{esperada}?{query}" if query else esperada)

    canonica = TABLA.canonica(ruta)
    if canonica == "":
        return home(request, lang)
    if canonica == "usuario":
        return usuario(request, lang)
    if canonica == "buscar":
        return buscar(request, lang)
    if canonica in TABLA:
        return seccion(request, lang, canonica)

    ruta_seccion, _, slug = canonica.rpartition("/")
    if ruta_seccion == SECCION_EVENTOS:
        return evento_detalle(request, lang, slug)
    if ruta_seccion and ruta_seccion in TABLA:
        return negocio_detalle(request, lang, ruta_seccion, slug)
    raise Http404("Página no encontrada")


def home(request, lang):
    secciones = [entrada.segmento_es for entrada in TABLA_RUTAS if "/" not in entrada.segmento_es]
    context = {
        "idioma": lang,
        "destacados": Negocio.objects.activos().destacados()[:6],
        "eventos_destacados": Evento.objects.activos().destacados().proximos()[:3],
        "secciones": _enlaces(secciones, lang),
    }
    return render(request, "directorio/home.html", context)


CALENDARIO = f"{SECCION_EVENTOS}/calendario"
DIAS_CALENDARIO = 30


def _rango_calendario(request):
    """``?desde=AAAA-MM-DD&hasta=AAAA-MM-DD``; por defecto hoy y los próximos 30 días."""
    hoy = timezone.localdate()
    desde = _fecha_o_none(request.GET.get("desde")) or hoy
    hasta = _fecha_o_none(request.GET.get("hasta")) or desde + timedelta(days=DIAS_CALENDARIO)
    if hasta < desde:
        hasta = desde
    return desde, hasta


def _fecha_o_none(valor):
    try:
        return parse_date(valor or "")
    except ValueError:
        return None


def _inicio_del_dia(fecha):
    return timezone.make_aware(datetime.combine(fecha, time.min))


def _fin_del_dia(fecha):
    return timezone.make_aware(datetime.combine(fecha, time.max))


def seccion(request, lang, ruta):
    negocios = Negocio.objects.activos().de_seccion(ruta).prefetch_related("tags")
    etiqueta = request.GET.get("etiqueta")
    if etiqueta:
        negocios = negocios.filter(tags__slug=etiqueta).distinct()

    context = {
        "idioma": lang,
        "ruta": ruta,
        "titulo": titulo_seccion(ruta, lang),
        "subsecciones": _enlaces(_subsecciones(ruta), lang),
        "negocios": negocios,
        "etiqueta": etiqueta,
    }
    if ruta == SECCION_EVENTOS:
        context["eventos"] = Evento.objects.activos().proximos()[:50]
    elif ruta == CALENDARIO:
        desde, hasta = _rango_calendario(request)
        context.update({
            "eventos": Evento.objects.activos().entre(_inicio_del_dia(desde), _fin_del_dia(hasta)),
            "desde": desde,
            "hasta": hasta,
        })
    return render(request, "directorio/seccion.html", context)


def negocio_detalle(request, lang, ruta_seccion, slug):
    negocio = Negocio.objects.activos().filter(slug=slug).prefetch_related("tags").first()
    if negocio is None:
        raise Http404("Negocio no encontrado")
    if negocio.seccion != ruta_seccion:
        return HttpResponsePermanentRedirect(negocio.get_absolute_url(lang))

    es_favorito = (
        request.user.is_authenticated
        and Favorito.objects.filter(usuario=request.user, negocio=negocio).exists()
    )
    context = {
        "idioma": lang,
        "negocio": negocio,
        "nombre": negocio.nombre(lang),
        "descripcion": negocio.descripcion(lang),
        "direccion": negocio.direccion(lang),
        "amenidades": negocio.amenidades(lang),
        "resenas": negocio.resenas.select_related("usuario")[:20],
        "es_favorito": es_favorito,
        "seccion": {"url": ruta_localizada(ruta_seccion, lang), "titulo": titulo_seccion(ruta_seccion, lang)},
    }
    return render(request, "directorio/negocio_detalle.html", context)


def evento_detalle(request, lang, slug):
    evento = Evento.objects.activos().filter(slug=slug).select_related("negocio").first()
    if evento is None:
        raise Http404("Evento no encontrado")

    organizador = evento.negocio if evento.negocio and evento.negocio.activo else None
    context = {
        "idioma": lang,
        "evento": evento,
        "titulo": evento.titulo(lang),
        "descripcion": evento.descripcion(lang),
        "lugar": evento.lugar(lang),
        "precio": evento.precio(lang),
        "organizador": organizador,
        "seccion": {"url": ruta_localizada(SECCION_EVENTOS, lang), "titulo": titulo_seccion(SECCION_EVENTOS, lang)},
    }
    return render(request, "directorio/evento_detalle.html", context)


def usuario(request, lang):
    if not request.user.is_authenticated:
        return HttpResponseRedirect(f"{settings.LOGIN_URL}?{urlencode({'next': request.get_full_path()})}")
    context = {
        "idioma": lang,
        "favoritos": request.user.favoritos.select_related("negocio"),
        "resenas": request.user.resenas.select_related("negocio"),
    }
    return render(request, "directorio/usuario.html", context)


def _buscar_negocios(consulta):
    return Negocio.objects.activos().filter(
        Q(nombre_es__icontains=consulta)
        | Q(nombre_en__icontains=consulta)
        | Q(descripcion_es__icontains=consulta)
        | Q(descripcion_en__icontains=consulta)
        | Q(tags__name__icontains=consulta)
    ).distinct()


def buscar(request, lang):
    consulta = (request.GET.get("q") or "").strip()
    resultados = _buscar_negocios(consulta)[:50] if len(consulta) >= 2 else []
    eventos = Evento.objects.activos().buscar(consulta)[:20] if len(consulta) >= 2 else []
    context = {
        "idioma": lang,
        "consulta": consulta,
        "resultados": resultados,
        "eventos": eventos,
    }
    return render(request, "directorio/buscar.html", context)


def robots_txt(request):
    return render(
        request,
        "robots.txt",
        {"site_url": settings.SITE_URL},
        content_type="text/plain",
    )


# ────────────────────────────────────────────────────────────────────────
# API: búsqueda
# ────────────────────────────────────────────────────────────────────────

@require_GET
@limitar_tasa("busqueda")
def buscar_api(request):
    idioma = _idioma_api(request, request.GET, campo="lang")
    consulta = (request.GET.get("q") or "").strip()
    if len(consulta) < 2:
        return _error("busqueda_corta", idioma, 400)

    resultados = [
        {
            "id": negocio.pk,
            "slug": negocio.slug,
            "name": negocio.nombre(idioma),
            "category": negocio.categoria,
            "subcategory": negocio.subcategoria,
            "rating": float(negocio.rating),
            "url": negocio.get_absolute_url(idioma),
        }
        for negocio in _buscar_negocios(consulta)[:20]
    ]
    return JsonResponse({"success": True, "results": resultados, "count": len(resultados)})


# ────────────────────────────────────────────────────────────────────────
# API: contacto
# ────────────────────────────────────────────────────────────────────────

@csrf_exempt
@require_POST
@limitar_tasa("contacto")
def contacto_api(request):
    payload = _leer_json(request)
    if payload is None:
        return _error("json_invalido", _idioma_api(request), 400)

    idioma = _idioma_api(request, payload)
    form = ContactoForm.desde_json(payload)
    if not form.is_valid():
        return _error("datos_invalidos", idioma, 400, details=form.errors.get_json_data())

    mensaje = form.save(commit=False)
    mensaje.ip_address = _ip_valida(ip_cliente(request))
    try:
        mensaje.save()
    except DatabaseError:
        logger.exception("No se pudo guardar el mensaje de contacto de %s", mensaje.email)
        return _error("error_interno", idioma, 500)

    logger.info("Mensaje de contacto #%s recibido (%s)", mensaje.pk, mensaje.tipo)
    notificar_contacto(mensaje)
    return JsonResponse({"success": True, "message": _mensaje("contacto_ok", idioma), "id": mensaje.pk})


# ────────────────────────────────────────────────────────────────────────
# API: favoritos
# ────────────────────────────────────────────────────────────────────────

@require_http_methods(["POST", "DELETE"])
@login_requerido_json
def favorito_api(request, negocio_id):
    idioma = _idioma_api(request)
    negocio = _negocio_o_none(negocio_id)
    if negocio is None:
        return _error("negocio_no_encontrado", idioma, 404)

    if request.method == "DELETE":
        Favorito.objects.filter(usuario=request.user, negocio=negocio).delete()
        return JsonResponse({"success": True, "isFavorited": False})

    _, creado = Favorito.objects.get_or_create(usuario=request.user, negocio=negocio)
    if not creado:
        return _error("ya_favorito", idioma, 400)
    return JsonResponse({"success": True, "isFavorited": True}, status=201)


@require_POST
@login_requerido_json
def alternar_favorito_api(request, negocio_id):
    negocio = _negocio_o_none(negocio_id)
    if negocio is None:
        return _error("negocio_no_encontrado", _idioma_api(request), 404)

    borrados, _ = Favorito.objects.filter(usuario=request.user, negocio=negocio).delete()
    if borrados:
        return JsonResponse({"success": True, "isFavorited": False})
    Favorito.objects.create(usuario=request.user, negocio=negocio)
    return JsonResponse({"success": True, "isFavorited": True})


@require_GET
@login_requerido_json
@limitar_tasa("api")
def favoritos_api(request):
    idioma = _idioma_api(request, request.GET, campo="lang")
    favoritos = [
        {
            "id": favorito.pk,
            "businessId": favorito.negocio_id,
            "name": favorito.negocio.nombre(idioma),
            "url": favorito.negocio.get_absolute_url(idioma),
            "createdAt": favorito.fecha_creacion.isoformat(),
        }
        for favorito in request.user.favoritos.select_related("negocio")
    ]
    return JsonResponse({"success": True, "favorites": favoritos})


@require_GET
def estado_favorito_api(request, negocio_id):
    if not request.user.is_authenticated:
        return JsonResponse({"success": True, "isFavorited": False})
    existe = Favorito.objects.filter(usuario=request.user, negocio_id=negocio_id).exists()
    return JsonResponse({"success": True, "isFavorited": existe})


# ────────────────────────────────────────────────────────────────────────
# API: reseñas
# ────────────────────────────────────────────────────────────────────────

def resenas_negocio_api(request, negocio_id):
    if request.method == "POST":
        return crear_resena_api(request, negocio_id)
    if request.method == "GET":
        return listar_resenas_api(request, negocio_id)
    return HttpResponseNotAllowed(["GET", "POST"])


@login_requerido_json
@limitar_tasa("resenas")
def crear_resena_api(request, negocio_id):
    payload = _leer_json(request)
    if payload is None:
        return _error("json_invalido", _idioma_api(request), 400)

    idioma = _idioma_api(request, payload, campo="locale")
    negocio = _negocio_o_none(negocio_id)
    if negocio is None:
        return _error("negocio_no_encontrado", idioma, 404)

    form = ResenaForm(data=payload)
    if not form.is_valid():
        return _error("datos_invalidos", idioma, 400, details=form.errors.get_json_data())

    if Resena.objects.filter(usuario=request.user, negocio=negocio).exists():
        return _error("resena_duplicada", idioma, 400)

    comentario = form.cleaned_data["comment"]
    locale = form.cleaned_data["locale"]
    try:
        with transaction.atomic():
            resena = Resena.objects.create(
                negocio=negocio,
                usuario=request.user,
                rating=form.cleaned_data["rating"],
                contenido_es=comentario if locale == "es" else "",
                contenido_en=comentario if locale == "en" else "",
            )
    except IntegrityError:
        return _error("resena_duplicada", idioma, 400)

    negocio.recalcular_rating()
    logger.info("Reseña #%s creada para negocio %s", resena.pk, negocio.slug)
    return JsonResponse({"success": True, "review": resena.como_dict()}, status=201)


@limitar_tasa("api")
def listar_resenas_api(request, negocio_id):
    if not Negocio.objects.filter(pk=negocio_id).exists():
        return _error("negocio_no_encontrado", _idioma_api(request), 404)
    resenas = Resena.objects.filter(negocio_id=negocio_id)
    return JsonResponse({"success": True, "reviews": [resena.como_dict() for resena in resenas]})


@require_GET
@login_requerido_json
def mis_resenas_api(request):
    return JsonResponse({"success": True, "reviews": [resena.como_dict() for resena in request.user.resenas.all()]})


@require_POST
@login_requerido_json
def resena_util_api(request, resena_id):
    actualizadas = Resena.objects.filter(pk=resena_id).update(util=F("util") + 1)
    if not actualizadas:
        return _error("resena_no_encontrada", _idioma_api(request), 404)
    util = Resena.objects.values_list("util", flat=True).get(pk=resena_id)
    return JsonResponse({"success": True, "helpful": util})


@require_http_methods(["DELETE"])
@login_requerido_json
def resena_api(request, resena_id):
    idioma = _idioma_api(request)
    resena = Resena.objects.select_related("negocio").filter(pk=resena_id).first()
    if resena is None:
        return _error("resena_no_encontrada", idioma, 404)
    if resena.usuario_id != request.user.pk and not request.user.es_admin:
        return _error("solo_tus_resenas", idioma, 403)

    negocio = resena.negocio
    resena.delete()
    negocio.recalcular_rating()
    return JsonResponse({"success": True})


# ────────────────────────────────────────────────────────────────────────
# API: newsletter
# ────────────────────────────────────────────────────────────────────────

@csrf_exempt
@require_POST
@limitar_tasa("newsletter")
def newsletter_api(request):
    payload = _leer_json(request)
    if payload is None:
        return _error("json_invalido", _idioma_api(request), 400)

    idioma = _idioma_api(request, payload)
    form = NewsletterForm(data=payload)
    if not form.is_valid():
        return _error("datos_invalidos", idioma, 400, details=form.errors.get_json_data())

    email = form.cleaned_data["email"]
    existente = SuscripcionNewsletter.objects.filter(email=email).first()
    if existente is not None:
        if existente.activo:
            return _error("newsletter_existe", idioma, 400)
        existente.reactivar()
        bienvenida_newsletter(existente)
        return JsonResponse({"success": True, "message": _mensaje("newsletter_reactivada", idioma)})

    try:
        suscripcion = SuscripcionNewsletter.objects.create(
            email=email,
            nombre=form.cleaned_data["name"],
            idioma=form.cleaned_data["language"],
            fuente=str(payload.get("source") or "website")[:50],
            ip_address=_ip_valida(ip_cliente(request)),
            user_agent=request.META.get("HTTP_USER_AGENT", ""),
        )
    except DatabaseError:
        logger.exception("No se pudo crear la suscripción de %s", email)
        return _error("error_interno", idioma, 500)

    logger.info("Nueva suscripción al newsletter: %s", email)
    bienvenida_newsletter(suscripcion)
    return JsonResponse({"success": True, "message": _mensaje("newsletter_ok", idioma)}, status=201)


@csrf_exempt
@require_POST
@limitar_tasa("api")
def newsletter_baja_api(request):
    payload = _leer_json(request)
    if payload is None:
        return _error("json_invalido", _idioma_api(request), 400)

    idioma = _idioma_api(request, payload)
    email = str(payload.get("email") or "").strip().lower()
    suscripcion = SuscripcionNewsletter.objects.filter(email=email, activo=True).first()
    if suscripcion is None:
        return _error("newsletter_no_encontrada", idioma, 404)
    suscripcion.desactivar()
    return JsonResponse({"success": True, "message": _mensaje("newsletter_baja", idioma)})


@require_GET
def newsletter_confirmar(request, token):
    suscripcion = SuscripcionNewsletter.objects.filter(token_confirmacion=token).first()
    if suscripcion is None:
        return _error("newsletter_no_encontrada", _idioma_api(request), 404)
    if not suscripcion.confirmado:
        suscripcion.confirmar_suscripcion()
    return HttpResponseRedirect(ruta_localizada("", suscripcion.idioma) + "?newsletter=confirmado")
