import secrets
from decimal import Decimal
from typing import NamedTuple
from uuid import uuid4

from django.conf import settings
from django.core.validators import EmailValidator, MaxValueValidator, MinValueValidator
from django.db import models
from django.db.models import Avg, Count, Q
from django.utils import timezone
from django.utils.text import slugify
from django.utils.translation import get_language
from taggit.managers import TaggableManager
from taggit.models import TagBase, TaggedItemBase

from directorio.utils.rutas import IDIOMA_POR_DEFECTO, IDIOMAS, TABLA, es_idioma_valido, ruta_localizada

# ────────────────────────────────────────────────────────────────
# Choices & constants
# ────────────────────────────────────────────────────────────────

IDIOMA_CHOICES = (
    ("es", "Español"),
    ("en", "English"),
)

CATEGORIA_CHOICES = (
    ("restaurant", "Restaurante"),
    ("hotel", "Hotel"),
    ("cafe", "Cafetería"),
    ("bar", "Bar"),
    ("experience", "Experiencia"),
    ("event", "Evento"),
    ("shop", "Tienda"),
    ("service", "Servicio"),
)

SUBCATEGORIA_CHOICES = (
    ("restaurant", "Restaurante"),
    ("hotel", "Hotel"),
    ("eco-lodge", "Eco-lodge"),
    ("vacation-rental", "Renta vacacional"),
    ("hostel", "Hostal"),
    ("retreat", "Retiro"),
    ("camping", "Camping"),
    ("cafe", "Cafetería"),
    ("bakery", "Panadería"),
    ("bar", "Bar"),
    ("pulqueria", "Pulquería"),
    ("street-food", "Comida callejera"),
    ("hiking", "Senderismo"),
    ("wellness", "Bienestar"),
    ("cultural", "Cultural"),
    ("adventure", "Aventura"),
    ("spiritual", "Espiritual"),
    ("tour", "Tour"),
    ("festival", "Festival"),
    ("market", "Mercado"),
    ("craft", "Artesanía"),
    ("gallery", "Galería"),
    ("transport", "Transporte"),
    ("medical", "Médico"),
    ("financial", "Financiero"),
)

# Sección canónica (ruta en español) donde se publica cada subcategoría
SECCION_POR_SUBCATEGORIA = {
    "restaurant": "comer/restaurantes",
    "cafe": "comer/cafeterias",
    "bakery": "comer/cafeterias",
    "bar": "comer/bares",
    "pulqueria": "comer/bares",
    "street-food": "comer/comida-callejera",
    "hotel": "hospedaje/hoteles",
    "eco-lodge": "hospedaje/eco-lodges",
    "vacation-rental": "hospedaje/rentas-vacacionales",
    "hostel": "hospedaje/hostales",
    "retreat": "hospedaje/retiros",
    "camping": "hospedaje/camping",
    "hiking": "experiencias/senderismo",
    "wellness": "experiencias/bienestar",
    "cultural": "experiencias/cultura",
    "adventure": "experiencias/aventura",
    "spiritual": "experiencias/espiritual",
    "tour": "experiencias/tours",
    "festival": "eventos/festivales",
    "market": "compras/mercados",
    "craft": "compras/artesanos",
    "gallery": "compras/galerias",
    "transport": "servicios/transporte",
    "medical": "servicios/medicos",
    "financial": "servicios/financieros",
}

TIPO_CONTACTO_CHOICES = (
    ("general", "General"),
    ("business", "Negocio"),
    ("partnership", "Alianza"),
)

RECURRENCIA_CHOICES = (
    ("weekly", "Semanal"),
    ("monthly", "Mensual"),
    ("yearly", "Anual"),
)

# Los eventos se publican como /es/eventos/<slug> / /en/events/<slug>
SECCION_EVENTOS = "eventos"


def slug_unico(queryset, base, reservado=None):
    """Primer ``base``, ``base-1``, ``base-2``... libre en ``queryset`` y no reservado."""
    candidato = base
    contador = 1
    while queryset.filter(slug=candidato).exists() or (reservado and reservado(candidato)):
        candidato = f"{base}-{contador}"
        contador += 1
    return candidato


def subcategorias_de_seccion(ruta):
    """Subcategorías publicadas en ``ruta`` o en cualquiera de sus subsecciones."""
    ruta = ruta.strip("/")
    return [
        subcategoria for subcategoria, seccion in SECCION_POR_SUBCATEGORIA.items()
        if seccion == ruta or seccion.startswith(ruta + "/")
    ]


# ────────────────────────────────────────────────────────────────
# QuerySets & Managers
# ────────────────────────────────────────────────────────────────

class NegocioQuerySet(models.QuerySet):

    def activos(self):
        return self.filter(activo=True)

    def de_seccion(self, ruta):
        return self.filter(subcategoria__in=subcategorias_de_seccion(ruta))

    def destacados(self):
        return self.filter(destacado=True)


class RutaNegocio(NamedTuple):
    idioma: str
    categoria: str
    slug: str
    lastmod: object = None


# ────────────────────────────────────────────────────────────────
# Etiquetas
# ────────────────────────────────────────────────────────────────

class Etiqueta(TagBase):
    """Etiquetas libres de los negocios (mexicana, terraza, pet-friendly...)."""
    class Meta:
        verbose_name = "Etiqueta"
        verbose_name_plural = "Etiquetas"


class NegocioEtiquetado(TaggedItemBase):
    tag = models.ForeignKey(
        Etiqueta,
        on_delete=models.CASCADE,
        related_name="%(app_label)s_%(class)s_items",
    )
    content_object = models.ForeignKey("Negocio", on_delete=models.CASCADE)

    class Meta:
        verbose_name = "Etiqueta de negocio"
        verbose_name_plural = "Etiquetas de negocios"


# ────────────────────────────────────────────────────────────────
# Negocios
# ────────────────────────────────────────────────────────────────

class Negocio(models.Model):
    """Negocio del directorio (hotel, restaurante, café, experiencia...)."""

    slug = models.SlugField(max_length=255, unique=True, blank=True)
    categoria = models.CharField(max_length=20, choices=CATEGORIA_CHOICES, db_index=True)
    subcategoria = models.CharField(max_length=30, choices=SUBCATEGORIA_CHOICES, db_index=True)

    # Contenido bilingüe
    nombre_es = models.CharField(max_length=255)
    nombre_en = models.CharField(max_length=255)
    descripcion_es = models.TextField()
    descripcion_en = models.TextField()

    # Ubicación
    direccion_es = models.TextField(blank=True)
    direccion_en = models.TextField(blank=True)
    barrio = models.CharField(max_length=100, null=True, blank=True)
    latitud = models.DecimalField(max_digits=10, decimal_places=7, null=True, blank=True)
    longitud = models.DecimalField(max_digits=10, decimal_places=7, null=True, blank=True)

    # Contacto
    telefono = models.CharField(max_length=50, null=True, blank=True)
    whatsapp = models.CharField(max_length=50, null=True, blank=True)
    email = models.EmailField(max_length=255, null=True, blank=True)
    sitio_web = models.URLField(max_length=1000, null=True, blank=True)

    imagenes = models.JSONField(default=list, blank=True)
    amenidades_es = models.JSONField(default=list, blank=True)
    amenidades_en = models.JSONField(default=list, blank=True)

    # Precios
    precio_es = models.CharField(max_length=100, null=True, blank=True)
    precio_en = models.CharField(max_length=100, null=True, blank=True)
    nivel_precio = models.PositiveSmallIntegerField(
        default=2,
        validators=[MinValueValidator(1), MaxValueValidator(4)],
        help_text="1-4 ($-$$$$)",
    )
    horario_json = models.JSONField(null=True, blank=True, help_text="Horario por día de la semana")

    # Estado
    verificado = models.BooleanField(default=False)
    destacado = models.BooleanField(default=False)
    activo = models.BooleanField(default=True, db_index=True)

    # Servicios
    tiene_wifi = models.BooleanField(default=False)
    tiene_estacionamiento = models.BooleanField(default=False)
    acepta_tarjetas = models.BooleanField(default=False)
    pet_friendly = models.BooleanField(default=False)
    accesible = models.BooleanField(default=False)

    rating = models.DecimalField(max_digits=3, decimal_places=2, default=Decimal("0"))
    total_resenas = models.IntegerField(default=0)

    propietario = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="negocios",
    )

    tags = TaggableManager(
        through=NegocioEtiquetado,
        blank=True,
        help_text="Lista de etiquetas separadas por comas",
        verbose_name="Etiquetas",
    )

    fecha_creacion = models.DateTimeField(auto_now_add=True)
    fecha_actualizacion = models.DateTimeField(auto_now=True)

    objects = NegocioQuerySet.as_manager()

    class Meta:
        ordering = ["-destacado", "-rating", "nombre_es"]
        verbose_name = "Negocio"
        verbose_name_plural = "Negocios"

    def save(self, *args, **kwargs):
        # Generar slug único si no existe
        if not self.slug:
            qs = Negocio.objects.exclude(pk=self.pk) if self.pk else Negocio.objects.all()
            self.slug = slug_unico(qs, slugify(self.nombre_es) or uuid4().hex[:8])
        super().save(*args, **kwargs)

    def __str__(self):
        return self.nombre_es

    @property
    def seccion(self):
        return SECCION_POR_SUBCATEGORIA.get(self.subcategoria, "negocios")

    @property
    def ruta(self):
        return f"{self.seccion}/{self.slug}"

    def get_absolute_url(self, idioma=None):
        idioma = idioma or get_language()
        if not es_idioma_valido(idioma):
            idioma = IDIOMA_POR_DEFECTO
        return ruta_localizada(self.ruta, idioma)

    def nombre(self, idioma):
        return self.nombre_en if idioma == "en" else self.nombre_es

    def descripcion(self, idioma):
        return self.descripcion_en if idioma == "en" else self.descripcion_es

    def direccion(self, idioma):
        return (self.direccion_en if idioma == "en" else self.direccion_es) or self.direccion_es

    def amenidades(self, idioma):
        return self.amenidades_en if idioma == "en" else self.amenidades_es

    def recalcular_rating(self):
        """Actualiza rating y total de reseñas a partir de las reseñas guardadas."""
        datos = self.resenas.aggregate(promedio=Avg("rating"), total=Count("id"))
        promedio = datos["promedio"] or 0
        self.rating = Decimal(str(round(promedio, 2)))
        self.total_resenas = datos["total"]
        self.save(update_fields=["rating", "total_resenas", "fecha_actualizacion"])


def rutas_de_negocios():
    """Enumerate ``(idioma, categoria, slug)`` for every active business and locale.

    ``categoria`` is the business's section path already spelled for the
    locale (``hospedaje/hoteles`` / ``stay/hotels``).
    """
    negocios = Negocio.objects.activos().only(
        "slug", "subcategoria", "fecha_actualizacion"
    ).order_by("slug")
    for negocio in negocios:
        for idioma in IDIOMAS:
            categoria = ruta_localizada(negocio.seccion, idioma)[len(idioma) + 2:]
            yield RutaNegocio(idioma, categoria, negocio.slug, negocio.fecha_actualizacion)


# ────────────────────────────────────────────────────────────────
# Eventos
# ────────────────────────────────────────────────────────────────

class EventoQuerySet(models.QuerySet):

    def activos(self):
        return self.filter(activo=True)

    def destacados(self):
        return self.filter(destacado=True)

    def proximos(self, ahora=None):
        """Eventos que no han terminado; sin ``fecha_fin`` cuenta la de inicio."""
        ahora = ahora or timezone.now()
        return self.filter(
            Q(fecha_fin__gte=ahora) | Q(fecha_fin__isnull=True, fecha_inicio__gte=ahora)
        )

    def entre(self, inicio, fin):
        return self.filter(fecha_inicio__gte=inicio, fecha_inicio__lte=fin)

    def buscar(self, consulta):
        return self.filter(
            Q(titulo_es__icontains=consulta)
            | Q(titulo_en__icontains=consulta)
            | Q(descripcion_es__icontains=consulta)
            | Q(descripcion_en__icontains=consulta)
        )


def _slug_de_subseccion(slug):
    # /es/eventos/calendario es una sección, no puede ser un evento
    return f"{SECCION_EVENTOS}/{slug}" in TABLA


class Evento(models.Model):
    """Evento con fecha (festival, mercado, ceremonia...), opcionalmente de un negocio."""

    slug = models.SlugField(max_length=255, unique=True, blank=True)
    negocio = models.ForeignKey(
        Negocio,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="eventos",
    )

    titulo_es = models.CharField(max_length=255)
    titulo_en = models.CharField(max_length=255)
    descripcion_es = models.TextField()
    descripcion_en = models.TextField()

    fecha_inicio = models.DateTimeField(db_index=True)
    fecha_fin = models.DateTimeField(null=True, blank=True)
    es_recurrente = models.BooleanField(default=False)
    patron_recurrencia = models.CharField(max_length=20, choices=RECURRENCIA_CHOICES, blank=True)

    lugar_es = models.TextField()
    lugar_en = models.TextField()
    latitud = models.DecimalField(max_digits=10, decimal_places=7, null=True, blank=True)
    longitud = models.DecimalField(max_digits=10, decimal_places=7, null=True, blank=True)

    es_gratuito = models.BooleanField(default=False)
    precio_es = models.CharField(max_length=100, blank=True)
    precio_en = models.CharField(max_length=100, blank=True)

    imagenes = models.JSONField(default=list, blank=True)

    destacado = models.BooleanField(default=False)
    activo = models.BooleanField(default=True, db_index=True)

    fecha_creacion = models.DateTimeField(auto_now_add=True)
    fecha_actualizacion = models.DateTimeField(auto_now=True)

    objects = EventoQuerySet.as_manager()

    class Meta:
        ordering = ["fecha_inicio"]
        verbose_name = "Evento"
        verbose_name_plural = "Eventos"

    def save(self, *args, **kwargs):
        if not self.slug:
            qs = Evento.objects.exclude(pk=self.pk) if self.pk else Evento.objects.all()
            base = slugify(self.titulo_es) or uuid4().hex[:8]
            self.slug = slug_unico(qs, base, reservado=_slug_de_subseccion)
        if not self.es_recurrente:
            self.patron_recurrencia = ""
        super().save(*args, **kwargs)

    def __str__(self):
        return self.titulo_es

    @property
    def ruta(self):
        return f"{SECCION_EVENTOS}/{self.slug}"

    def get_absolute_url(self, idioma=None):
        idioma = idioma or get_language()
        if not es_idioma_valido(idioma):
            idioma = IDIOMA_POR_DEFECTO
        return ruta_localizada(self.ruta, idioma)

    def titulo(self, idioma):
        return self.titulo_en if idioma == "en" else self.titulo_es

    def descripcion(self, idioma):
        return self.descripcion_en if idioma == "en" else self.descripcion_es

    def lugar(self, idioma):
        return self.lugar_en if idioma == "en" else self.lugar_es

    def precio(self, idioma):
        if self.es_gratuito:
            return "Free" if idioma == "en" else "Gratis"
        return (self.precio_en if idioma == "en" else self.precio_es) or self.precio_es


# ────────────────────────────────────────────────────────────────
# Reseñas y favoritos
# ────────────────────────────────────────────────────────────────

class Resena(models.Model):
    negocio = models.ForeignKey(Negocio, on_delete=models.CASCADE, related_name="resenas")
    usuario = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.CASCADE, related_name="resenas")

    rating = models.PositiveSmallIntegerField(validators=[MinValueValidator(1), MaxValueValidator(5)])
    titulo_es = models.CharField(max_length=255, blank=True)
    titulo_en = models.CharField(max_length=255, blank=True)
    # El comentario se guarda en el campo del idioma en que se escribió
    contenido_es = models.TextField(blank=True)
    contenido_en = models.TextField(blank=True)
    fotos = models.JSONField(default=list, blank=True)

    verificada = models.BooleanField(default=False)
    util = models.PositiveIntegerField(default=0)

    # Respuesta del negocio
    respuesta_es = models.TextField(blank=True)
    respuesta_en = models.TextField(blank=True)
    fecha_respuesta = models.DateTimeField(null=True, blank=True)

    fecha_creacion = models.DateTimeField(auto_now_add=True)
    fecha_actualizacion = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["-fecha_creacion"]
        verbose_name = "Reseña"
        verbose_name_plural = "Reseñas"
        constraints = [
            models.UniqueConstraint(fields=["usuario", "negocio"], name="resena_unica_por_usuario"),
        ]

    def __str__(self):
        return f"{self.negocio} · {self.rating}★"

    def contenido(self, idioma):
        if idioma == "en":
            return self.contenido_en or self.contenido_es
        return self.contenido_es or self.contenido_en

    def como_dict(self):
        return {
            "id": self.pk,
            "businessId": self.negocio_id,
            "userId": self.usuario_id,
            "rating": self.rating,
            "contentEs": self.contenido_es,
            "contentEn": self.contenido_en,
            "helpful": self.util,
            "verified": self.verificada,
            "createdAt": self.fecha_creacion.isoformat() if self.fecha_creacion else None,
        }


class Favorito(models.Model):
    usuario = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.CASCADE, related_name="favoritos")
    negocio = models.ForeignKey(Negocio, on_delete=models.CASCADE, related_name="favoritos")
    fecha_creacion = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ["-fecha_creacion"]
        verbose_name = "Favorito"
        verbose_name_plural = "Favoritos"
        constraints = [
            models.UniqueConstraint(fields=["usuario", "negocio"], name="favorito_unico"),
        ]

    def __str__(self):
        return f"{self.usuario} ♥ {self.negocio}"


# ────────────────────────────────────────────────────────────────
# Formulario de contacto
# ────────────────────────────────────────────────────────────────

class MensajeContacto(models.Model):
    nombre = models.CharField(max_length=255)
    email = models.EmailField(max_length=255)
    telefono = models.CharField(max_length=50, blank=True)
    asunto = models.CharField(max_length=255)
    mensaje = models.TextField()
    tipo = models.CharField(max_length=50, choices=TIPO_CONTACTO_CHOICES, default="general")
    idioma = models.CharField(max_length=2, choices=IDIOMA_CHOICES, default="es")

    leido = models.BooleanField(default=False, db_index=True)
    respondido = models.BooleanField(default=False, db_index=True)
    ip_address = models.GenericIPAddressField(null=True, blank=True)

    fecha_creacion = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ["-fecha_creacion"]
        verbose_name = "Mensaje de contacto"
        verbose_name_plural = "Mensajes de contacto"

    def __str__(self):
        return f"{self.asunto} ({self.email})"


# ────────────────────────────────────────────────────────────────
# Newsletter subscription model
# ────────────────────────────────────────────────────────────────

class SuscripcionNewsletter(models.Model):
    """Modelo para gestionar suscripciones al newsletter"""

    email = models.EmailField(
        unique=True,
        validators=[EmailValidator()],
        help_text="Dirección de correo electrónico del suscriptor"
    )
    nombre = models.CharField(max_length=100, blank=True)
    idioma = models.CharField(max_length=2, choices=IDIOMA_CHOICES, default="es")
    activo = models.BooleanField(default=True)
    confirmado = models.BooleanField(default=False)
    token_confirmacion = models.CharField(max_length=64, blank=True)
    fuente = models.CharField(
        max_length=50,
        default="website",
        help_text="Origen de la suscripción (website, landing, etc.)"
    )
    ip_address = models.GenericIPAddressField(null=True, blank=True)
    user_agent = models.TextField(blank=True)

    fecha_suscripcion = models.DateTimeField(auto_now_add=True)
    fecha_confirmacion = models.DateTimeField(null=True, blank=True)
    fecha_baja = models.DateTimeField(null=True, blank=True)

    class Meta:
        verbose_name = "Suscripción Newsletter"
        verbose_name_plural = "Suscripciones Newsletter"
        ordering = ["-fecha_suscripcion"]
        indexes = [
            models.Index(fields=["activo", "confirmado"], name="newsletter_estado_idx"),
        ]

    def __str__(self):
        estado = "✅" if self.confirmado else "⏳"
        activo_str = "🟢" if self.activo else "🔴"
        return f"{estado} {activo_str} {self.email}"

    def save(self, *args, **kwargs):
        """Generar token de confirmación si no existe"""
        if not self.token_confirmacion:
            self.token_confirmacion = secrets.token_urlsafe(32)
        super().save(*args, **kwargs)

    def confirmar_suscripcion(self):
        self.confirmado = True
        self.fecha_confirmacion = timezone.now()
        self.save(update_fields=["confirmado", "fecha_confirmacion"])

    def desactivar(self):
        self.activo = False
        self.fecha_baja = timezone.now()
        self.save(update_fields=["activo", "fecha_baja"])

    def reactivar(self):
        self.activo = True
        self.fecha_baja = None
        self.save(update_fields=["activo", "fecha_baja"])
