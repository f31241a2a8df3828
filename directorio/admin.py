from django.contrib import admin
from django.utils.html import format_html

from .models import Etiqueta, Evento, Favorito, MensajeContacto, Negocio, Resena, SuscripcionNewsletter


class ResenaInline(admin.TabularInline):
    model = Resena
    extra = 0
    fields = ('usuario', 'rating', 'contenido_es', 'contenido_en', 'util', 'verificada')
    readonly_fields = ('usuario', 'util')


@admin.register(Negocio)
class NegocioAdmin(admin.ModelAdmin):
    """Configuración del admin para el modelo Negocio."""
    list_display = ('nombre_es', 'categoria', 'subcategoria', 'rating', 'total_resenas', 'destacado', 'verificado', 'activo_icon', 'get_tags')
    search_fields = ('nombre_es', 'nombre_en', 'direccion_es', 'tags__name')
    list_filter = ('categoria', 'subcategoria', 'destacado', 'verificado', 'activo', 'nivel_precio')
    prepopulated_fields = {'slug': ('nombre_es',)}
    readonly_fields = ('rating', 'total_resenas', 'fecha_creacion', 'fecha_actualizacion')
    inlines = [ResenaInline]
    actions = ['marcar_destacados', 'quitar_destacados', 'recalcular_ratings']
    fieldsets = (
        (None, {
            'fields': ('nombre_es', 'nombre_en', 'slug', 'categoria', 'subcategoria', 'propietario')
        }),
        ('Descripción', {
            'fields': ('descripcion_es', 'descripcion_en', 'amenidades_es', 'amenidades_en'),
        }),
        ('Etiquetas y Destacados', {
            'fields': ('tags', 'destacado', 'verificado', 'activo'),
            'description': 'Configura las etiquetas y estados destacados del negocio.',
        }),
        ('Ubicación y contacto', {
            'classes': ('collapse',),
            'fields': (
                'direccion_es', 'direccion_en', 'barrio', 'latitud', 'longitud',
                'telefono', 'whatsapp', 'email', 'sitio_web',
            ),
        }),
        ('Precios y servicios', {
            'classes': ('collapse',),
            'fields': (
                'nivel_precio', 'precio_es', 'precio_en', 'horario_json', 'imagenes',
                'tiene_wifi', 'tiene_estacionamiento', 'acepta_tarjetas', 'pet_friendly', 'accesible',
            ),
        }),
        ('Metadatos', {
            'fields': ('rating', 'total_resenas', 'fecha_creacion', 'fecha_actualizacion'),
        }),
    )

    def activo_icon(self, obj):
        if obj.activo:
            return format_html('<span style="color: green;">{}</span>', '✓')
        return format_html('<span style="color: red;">{}</span>', '✗')
    activo_icon.short_description = "Activo"
    activo_icon.admin_order_field = 'activo'

    def get_tags(self, obj):
        return ", ".join(o.name for o in obj.tags.all())
    get_tags.short_description = "Etiquetas"

    def get_queryset(self, request):
        return super().get_queryset(request).prefetch_related('tags')

    def marcar_destacados(self, request, queryset):
        updated = queryset.update(destacado=True)
        self.message_user(request, f'{updated} negocios marcados como destacados.')
    marcar_destacados.short_description = "Marcar como destacados"

    def quitar_destacados(self, request, queryset):
        updated = queryset.update(destacado=False)
        self.message_user(request, f'{updated} negocios ya no están destacados.')
    quitar_destacados.short_description = "Quitar de destacados"

    def recalcular_ratings(self, request, queryset):
        for negocio in queryset:
            negocio.recalcular_rating()
        self.message_user(request, f'Rating recalculado para {queryset.count()} negocios.')
    recalcular_ratings.short_description = "Recalcular rating desde las reseñas"


@admin.register(Evento)
class EventoAdmin(admin.ModelAdmin):
    list_display = ('titulo_es', 'fecha_inicio', 'fecha_fin', 'es_recurrente', 'es_gratuito', 'destacado', 'activo')
    list_filter = ('destacado', 'activo', 'es_recurrente', 'es_gratuito', 'fecha_inicio')
    search_fields = ('titulo_es', 'titulo_en', 'lugar_es')
    prepopulated_fields = {'slug': ('titulo_es',)}
    raw_id_fields = ('negocio',)
    date_hierarchy = 'fecha_inicio'
    actions = ['marcar_destacados', 'desactivar']
    fieldsets = (
        (None, {
            'fields': ('titulo_es', 'titulo_en', 'slug', 'negocio', 'descripcion_es', 'descripcion_en')
        }),
        ('Fechas', {
            'fields': ('fecha_inicio', 'fecha_fin', 'es_recurrente', 'patron_recurrencia'),
        }),
        ('Lugar y precio', {
            'fields': ('lugar_es', 'lugar_en', 'latitud', 'longitud', 'es_gratuito', 'precio_es', 'precio_en', 'imagenes'),
        }),
        ('Estado', {
            'fields': ('destacado', 'activo'),
        }),
    )

    def marcar_destacados(self, request, queryset):
        updated = queryset.update(destacado=True)
        self.message_user(request, f'{updated} eventos marcados como destacados.')
    marcar_destacados.short_description = "Marcar como destacados"

    def desactivar(self, request, queryset):
        updated = queryset.update(activo=False)
        self.message_user(request, f'{updated} eventos ocultos.')
    desactivar.short_description = "Ocultar eventos"


@admin.register(Etiqueta)
class EtiquetaAdmin(admin.ModelAdmin):
    list_display = ('name', 'slug')
    search_fields = ('name',)
    prepopulated_fields = {'slug': ('name',)}


@admin.register(Resena)
class ResenaAdmin(admin.ModelAdmin):
    list_display = ('negocio', 'usuario', 'rating', 'util', 'verificada', 'fecha_creacion')
    list_filter = ('rating', 'verificada', 'fecha_creacion')
    search_fields = ('negocio__nombre_es', 'usuario__email', 'contenido_es', 'contenido_en')
    readonly_fields = ('util', 'fecha_creacion', 'fecha_actualizacion')
    raw_id_fields = ('negocio', 'usuario')
    actions = ['marcar_verificadas']

    def marcar_verificadas(self, request, queryset):
        updated = queryset.update(verificada=True)
        self.message_user(request, f'{updated} reseñas verificadas.')
    marcar_verificadas.short_description = "Marcar reseñas como verificadas"

    def delete_queryset(self, request, queryset):
        negocios = {resena.negocio for resena in queryset.select_related('negocio')}
        super().delete_queryset(request, queryset)
        for negocio in negocios:
            negocio.recalcular_rating()


@admin.register(Favorito)
class FavoritoAdmin(admin.ModelAdmin):
    list_display = ('usuario', 'negocio', 'fecha_creacion')
    search_fields = ('usuario__email', 'negocio__nombre_es')
    raw_id_fields = ('negocio', 'usuario')


@admin.register(MensajeContacto)
class MensajeContactoAdmin(admin.ModelAdmin):
    """Bandeja de mensajes del formulario de contacto."""

    list_display = ['asunto', 'nombre', 'email', 'tipo', 'idioma', 'leido_display', 'respondido_display', 'fecha_creacion']
    list_filter = ['leido', 'respondido', 'tipo', 'idioma', 'fecha_creacion']
    search_fields = ['nombre', 'email', 'asunto', 'mensaje']
    readonly_fields = ['nombre', 'email', 'telefono', 'asunto', 'mensaje', 'tipo', 'idioma', 'ip_address', 'fecha_creacion']
    list_per_page = 50
    date_hierarchy = 'fecha_creacion'
    actions = ['marcar_leidos', 'marcar_respondidos', 'marcar_no_leidos']

    fieldsets = (
        ('Mensaje', {
            'fields': ('asunto', 'mensaje', 'tipo', 'idioma')
        }),
        ('Remitente', {
            'fields': ('nombre', 'email', 'telefono')
        }),
        ('Seguimiento', {
            'fields': ('leido', 'respondido')
        }),
        ('Información de Registro', {
            'fields': ('ip_address', 'fecha_creacion'),
            'classes': ('collapse',)
        }),
    )

    def leido_display(self, obj):
        if obj.leido:
            return format_html('<span style="color: green;">{}</span>', '✓ Leído')
        return format_html('<span style="color: orange;">{}</span>', '● Nuevo')
    leido_display.short_description = 'Leído'
    leido_display.admin_order_field = 'leido'

    def respondido_display(self, obj):
        if obj.respondido:
            return format_html('<span style="color: green;">{}</span>', '✓ Respondido')
        return format_html('<span style="color: gray;">{}</span>', 'Pendiente')
    respondido_display.short_description = 'Respondido'
    respondido_display.admin_order_field = 'respondido'

    def marcar_leidos(self, request, queryset):
        updated = queryset.update(leido=True)
        self.message_user(request, f'{updated} mensajes marcados como leídos.')
    marcar_leidos.short_description = "Marcar como leídos"

    def marcar_respondidos(self, request, queryset):
        updated = queryset.update(leido=True, respondido=True)
        self.message_user(request, f'{updated} mensajes marcados como respondidos.')
    marcar_respondidos.short_description = "Marcar como respondidos"

    def marcar_no_leidos(self, request, queryset):
        updated = queryset.update(leido=False)
        self.message_user(request, f'{updated} mensajes marcados como no leídos.')
    marcar_no_leidos.short_description = "Marcar como no leídos"


@admin.register(SuscripcionNewsletter)
class SuscripcionNewsletterAdmin(admin.ModelAdmin):
    """Suscriptores del boletín. Las bajas conservan la fecha para reactivarlas después."""

    list_display = ('email', 'nombre', 'idioma', 'estado', 'fuente', 'fecha_suscripcion', 'fecha_baja')
    list_filter = ('activo', 'confirmado', 'idioma', 'fuente')
    search_fields = ('email', 'nombre')
    readonly_fields = (
        'token_confirmacion', 'fecha_suscripcion', 'fecha_confirmacion', 'fecha_baja',
        'ip_address', 'user_agent',
    )
    date_hierarchy = 'fecha_suscripcion'
    list_per_page = 100
    actions = ['activar_suscripciones', 'desactivar_suscripciones', 'confirmar_suscripciones']
    fieldsets = (
        (None, {
            'fields': ('email', 'nombre', 'idioma', 'fuente')
        }),
        ('Estado', {
            'fields': ('activo', 'confirmado', 'fecha_confirmacion', 'fecha_baja'),
        }),
        ('Origen', {
            'classes': ('collapse',),
            'fields': ('token_confirmacion', 'fecha_suscripcion', 'ip_address', 'user_agent'),
        }),
    )

    def estado(self, obj):
        if not obj.activo:
            return format_html('<span style="color: red;">{}</span>', 'Baja')
        if obj.confirmado:
            return format_html('<span style="color: green;">{}</span>', 'Confirmada')
        return format_html('<span style="color: orange;">{}</span>', 'Sin confirmar')
    estado.short_description = 'Estado'
    estado.admin_order_field = 'activo'

    def activar_suscripciones(self, request, queryset):
        bajas = queryset.filter(activo=False)
        for suscripcion in bajas:
            suscripcion.reactivar()
        self.message_user(request, f'{len(bajas)} suscripciones reactivadas.')
    activar_suscripciones.short_description = "Reactivar suscripciones"

    def desactivar_suscripciones(self, request, queryset):
        activas = queryset.filter(activo=True)
        for suscripcion in activas:
            suscripcion.desactivar()
        self.message_user(request, f'{len(activas)} suscripciones dadas de baja.')
    desactivar_suscripciones.short_description = "Dar de baja"

    def confirmar_suscripciones(self, request, queryset):
        pendientes = queryset.filter(confirmado=False)
        for suscripcion in pendientes:
            suscripcion.confirmar_suscripcion()
        self.message_user(request, f'{len(pendientes)} suscripciones confirmadas.')
    confirmar_suscripciones.short_description = "Marcar como confirmadas"


admin.site.site_header = "Tepoztlán · Administración"
admin.site.site_title = "Tepoztlán"
admin.site.index_title = "Directorio"
