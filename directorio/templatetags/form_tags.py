from django import template
from django.utils.html import format_html, format_html_join
from django.utils.translation import gettext as _

from directorio.utils.rutas import IDIOMA_POR_DEFECTO, IDIOMAS, ruta_localizada, separar_idioma, url_alternativa

register = template.Library()


@register.simple_tag(takes_context=True)
def translate_url_to(context, language_code):
    """
    Traduce la URL actual al idioma especificado, conservando la query string.
    Uso: {% translate_url_to 'en' %}
    """
    request = context.get('request')
    if not request:
        return url_alternativa('', language_code)

    url = url_alternativa(request.path, language_code)
    query = request.META.get('QUERY_STRING')
    return f"{url}?{query}" if query else url


@register.simple_tag(takes_context=True)
def hreflang_tags(context):
    """
    ``<link rel="alternate">`` para es, en y x-default (= es) de la página actual.
    Uso: {% hreflang_tags %}
    """
    request = context.get('request')
    # Solo las páginas localizadas tienen alternativas
    if not request or separar_idioma(request.path)[0] is None:
        return ''
    ruta = request.path
    enlaces = [(idioma, url_alternativa(ruta, idioma)) for idioma in IDIOMAS]
    enlaces.append(('x-default', url_alternativa(ruta, IDIOMA_POR_DEFECTO)))
    return format_html_join(
        '\n',
        '<link rel="alternate" hreflang="{}" href="{}">',
        enlaces,
    )


@register.simple_tag(takes_context=True)
def canonical_tag(context):
    request = context.get('request')
    if not request or separar_idioma(request.path)[0] is None:
        return ''
    idioma = getattr(request, 'LANGUAGE_CODE', IDIOMA_POR_DEFECTO)
    return format_html('<link rel="canonical" href="{}">', url_alternativa(request.path, idioma))


@register.simple_tag(takes_context=True)
def ruta_url(context, ruta):
    """Ruta de una sección en el idioma activo. Uso: {% ruta_url 'hospedaje/hoteles' %}"""
    request = context.get('request')
    idioma = getattr(request, 'LANGUAGE_CODE', IDIOMA_POR_DEFECTO) if request else IDIOMA_POR_DEFECTO
    return ruta_localizada(ruta, idioma)


@register.filter(name='format_price_level')
def format_price_level(value) -> str:
    mapping = {
        1: _('Económico'),
        2: _('Moderado'),
        3: _('Costoso'),
        4: _('Muy costoso'),
    }
    try:
        return mapping.get(int(value), _('No especificado'))
    except (TypeError, ValueError):
        return _('No especificado')
