from django import template

from directorio.utils.types import get_localized_subcategoria

register = template.Library()


@register.filter
def subcategoria_label(negocio):
    return get_localized_subcategoria(negocio)


@register.filter
def nombre_en(negocio, idioma):
    """Nombre del negocio en ``idioma``. Uso: {{ negocio|nombre_en:IDIOMA_ACTUAL }}"""
    return negocio.nombre(idioma)


@register.filter
def url_en(negocio, idioma):
    return negocio.get_absolute_url(idioma)


@register.filter
def contenido_en(resena, idioma):
    return resena.contenido(idioma)


@register.filter
def titulo_en(evento, idioma):
    return evento.titulo(idioma)


@register.filter
def lugar_en(evento, idioma):
    return evento.lugar(idioma)
