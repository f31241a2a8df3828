from django.urls import path, re_path

from . import views

# Endpoints JSON (montados bajo /api/)
api_urlpatterns = [
    path('buscar/', views.buscar_api, name='buscar_api'),
    path('contacto/', views.contacto_api, name='contacto_api'),

    path('favoritos/', views.favoritos_api, name='favoritos_api'),
    path('favoritos/<int:negocio_id>/', views.favorito_api, name='favorito_api'),
    path('favoritos/<int:negocio_id>/alternar/', views.alternar_favorito_api, name='alternar_favorito_api'),
    path('favoritos/<int:negocio_id>/estado/', views.estado_favorito_api, name='estado_favorito_api'),

    path('negocios/<int:negocio_id>/resenas/', views.resenas_negocio_api, name='resenas_negocio_api'),
    path('resenas/mias/', views.mis_resenas_api, name='mis_resenas_api'),
    path('resenas/<int:resena_id>/', views.resena_api, name='resena_api'),
    path('resenas/<int:resena_id>/util/', views.resena_util_api, name='resena_util_api'),

    path('newsletter/', views.newsletter_api, name='newsletter_api'),
    path('newsletter/baja/', views.newsletter_baja_api, name='newsletter_baja_api'),
    path('newsletter/confirmar/<str:token>/', views.newsletter_confirmar, name='newsletter_confirmar'),
]

# Páginas localizadas: /es, /en, /es/hospedaje/hoteles, /en/stay/hotels/<slug>...
paginas_urlpatterns = [
    re_path(r'^(?P<lang>es|en)/?$', views.pagina, name='home'),
    re_path(r'^(?P<lang>es|en)/(?P<ruta>.+?)/?$', views.pagina, name='pagina'),
]
