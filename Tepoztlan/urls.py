from django.conf import settings
from django.conf.urls.static import static
from django.contrib import admin
from django.contrib.sitemaps.views import sitemap
from django.urls import include, path

from directorio import views as directorio_views
from directorio.sitemaps import sitemaps
from directorio.urls import api_urlpatterns, paginas_urlpatterns

urlpatterns = [
    # robots.txt
    path('robots.txt', directorio_views.robots_txt, name='robots_txt'),

    # Sitemap con alternates es/en por URL
    path('sitemap.xml', sitemap, {'sitemaps': sitemaps},
         name='django.contrib.sitemaps.views.sitemap'),

    path('admin/', admin.site.urls),
    path('cuentas/', include('usuarios.urls')),
    path('i18n/', include('django.conf.urls.i18n')),
    path('api/', include((api_urlpatterns, 'directorio'), namespace='api')),

    # Páginas públicas (siempre con prefijo de idioma)
    path('', include((paginas_urlpatterns, 'directorio'), namespace='directorio')),
]

# Para servir archivos multimedia en desarrollo
if settings.DEBUG:
    urlpatterns += static(settings.MEDIA_URL, document_root=settings.MEDIA_ROOT)
