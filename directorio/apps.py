from django.apps import AppConfig
from django.conf import settings


class DirectorioConfig(AppConfig):
    default_auto_field = "django.db.models.BigAutoField"
    name = "directorio"
    verbose_name = "Directorio Tepoztlán"

    def ready(self):
        from directorio.utils.limite_tasa import ServicioLimites

        # Limitadores del proceso; viven en la app, no en el módulo
        self.limites = ServicioLimites(settings.RATE_LIMITS, settings.RATE_LIMIT_STORAGE_URI)
