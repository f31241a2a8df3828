from django.contrib import admin

from .models import User


@admin.register(User)
class UserAdmin(admin.ModelAdmin):
    """Configuración del admin para usuarios."""
    list_display = ('email', 'full_name', 'rol', 'idioma_preferido', 'is_staff', 'is_active', 'date_joined')
    list_filter = ('rol', 'idioma_preferido', 'is_staff', 'is_active')
    search_fields = ('email', 'full_name')
    readonly_fields = ('date_joined', 'last_login')
    exclude = ('password',)
    ordering = ('-date_joined',)
