from decimal import Decimal

import django.core.validators
import django.db.models.deletion
import taggit.managers
from django.conf import settings
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name='Etiqueta',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('name', models.CharField(max_length=100, unique=True, verbose_name='name')),
                ('slug', models.SlugField(allow_unicode=True, max_length=100, unique=True, verbose_name='slug')),
            ],
            options={
                'verbose_name': 'Etiqueta',
                'verbose_name_plural': 'Etiquetas',
            },
        ),
        migrations.CreateModel(
            name='Negocio',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('slug', models.SlugField(blank=True, max_length=255, unique=True)),
                ('categoria', models.CharField(choices=[('restaurant', 'Restaurante'), ('hotel', 'Hotel'), ('cafe', 'Cafetería'), ('bar', 'Bar'), ('experience', 'Experiencia'), ('event', 'Evento'), ('shop', 'Tienda'), ('service', 'Servicio')], db_index=True, max_length=20)),
                ('subcategoria', models.CharField(choices=[('restaurant', 'Restaurante'), ('hotel', 'Hotel'), ('eco-lodge', 'Eco-lodge'), ('vacation-rental', 'Renta vacacional'), ('hostel', 'Hostal'), ('retreat', 'Retiro'), ('camping', 'Camping'), ('cafe', 'Cafetería'), ('bakery', 'Panadería'), ('bar', 'Bar'), ('pulqueria', 'Pulquería'), ('street-food', 'Comida callejera'), ('hiking', 'Senderismo'), ('wellness', 'Bienestar'), ('cultural', 'Cultural'), ('adventure', 'Aventura'), ('spiritual', 'Espiritual'), ('tour', 'Tour'), ('festival', 'Festival'), ('market', 'Mercado'), ('craft', 'Artesanía'), ('gallery', 'Galería'), ('transport', 'Transporte'), ('medical', 'Médico'), ('financial', 'Financiero')], db_index=True, max_length=30)),
                ('nombre_es', models.CharField(max_length=255)),
                ('nombre_en', models.CharField(max_length=255)),
                ('descripcion_es', models.TextField()),
                ('descripcion_en', models.TextField()),
                ('direccion_es', models.TextField(blank=True)),
                ('direccion_en', models.TextField(blank=True)),
                ('barrio', models.CharField(blank=True, max_length=100, null=True)),
                ('latitud', models.DecimalField(blank=True, decimal_places=7, max_digits=10, null=True)),
                ('longitud', models.DecimalField(blank=True, decimal_places=7, max_digits=10, null=True)),
                ('telefono', models.CharField(blank=True, max_length=50, null=True)),
                ('whatsapp', models.CharField(blank=True, max_length=50, null=True)),
                ('email', models.EmailField(blank=True, max_length=255, null=True)),
                ('sitio_web', models.URLField(blank=True, max_length=1000, null=True)),
                ('imagenes', models.JSONField(blank=True, default=list)),
                ('amenidades_es', models.JSONField(blank=True, default=list)),
                ('amenidades_en', models.JSONField(blank=True, default=list)),
                ('precio_es', models.CharField(blank=True, max_length=100, null=True)),
                ('precio_en', models.CharField(blank=True, max_length=100, null=True)),
                ('nivel_precio', models.PositiveSmallIntegerField(default=2, help_text='1-4 ($-$$$$)', validators=[django.core.validators.MinValueValidator(1), django.core.validators.MaxValueValidator(4)])),
                ('horario_json', models.JSONField(blank=True, help_text='Horario por día de la semana', null=True)),
                ('verificado', models.BooleanField(default=False)),
                ('destacado', models.BooleanField(default=False)),
                ('activo', models.BooleanField(db_index=True, default=True)),
                ('tiene_wifi', models.BooleanField(default=False)),
                ('tiene_estacionamiento', models.BooleanField(default=False)),
                ('acepta_tarjetas', models.BooleanField(default=False)),
                ('pet_friendly', models.BooleanField(default=False)),
                ('accesible', models.BooleanField(default=False)),
                ('rating', models.DecimalField(decimal_places=2, default=Decimal('0'), max_digits=3)),
                ('total_resenas', models.IntegerField(default=0)),
                ('fecha_creacion', models.DateTimeField(auto_now_add=True)),
                ('fecha_actualizacion', models.DateTimeField(auto_now=True)),
                ('propietario', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='negocios', to=settings.AUTH_USER_MODEL)),
            ],
            options={
                'verbose_name': 'Negocio',
                'verbose_name_plural': 'Negocios',
                'ordering': ['-destacado', '-rating', 'nombre_es'],
            },
        ),
        migrations.CreateModel(
            name='NegocioEtiquetado',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('content_object', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, to='directorio.negocio')),
                ('tag', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='%(app_label)s_%(class)s_items', to='directorio.etiqueta')),
            ],
            options={
                'verbose_name': 'Etiqueta de negocio',
                'verbose_name_plural': 'Etiquetas de negocios',
            },
        ),
        migrations.AddField(
            model_name='negocio',
            name='tags',
            field=taggit.managers.TaggableManager(blank=True, help_text='Lista de etiquetas separadas por comas', through='directorio.NegocioEtiquetado', to='directorio.Etiqueta', verbose_name='Etiquetas'),
        ),
        migrations.CreateModel(
            name='MensajeContacto',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('nombre', models.CharField(max_length=255)),
                ('email', models.EmailField(max_length=255)),
                ('telefono', models.CharField(blank=True, max_length=50)),
                ('asunto', models.CharField(max_length=255)),
                ('mensaje', models.TextField()),
                ('tipo', models.CharField(choices=[('general', 'General'), ('business', 'Negocio'), ('partnership', 'Alianza')], default='general', max_length=50)),
                ('idioma', models.CharField(choices=[('es', 'Español'), ('en', 'English')], default='es', max_length=2)),
                ('leido', models.BooleanField(db_index=True, default=False)),
                ('respondido', models.BooleanField(db_index=True, default=False)),
                ('ip_address', models.GenericIPAddressField(blank=True, null=True)),
                ('fecha_creacion', models.DateTimeField(auto_now_add=True)),
            ],
            options={
                'verbose_name': 'Mensaje de contacto',
                'verbose_name_plural': 'Mensajes de contacto',
                'ordering': ['-fecha_creacion'],
            },
        ),
        migrations.CreateModel(
            name='SuscripcionNewsletter',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('email', models.EmailField(help_text='Dirección de correo electrónico del suscriptor', max_length=254, unique=True, validators=[django.core.validators.EmailValidator()])),
                ('nombre', models.CharField(blank=True, max_length=100)),
                ('idioma', models.CharField(choices=[('es', 'Español'), ('en', 'English')], default='es', max_length=2)),
                ('activo', models.BooleanField(default=True)),
                ('confirmado', models.BooleanField(default=False)),
                ('token_confirmacion', models.CharField(blank=True, max_length=64)),
                ('fuente', models.CharField(default='website', help_text='Origen de la suscripción (website, landing, etc.)', max_length=50)),
                ('ip_address', models.GenericIPAddressField(blank=True, null=True)),
                ('user_agent', models.TextField(blank=True)),
                ('fecha_suscripcion', models.DateTimeField(auto_now_add=True)),
                ('fecha_confirmacion', models.DateTimeField(blank=True, null=True)),
                ('fecha_baja', models.DateTimeField(blank=True, null=True)),
            ],
            options={
                'verbose_name': 'Suscripción Newsletter',
                'verbose_name_plural': 'Suscripciones Newsletter',
                'ordering': ['-fecha_suscripcion'],
                'indexes': [models.Index(fields=['activo', 'confirmado'], name='newsletter_estado_idx')],
            },
        ),
        migrations.CreateModel(
            name='Resena',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('rating', models.PositiveSmallIntegerField(validators=[django.core.validators.MinValueValidator(1), django.core.validators.MaxValueValidator(5)])),
                ('titulo_es', models.CharField(blank=True, max_length=255)),
                ('titulo_en', models.CharField(blank=True, max_length=255)),
                ('contenido_es', models.TextField(blank=True)),
                ('contenido_en', models.TextField(blank=True)),
                ('fotos', models.JSONField(blank=True, default=list)),
                ('verificada', models.BooleanField(default=False)),
                ('util', models.PositiveIntegerField(default=0)),
                ('respuesta_es', models.TextField(blank=True)),
                ('respuesta_en', models.TextField(blank=True)),
                ('fecha_respuesta', models.DateTimeField(blank=True, null=True)),
                ('fecha_creacion', models.DateTimeField(auto_now_add=True)),
                ('fecha_actualizacion', models.DateTimeField(auto_now=True)),
                ('negocio', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='resenas', to='directorio.negocio')),
                ('usuario', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='resenas', to=settings.AUTH_USER_MODEL)),
            ],
            options={
                'verbose_name': 'Reseña',
                'verbose_name_plural': 'Reseñas',
                'ordering': ['-fecha_creacion'],
                'constraints': [models.UniqueConstraint(fields=('usuario', 'negocio'), name='resena_unica_por_usuario')],
            },
        ),
        migrations.CreateModel(
            name='Favorito',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('fecha_creacion', models.DateTimeField(auto_now_add=True)),
                ('negocio', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='favoritos', to='directorio.negocio')),
                ('usuario', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='favoritos', to=settings.AUTH_USER_MODEL)),
            ],
            options={
                'verbose_name': 'Favorito',
                'verbose_name_plural': 'Favoritos',
                'ordering': ['-fecha_creacion'],
                'constraints': [models.UniqueConstraint(fields=('usuario', 'negocio'), name='favorito_unico')],
            },
        ),
    ]
