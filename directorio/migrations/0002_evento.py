import django.db.models.deletion
from django.db import migrations, models


class Migration(migrations.Migration):

    dependencies = [
        ('directorio', '0001_initial'),
    ]

    operations = [
        migrations.CreateModel(
            name='Evento',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('slug', models.SlugField(blank=True, max_length=255, unique=True)),
                ('titulo_es', models.CharField(max_length=255)),
                ('titulo_en', models.CharField(max_length=255)),
                ('descripcion_es', models.TextField()),
                ('descripcion_en', models.TextField()),
                ('fecha_inicio', models.DateTimeField(db_index=True)),
                ('fecha_fin', models.DateTimeField(blank=True, null=True)),
                ('es_recurrente', models.BooleanField(default=False)),
                ('patron_recurrencia', models.CharField(blank=True, choices=[('weekly', 'Semanal'), ('monthly', 'Mensual'), ('yearly', 'Anual')], max_length=20)),
                ('lugar_es', models.TextField()),
                ('lugar_en', models.TextField()),
                ('latitud', models.DecimalField(blank=True, decimal_places=7, max_digits=10, null=True)),
                ('longitud', models.DecimalField(blank=True, decimal_places=7, max_digits=10, null=True)),
                ('es_gratuito', models.BooleanField(default=False)),
                ('precio_es', models.CharField(blank=True, max_length=100)),
                ('precio_en', models.CharField(blank=True, max_length=100)),
                ('imagenes', models.JSONField(blank=True, default=list)),
                ('destacado', models.BooleanField(default=False)),
                ('activo', models.BooleanField(db_index=True, default=True)),
                ('fecha_creacion', models.DateTimeField(auto_now_add=True)),
                ('fecha_actualizacion', models.DateTimeField(auto_now=True)),
                ('negocio', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='eventos', to='directorio.negocio')),
            ],
            options={
                'verbose_name': 'Evento',
                'verbose_name_plural': 'Eventos',
                'ordering': ['fecha_inicio'],
            },
        ),
    ]
