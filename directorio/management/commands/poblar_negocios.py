from datetime import timedelta
from decimal import Decimal

from django.core.management.base import BaseCommand
from django.db import transaction
from django.utils import timezone

from directorio.models import Evento, Negocio

NEGOCIOS = [
    {
        "nombre_es": "Posada del Tepozteco",
        "nombre_en": "Posada del Tepozteco",
        "categoria": "hotel",
        "subcategoria": "hotel",
        "descripcion_es": "Hotel boutique con vista al cerro del Tepozteco y jardines tropicales.",
        "descripcion_en": "Boutique hotel overlooking Tepozteco mountain, with tropical gardens.",
        "direccion_es": "Paraíso 3, Barrio de San Miguel",
        "barrio": "San Miguel",
        "latitud": Decimal("18.9869000"),
        "longitud": Decimal("-99.0989000"),
        "nivel_precio": 4,
        "destacado": True,
        "verificado": True,
        "tiene_wifi": True,
        "acepta_tarjetas": True,
        "tags": ["vista", "alberca", "romántico"],
    },
    {
        "nombre_es": "Cabañas Amatlán",
        "nombre_en": "Amatlan Cabins",
        "categoria": "hotel",
        "subcategoria": "eco-lodge",
        "descripcion_es": "Cabañas ecológicas entre montañas, a diez minutos del centro.",
        "descripcion_en": "Eco-friendly cabins in the mountains, ten minutes from downtown.",
        "barrio": "Amatlán",
        "nivel_precio": 2,
        "pet_friendly": True,
        "tags": ["naturaleza", "pet-friendly"],
    },
    {
        "nombre_es": "Los Colorines",
        "nombre_en": "Los Colorines",
        "categoria": "restaurant",
        "subcategoria": "restaurant",
        "descripcion_es": "Cocina tradicional morelense en el corazón de Tepoztlán.",
        "descripcion_en": "Traditional Morelos cuisine in the heart of Tepoztlán.",
        "direccion_es": "Av. del Tepozteco 13, Centro",
        "barrio": "Centro",
        "nivel_precio": 2,
        "destacado": True,
        "acepta_tarjetas": True,
        "tags": ["mexicana", "familiar"],
    },
    {
        "nombre_es": "Café Tepoz",
        "nombre_en": "Tepoz Coffee",
        "categoria": "cafe",
        "subcategoria": "cafe",
        "descripcion_es": "Café de especialidad de Morelos y pan artesanal.",
        "descripcion_en": "Specialty coffee from Morelos and artisan bread.",
        "barrio": "Centro",
        "nivel_precio": 1,
        "tiene_wifi": True,
        "tags": ["café", "terraza"],
    },
    {
        "nombre_es": "Pulquería La Tepozteca",
        "nombre_en": "La Tepozteca Pulque Bar",
        "categoria": "bar",
        "subcategoria": "pulqueria",
        "descripcion_es": "Pulques curados y botanas en una casona del centro.",
        "descripcion_en": "Flavored pulque and snacks in a downtown mansion.",
        "barrio": "Centro",
        "nivel_precio": 1,
        "tags": ["pulque", "tradicional"],
    },
    {
        "nombre_es": "Temazcal Calli",
        "nombre_en": "Calli Temazcal",
        "categoria": "experience",
        "subcategoria": "wellness",
        "descripcion_es": "Ceremonia de temazcal guiada con hierbas medicinales.",
        "descripcion_en": "Guided temazcal ceremony with medicinal herbs.",
        "barrio": "Santo Domingo",
        "nivel_precio": 3,
        "verificado": True,
        "tags": ["temazcal", "bienestar"],
    },
    {
        "nombre_es": "Ascenso al Tepozteco",
        "nombre_en": "Tepozteco Climb",
        "categoria": "experience",
        "subcategoria": "hiking",
        "descripcion_es": "Caminata guiada a la pirámide del Tepozteco al amanecer.",
        "descripcion_en": "Guided sunrise hike to the Tepozteco pyramid.",
        "nivel_precio": 1,
        "destacado": True,
        "tags": ["senderismo", "pirámide"],
    },
    {
        "nombre_es": "Mercado de Artesanías",
        "nombre_en": "Crafts Market",
        "categoria": "shop",
        "subcategoria": "craft",
        "descripcion_es": "Artesanías locales los fines de semana en la plaza principal.",
        "descripcion_en": "Local crafts on weekends at the main square.",
        "barrio": "Centro",
        "nivel_precio": 1,
        "tags": ["artesanías", "fin-de-semana"],
    },
]


# "dias" y "horas" cuentan desde hoy a medianoche
EVENTOS = [
    {
        "titulo_es": "Reto al Tepozteco",
        "titulo_en": "Tepozteco Challenge",
        "descripcion_es": "Fiesta del Tepozteco con danzas, teatro en náhuatl y chinelos.",
        "descripcion_en": "Tepozteco festival with dances, Nahuatl theater and chinelos.",
        "lugar_es": "Plaza principal",
        "lugar_en": "Main square",
        "dias": 10,
        "horas": 12,
        "duracion": timedelta(hours=10),
        "es_gratuito": True,
        "destacado": True,
    },
    {
        "titulo_es": "Tianguis de fin de semana",
        "titulo_en": "Weekend Street Market",
        "descripcion_es": "Comida, artesanías y productos locales en el centro.",
        "descripcion_en": "Food, crafts and local products downtown.",
        "lugar_es": "Av. Revolución, Centro",
        "lugar_en": "Av. Revolución, downtown",
        "dias": 3,
        "horas": 9,
        "duracion": timedelta(hours=9),
        "es_recurrente": True,
        "patron_recurrencia": "weekly",
        "es_gratuito": True,
        "negocio": "Mercado de Artesanías",
    },
    {
        "titulo_es": "Temazcal de luna llena",
        "titulo_en": "Full Moon Temazcal",
        "descripcion_es": "Ceremonia nocturna de temazcal con cantos tradicionales.",
        "descripcion_en": "Night temazcal ceremony with traditional chants.",
        "lugar_es": "Temazcal Calli, Santo Domingo",
        "lugar_en": "Calli Temazcal, Santo Domingo",
        "dias": 20,
        "horas": 19,
        "duracion": timedelta(hours=3),
        "precio_es": "$650 MXN",
        "precio_en": "$650 MXN",
        "negocio": "Temazcal Calli",
    },
]


class Command(BaseCommand):
    help = 'Crea negocios y eventos de ejemplo de Tepoztlán para desarrollo'

    def add_arguments(self, parser):
        parser.add_argument(
            '--reset',
            action='store_true',
            help='Borra todos los negocios y eventos antes de crear los de ejemplo'
        )

    @transaction.atomic
    def handle(self, *args, **options):
        if options['reset']:
            borrados, _ = Evento.objects.all().delete()
            borrados += Negocio.objects.all().delete()[0]
            self.stdout.write(self.style.WARNING(f'🗑️  {borrados} registros eliminados'))

        creados = 0
        for datos in NEGOCIOS:
            datos = dict(datos)
            tags = datos.pop('tags', [])
            negocio, creado = Negocio.objects.get_or_create(
                nombre_es=datos['nombre_es'],
                defaults=datos,
            )
            if creado:
                negocio.tags.set(tags)
                creados += 1
                self.stdout.write(f'  ✅ {negocio.nombre_es} -> {negocio.get_absolute_url("es")}')
            else:
                self.stdout.write(f'  ⏭️  {negocio.nombre_es} ya existe')

        self.stdout.write(self.style.SUCCESS(f'\n🎉 {creados} negocios creados'))
        self.crear_eventos()

    def crear_eventos(self):
        hoy = timezone.localtime().replace(hour=0, minute=0, second=0, microsecond=0)
        creados = 0
        for datos in EVENTOS:
            datos = dict(datos)
            inicio = hoy + timedelta(days=datos.pop('dias'), hours=datos.pop('horas'))
            datos['fecha_inicio'] = inicio
            datos['fecha_fin'] = inicio + datos.pop('duracion')
            negocio = datos.pop('negocio', None)
            if negocio:
                datos['negocio'] = Negocio.objects.filter(nombre_es=negocio).first()
            evento, creado = Evento.objects.get_or_create(titulo_es=datos['titulo_es'], defaults=datos)
            if creado:
                creados += 1
                self.stdout.write(f'  📅 {evento.titulo_es} -> {evento.get_absolute_url("es")}')
            else:
                self.stdout.write(f'  ⏭️  {evento.titulo_es} ya existe')

        self.stdout.write(self.style.SUCCESS(f'🎉 {creados} eventos creados'))
