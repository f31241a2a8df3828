from __future__ import annotations

from dataclasses import dataclass

from django.conf import settings
from django.core.management.base import BaseCommand
from django.test import Client

from directorio.models import Evento, Negocio
from directorio.utils.rutas import IDIOMAS, RUTAS_PRIORITARIAS, RUTAS_SECUNDARIAS, ruta_localizada


@dataclass
class Case:
    name: str
    path: str
    method: str = "GET"


class Command(BaseCommand):
    help = "Smoke test de URLs: pide cada ruta localizada con el test client y reporta respuestas que no sean 2xx/3xx."

    def add_arguments(self, parser):
        # Usamos el primer host permitido para evitar DisallowedHost
        parser.add_argument("--host", default=(settings.ALLOWED_HOSTS or ["127.0.0.1"])[0])
        parser.add_argument("--verbose", action="store_true")

    def handle(self, *args, **opts):
        host = opts["host"]
        verbose = bool(opts["verbose"])

        c = Client(HTTP_HOST=host)

        sample = Negocio.objects.activos().only("slug", "subcategoria").first()
        evento = Evento.objects.activos().only("slug").first()

        cases: list[Case] = []
        for ruta in (*RUTAS_PRIORITARIAS, *RUTAS_SECUNDARIAS):
            for idioma in IDIOMAS:
                cases.append(Case(f"{idioma}:{ruta or 'home'}", ruta_localizada(ruta, idioma)))
        if sample is not None:
            for idioma in IDIOMAS:
                cases.append(Case(f"{idioma}:negocio", sample.get_absolute_url(idioma)))
        if evento is not None:
            for idioma in IDIOMAS:
                cases.append(Case(f"{idioma}:evento", evento.get_absolute_url(idioma)))
        cases += [
            Case("root_redirect", "/"),
            Case("sitemap", "/sitemap.xml"),
            Case("robots", "/robots.txt"),
            Case("api_buscar", "/api/buscar/?q=tepoz"),
            Case("api_favorito_estado", f"/api/favoritos/{getattr(sample, 'pk', 0)}/estado/"),
        ]

        self.stdout.write(self.style.MIGRATE_HEADING("SMOKE TEST URLS"))
        self.stdout.write(f"Negocio de ejemplo: {getattr(sample, 'slug', None)!r}")

        failures: list[str] = []
        for case in cases:
            try:
                resp = c.generic(case.method, case.path)
            except Exception as e:
                failures.append(f"{case.name}: EXCEPTION {type(e).__name__}: {e}")
                continue

            code = resp.status_code
            if verbose:
                self.stdout.write(f"{case.name}: {case.method} {case.path} -> {code}")
            if not 200 <= code < 400:
                failures.append(f"{case.name}: {case.method} {case.path} -> {code}")

        if failures:
            self.stdout.write(self.style.ERROR("FAILURES:"))
            for f in failures:
                self.stdout.write(self.style.ERROR(f"- {f}"))
            raise SystemExit(1)

        self.stdout.write(self.style.SUCCESS(f"OK: {len(cases)} rutas respondieron 2xx/3xx."))
