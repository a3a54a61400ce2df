# catalogo/management/commands/importar_catalogo.py
import json

from django.core.management.base import BaseCommand, CommandError

from catalogo.importacao import importar_itens
from core.exceptions import InvalidPayload


class Command(BaseCommand):
    help = "Importa itens do catálogo de serviços a partir de um arquivo JSON (tudo-ou-nada)."

    def add_arguments(self, parser):
        parser.add_argument("arquivo", help="JSON com uma lista de {nome, funcao, precoPadrao} ou {\"items\": [...]}.")

    def handle(self, *args, **opts):
        try:
            with open(opts["arquivo"], encoding="utf-8") as fh:
                dados = json.load(fh)
        except (OSError, json.JSONDecodeError) as e:
            raise CommandError(f"Não foi possível ler {opts['arquivo']}: {e}") from e

        try:
            total = importar_itens(dados)
        except InvalidPayload as e:
            detalhe = f" {e.errors}" if e.errors else ""
            raise CommandError(f"{e.message}.{detalhe}") from e

        self.stdout.write(self.style.SUCCESS(f"Itens importados: {total}"))
