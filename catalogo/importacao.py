# catalogo/importacao.py
from __future__ import annotations

import logging
from decimal import Decimal

from django.conf import settings
from django.db import transaction
from rest_framework import serializers

from core.exceptions import InvalidPayload
from .models import ServicoCatalogo

log = logging.getLogger(__name__)


class CatalogoItemSerializer(serializers.Serializer):
    nome = serializers.CharField(min_length=3, max_length=120, trim_whitespace=True)
    funcao = serializers.CharField(min_length=2, max_length=60, trim_whitespace=True)
    precoPadrao = serializers.DecimalField(max_digits=10, decimal_places=2, min_value=Decimal("0"))

    def validate_funcao(self, value: str) -> str:
        return value.strip().lower()


def importar_itens(itens) -> int:
    """
    Importa itens do catálogo em lote, tudo-ou-nada.
    Aceita a lista direto ou {"items": [...]}. Nomes já existentes
    (no banco ou repetidos no próprio lote) são ignorados.
    Retorna quantos itens foram criados.
    """
    if isinstance(itens, dict):
        itens = itens.get("items")
    limite = getattr(settings, "CATALOGO_IMPORT_MAX", 500)

    if not isinstance(itens, list) or not itens:
        raise InvalidPayload("Envie ao menos um serviço")
    if len(itens) > limite:
        raise InvalidPayload(f"Importe no máximo {limite} itens por vez")

    ser = CatalogoItemSerializer(data=itens, many=True)
    if not ser.is_valid():
        raise InvalidPayload("Dados inválidos", errors=ser.errors)

    with transaction.atomic():
        nomes = [d["nome"] for d in ser.validated_data]
        existentes = set(
            ServicoCatalogo.objects.filter(nome__in=nomes).values_list("nome", flat=True)
        )
        novos = []
        for d in ser.validated_data:
            if d["nome"] in existentes:
                continue
            existentes.add(d["nome"])
            novos.append(ServicoCatalogo(nome=d["nome"], funcao=d["funcao"], preco_padrao=d["precoPadrao"]))
        ServicoCatalogo.objects.bulk_create(novos)

    log.info("[catalogo] importação: %s recebidos, %s criados", len(itens), len(novos))
    return len(novos)
