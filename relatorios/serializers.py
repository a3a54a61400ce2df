# relatorios/serializers.py
from __future__ import annotations

from django.conf import settings
from rest_framework import serializers

from .periodos import PERIODOS


class RelatorioQuerySerializer(serializers.Serializer):
    period = serializers.ChoiceField(choices=PERIODOS, required=False)
    # texto cru: só é interpretado quando o solicitante é admin
    userId = serializers.CharField(required=False, allow_blank=True)
    startDate = serializers.DateField(required=False)
    endDate = serializers.DateField(required=False)

    def validate(self, attrs):
        attrs["period"] = attrs.get("period") or getattr(settings, "RELATORIO_PERIODO_PADRAO", "day")
        if attrs["period"] == "custom":
            if not (attrs.get("startDate") and attrs.get("endDate")):
                raise serializers.ValidationError(
                    {"startDate": "Período customizado exige datas inicial e final"}
                )
            if attrs["startDate"] > attrs["endDate"]:
                raise serializers.ValidationError(
                    {"startDate": "Data inicial deve ser anterior à final"}
                )
        return attrs

    def operador_id(self) -> int | None:
        """Filtro de operador pedido por um admin ("all" ou vazio = todos)."""
        value = (self.validated_data.get("userId") or "").strip()
        if not value or value == "all":
            return None
        if not value.isdigit():
            raise serializers.ValidationError({"userId": ["Parâmetro userId inválido"]})
        return int(value)
