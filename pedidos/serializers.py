# pedidos/serializers.py
from __future__ import annotations

from decimal import Decimal

from rest_framework import serializers

from catalogo.models import ServicoCatalogo
from core.exceptions import NotFound
from core.permissions import funcoes_do_usuario
from .models import Execucao, Pedido, Servico


# -------------------------------
# Representação (JSON de saída)
# -------------------------------
def representar_usuario(user) -> dict:
    return {
        "id": user.pk,
        "nome": user.get_full_name() or user.get_username(),
        "funcoes": sorted(funcoes_do_usuario(user)),
    }


def representar_execucao(execucao: Execucao) -> dict:
    return {
        "id": execucao.pk,
        "horaInicio": execucao.hora_inicio.isoformat(),
        "horaFim": execucao.hora_fim.isoformat() if execucao.hora_fim else None,
        "motivoPausa": execucao.motivo_pausa,
        "quantidadeExecutada": execucao.quantidade_executada,
        "user": representar_usuario(execucao.user),
    }


def representar_servico(servico: Servico, incluir_preco: bool) -> dict:
    """Preço unitário só sai para administradores."""
    catalogo = servico.catalogo if servico.catalogo_id else None
    data = {
        "id": servico.pk,
        "pedidoId": servico.pedido_id,
        "catalogoId": servico.catalogo_id,
        "catalogoNome": catalogo.nome if catalogo else None,
        "catalogoFuncao": catalogo.funcao if catalogo else None,
        "tipoServico": servico.tipo_servico,
        "quantidade": servico.quantidade,
        "observacoes": servico.observacoes,
        "status": servico.status,
        "execucoes": [
            representar_execucao(e)
            for e in servico.execucoes.select_related("user").prefetch_related("user__groups").order_by("-hora_inicio", "-id")
        ],
    }
    if incluir_preco:
        data["precoUnitario"] = servico.preco_unitario
    return data


def representar_pedido(pedido: Pedido, incluir_preco: bool) -> dict:
    return {
        "id": pedido.pk,
        "numeroPedido": pedido.numero_pedido,
        "cliente": pedido.cliente,
        "dataCriacao": pedido.data_criacao.isoformat(),
        "servicos": [
            representar_servico(s, incluir_preco)
            for s in pedido.servicos.select_related("catalogo").order_by("id")
        ],
    }


# -------------------------------
# Entradas de execução
# -------------------------------
class PausarSerializer(serializers.Serializer):
    quantidadeExecutada = serializers.IntegerField(min_value=0, default=0)
    motivo = serializers.CharField(max_length=200, required=False, allow_blank=True, allow_null=True)


class FinalizarSerializer(serializers.Serializer):
    quantidadeExecutada = serializers.IntegerField(min_value=0, default=0)


# -------------------------------
# Pedidos / serviços (admin)
# -------------------------------
class PedidoCreateSerializer(serializers.Serializer):
    numeroPedido = serializers.CharField(max_length=60)
    cliente = serializers.CharField(max_length=160)

    def create(self, validated_data):
        return Pedido.objects.create(
            numero_pedido=validated_data["numeroPedido"].strip(),
            cliente=validated_data["cliente"].strip(),
        )


def _catalogo_ou_404(catalogo_id: int) -> ServicoCatalogo:
    item = ServicoCatalogo.objects.filter(pk=catalogo_id).first()
    if not item:
        raise NotFound("Serviço de catálogo não encontrado")
    return item


class ServicoCreateSerializer(serializers.Serializer):
    catalogoId = serializers.IntegerField(min_value=1, required=False)
    tipoServico = serializers.CharField(min_length=3, max_length=60, required=False)
    quantidade = serializers.IntegerField(min_value=1)
    precoUnitario = serializers.DecimalField(max_digits=10, decimal_places=2, min_value=Decimal("0"), required=False)
    observacoes = serializers.CharField(required=False, allow_blank=True, allow_null=True)

    def validate(self, attrs):
        if not (attrs.get("catalogoId") or attrs.get("tipoServico")):
            raise serializers.ValidationError(
                {"tipoServico": "Informe o serviço do catálogo ou um tipo de serviço"}
            )
        return attrs

    def create(self, validated_data):
        """
        Com catalogoId, o catálogo define o tipo; as observações e o preço
        vêm dele quando não informados no payload.
        """
        pedido = self.context["pedido"]
        tipo = (validated_data.get("tipoServico") or "").strip().lower()
        observacoes = (validated_data.get("observacoes") or "").strip() or None
        preco = validated_data.get("precoUnitario")
        catalogo = None

        if validated_data.get("catalogoId"):
            catalogo = _catalogo_ou_404(validated_data["catalogoId"])
            tipo = catalogo.funcao
            observacoes = observacoes or catalogo.nome
            if preco is None:
                preco = catalogo.preco_padrao

        return Servico.objects.create(
            pedido=pedido,
            catalogo=catalogo,
            tipo_servico=tipo,
            quantidade=validated_data["quantidade"],
            preco_unitario=preco if preco is not None else Decimal("0.00"),
            observacoes=observacoes,
        )


class ServicoUpdateSerializer(serializers.Serializer):
    catalogoId = serializers.IntegerField(min_value=1, required=False)
    tipoServico = serializers.CharField(min_length=3, max_length=60, required=False)
    quantidade = serializers.IntegerField(min_value=1, required=False)
    precoUnitario = serializers.DecimalField(max_digits=10, decimal_places=2, min_value=Decimal("0"), required=False)
    observacoes = serializers.CharField(required=False, allow_blank=True, allow_null=True)

    def validate(self, attrs):
        if not attrs:
            raise serializers.ValidationError(
                {"tipoServico": "Envie ao menos um campo para atualizar o serviço"}
            )
        return attrs

    def update(self, instance: Servico, validated_data):
        if "tipoServico" in validated_data:
            instance.tipo_servico = validated_data["tipoServico"].strip().lower()
        if "observacoes" in validated_data:
            instance.observacoes = (validated_data["observacoes"] or "").strip() or None
        if "precoUnitario" in validated_data:
            instance.preco_unitario = validated_data["precoUnitario"]
        if "quantidade" in validated_data:
            instance.quantidade = validated_data["quantidade"]

        if validated_data.get("catalogoId"):
            catalogo = _catalogo_ou_404(validated_data["catalogoId"])
            instance.catalogo = catalogo
            instance.tipo_servico = catalogo.funcao
            if "observacoes" not in validated_data:
                instance.observacoes = catalogo.nome
            if "precoUnitario" not in validated_data:
                instance.preco_unitario = catalogo.preco_padrao

        instance.save()
        return instance
