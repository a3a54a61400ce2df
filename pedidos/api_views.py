# pedidos/api_views.py
from __future__ import annotations

from django.shortcuts import get_object_or_404
from rest_framework import permissions, status
from rest_framework.response import Response
from rest_framework.views import APIView

from core.permissions import IsProducaoAdmin, funcoes_do_usuario, is_admin
from . import gestao, maquina
from .models import Pedido, Servico
from .serializers import (
    FinalizarSerializer,
    PausarSerializer,
    PedidoCreateSerializer,
    ServicoCreateSerializer,
    ServicoUpdateSerializer,
    representar_pedido,
    representar_servico,
)


def _servico_response(request, servico: Servico, funcoes=None, http_status=status.HTTP_200_OK) -> Response:
    funcoes = funcoes if funcoes is not None else funcoes_do_usuario(request.user)
    servico.refresh_from_db()
    return Response(representar_servico(servico, is_admin(funcoes)), status=http_status)


# -------------------------------
# Execução (iniciar / pausar / finalizar)
# -------------------------------
class IniciarServicoView(APIView):
    permission_classes = [permissions.IsAuthenticated]

    def post(self, request, servico_id: int, *args, **kwargs):
        funcoes = funcoes_do_usuario(request.user)
        servico = maquina.iniciar(servico_id, request.user, funcoes)
        return _servico_response(request, servico, funcoes)


class PausarServicoView(APIView):
    permission_classes = [permissions.IsAuthenticated]

    def post(self, request, servico_id: int, *args, **kwargs):
        ser = PausarSerializer(data=request.data)
        ser.is_valid(raise_exception=True)
        funcoes = funcoes_do_usuario(request.user)
        servico = maquina.pausar(
            servico_id,
            request.user,
            funcoes,
            quantidade=ser.validated_data["quantidadeExecutada"],
            motivo=ser.validated_data.get("motivo"),
        )
        return _servico_response(request, servico, funcoes)


class FinalizarServicoView(APIView):
    permission_classes = [permissions.IsAuthenticated]

    def post(self, request, servico_id: int, *args, **kwargs):
        ser = FinalizarSerializer(data=request.data)
        ser.is_valid(raise_exception=True)
        funcoes = funcoes_do_usuario(request.user)
        servico = maquina.finalizar(
            servico_id,
            request.user,
            funcoes,
            quantidade=ser.validated_data["quantidadeExecutada"],
        )
        return _servico_response(request, servico, funcoes)


# -------------------------------
# Pedidos
# -------------------------------
class PedidoListCreateView(APIView):
    permission_classes = [permissions.IsAuthenticated, IsProducaoAdmin]

    def get(self, request, *args, **kwargs):
        pedidos = Pedido.objects.order_by("-data_criacao", "-id")
        return Response([representar_pedido(p, True) for p in pedidos])

    def post(self, request, *args, **kwargs):
        ser = PedidoCreateSerializer(data=request.data)
        ser.is_valid(raise_exception=True)
        pedido = gestao.criar_pedido(ser)
        return Response(representar_pedido(pedido, True), status=status.HTTP_201_CREATED)


class PedidoPorNumeroView(APIView):
    """Consulta pelo número externo; qualquer usuário autenticado (preço só para admin)."""
    permission_classes = [permissions.IsAuthenticated]

    def get(self, request, numero_pedido: str, *args, **kwargs):
        pedido = get_object_or_404(Pedido, numero_pedido=numero_pedido)
        incluir_preco = is_admin(funcoes_do_usuario(request.user))
        return Response(representar_pedido(pedido, incluir_preco))


class PedidoDeleteView(APIView):
    permission_classes = [permissions.IsAuthenticated, IsProducaoAdmin]

    def delete(self, request, pedido_id: int, *args, **kwargs):
        gestao.excluir_pedido(pedido_id)
        return Response({"ok": True, "message": "Pedido removido com sucesso"})


# -------------------------------
# Serviços do pedido (admin)
# -------------------------------
class PedidoServicosView(APIView):
    permission_classes = [permissions.IsAuthenticated, IsProducaoAdmin]

    def get(self, request, pedido_id: int, *args, **kwargs):
        servicos = Servico.objects.filter(pedido_id=pedido_id).select_related("catalogo").order_by("id")
        return Response([representar_servico(s, True) for s in servicos])

    def post(self, request, pedido_id: int, *args, **kwargs):
        pedido = get_object_or_404(Pedido, pk=pedido_id)
        ser = ServicoCreateSerializer(data=request.data, context={"pedido": pedido})
        ser.is_valid(raise_exception=True)
        servico = ser.save()
        return Response(representar_servico(servico, True), status=status.HTTP_201_CREATED)


class PedidoServicoDetailView(APIView):
    permission_classes = [permissions.IsAuthenticated, IsProducaoAdmin]

    def _get(self, pedido_id: int, servico_id: int) -> Servico:
        return get_object_or_404(Servico, pk=servico_id, pedido_id=pedido_id)

    def patch(self, request, pedido_id: int, servico_id: int, *args, **kwargs):
        servico = self._get(pedido_id, servico_id)
        ser = ServicoUpdateSerializer(servico, data=request.data, partial=True)
        ser.is_valid(raise_exception=True)
        servico = gestao.atualizar_servico(servico, ser)
        return Response(representar_servico(servico, True))

    def delete(self, request, pedido_id: int, servico_id: int, *args, **kwargs):
        gestao.excluir_servico(self._get(pedido_id, servico_id))
        return Response({"ok": True, "message": "Serviço removido com sucesso"})
