"""Fixtures compartilhadas pelos testes de produção."""
from __future__ import annotations

from datetime import datetime, timedelta
from decimal import Decimal

from django.contrib.auth import get_user_model
from django.contrib.auth.models import Group
from django.test import TestCase
from django.utils import timezone

from core.permissions import funcoes_do_usuario
from pedidos.models import Execucao, Pedido, Servico

User = get_user_model()


def criar_usuario(username: str, *funcoes: str, nome: str = "") -> "User":
    user = User.objects.create_user(username=username, password="senha-forte-123", first_name=nome)
    for funcao in funcoes:
        grupo, _ = Group.objects.get_or_create(name=funcao)
        user.groups.add(grupo)
    return user


class ProducaoTestCase(TestCase):
    @classmethod
    def setUpTestData(cls):
        cls.admin = criar_usuario("gestor", "admin", nome="Gestora")
        cls.ana = criar_usuario("ana", "corte", nome="Ana")
        cls.bruno = criar_usuario("bruno", "corte", nome="Bruno")
        cls.carla = criar_usuario("carla", "fita", nome="Carla")
        cls.pedido = Pedido.objects.create(numero_pedido="P-100", cliente="Metalúrgica Alfa")

    def funcoes(self, user) -> set[str]:
        return funcoes_do_usuario(user)

    def novo_servico(self, quantidade=100, tipo="corte", preco="2.50", pedido=None, observacoes=None) -> Servico:
        return Servico.objects.create(
            pedido=pedido or self.pedido,
            tipo_servico=tipo,
            quantidade=quantidade,
            preco_unitario=Decimal(preco),
            observacoes=observacoes,
        )

    def execucao(
        self,
        servico: Servico,
        user,
        inicio: datetime,
        quantidade: int | None = None,
        minutos: int | None = 30,
        motivo: str | None = None,
    ) -> Execucao:
        """Grava uma execução já fechada (ou aberta, com minutos=None) com horários controlados."""
        return Execucao.objects.create(
            servico=servico,
            user=user,
            hora_inicio=inicio,
            hora_fim=inicio + timedelta(minutes=minutos) if minutos is not None else None,
            quantidade_executada=quantidade,
            motivo_pausa=motivo,
        )

    def horas_atras(self, horas: float) -> datetime:
        return timezone.now() - timedelta(hours=horas)
