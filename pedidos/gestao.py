# pedidos/gestao.py
"""Operações administrativas de pedidos/serviços que tocam o livro de execuções."""
from __future__ import annotations

import logging

from django.db import IntegrityError, transaction

from core.exceptions import Conflict, InvalidPayload, InvalidState, NotFound
from . import ledger
from .models import Execucao, Pedido, Servico
from .serializers import PedidoCreateSerializer, ServicoUpdateSerializer

log = logging.getLogger(__name__)


def criar_pedido(ser: PedidoCreateSerializer) -> Pedido:
    try:
        with transaction.atomic():
            pedido = ser.save()
    except IntegrityError as e:
        raise Conflict("Número de pedido já cadastrado") from e
    log.info("[pedidos] criado pedido=%s numero=%s", pedido.pk, pedido.numero_pedido)
    return pedido


def excluir_pedido(pedido_id) -> None:
    """Pedido com qualquer execução registrada é imutável."""
    with ledger.atomico():
        pedido = Pedido.objects.select_for_update().filter(pk=pedido_id).first()
        if not pedido:
            raise NotFound("Pedido não encontrado")
        if pedido.tem_execucoes():
            raise InvalidState("Não é possível excluir pedidos que já tiveram execuções registradas.")
        pedido.servicos.all().delete()
        pedido.delete()
    log.info("[pedidos] excluído pedido=%s", pedido_id)


def atualizar_servico(servico: Servico, ser: ServicoUpdateSerializer) -> Servico:
    """
    A quantidade alvo não pode ficar abaixo do que já foi produzido;
    o status é recalculado na mesma transação.
    """
    with ledger.atomico():
        servico = Servico.objects.select_for_update().get(pk=servico.pk)
        nova = ser.validated_data.get("quantidade")
        if nova is not None:
            produzido = ledger.soma_fechada(servico.pk)
            if nova < produzido:
                raise InvalidPayload(
                    f"Quantidade não pode ser menor que o já produzido ({produzido} peças)."
                )
        servico = ser.update(servico, ser.validated_data)
        ledger.recalcular_status(servico)
    log.info("[pedidos] atualizado servico=%s status=%s", servico.pk, servico.status)
    return servico


def excluir_servico(servico: Servico) -> None:
    servico_id = servico.pk
    with ledger.atomico():
        # mesmo lock de maquina.iniciar: nenhuma execução entra entre a checagem e o delete
        servico = Servico.objects.select_for_update().filter(pk=servico_id).first()
        if not servico:
            raise NotFound("Serviço não encontrado")
        if Execucao.objects.filter(servico_id=servico_id).exists():
            raise InvalidState("Não é possível excluir serviços que já tiveram execuções registradas.")
        servico.delete()
    log.info("[pedidos] excluído servico=%s", servico_id)
