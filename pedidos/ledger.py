# pedidos/ledger.py
"""
Livro de execuções: registro de aberturas/fechamentos por serviço.

É a única fonte de verdade de "quanto já foi produzido". O status do
serviço é uma projeção destes registros e deve ser recalculado aqui,
dentro da mesma transação da escrita.
"""
from __future__ import annotations

import logging
from contextlib import contextmanager
from datetime import datetime

from django.db import IntegrityError, InterfaceError, OperationalError, transaction
from django.db.models import QuerySet, Sum
from django.utils import timezone

from core.exceptions import DuplicateOpenRecord, NoOpenRecord, StorageUnavailable
from .models import Execucao, Servico, StatusServico

log = logging.getLogger(__name__)


@contextmanager
def atomico():
    """Fronteira transacional das operações; falha de conexão vira StorageUnavailable."""
    try:
        with transaction.atomic():
            yield
    except (OperationalError, InterfaceError) as e:
        log.exception("[ledger] banco indisponível: %s", e)
        raise StorageUnavailable() from e


# ----------------- consultas -----------------
def registro_aberto(servico_id: int, user_id: int) -> Execucao | None:
    return (
        Execucao.objects
        .filter(servico_id=servico_id, user_id=user_id, hora_fim__isnull=True)
        .order_by("-hora_inicio", "-id")
        .first()
    )


def soma_fechada(servico_id: int, excluir_id: int | None = None) -> int:
    """Soma das quantidades dos registros fechados; `excluir_id` nunca entra na conta."""
    qs = Execucao.objects.filter(servico_id=servico_id, hora_fim__isnull=False)
    if excluir_id is not None:
        qs = qs.exclude(pk=excluir_id)
    return int(qs.aggregate(total=Sum("quantidade_executada"))["total"] or 0)


def restante(servico: Servico, excluir_id: int | None = None) -> int:
    return max(servico.quantidade - soma_fechada(servico.pk, excluir_id), 0)


def listar(
    operador_id: int | None = None,
    inicio: datetime | None = None,
    fim: datetime | None = None,
) -> QuerySet:
    """Execuções com início em [inicio, fim] (limites inclusivos), mais recentes primeiro."""
    qs = Execucao.objects.select_related("user", "servico", "servico__pedido").prefetch_related("user__groups")
    if operador_id is not None:
        qs = qs.filter(user_id=operador_id)
    if inicio is not None:
        qs = qs.filter(hora_inicio__gte=inicio)
    if fim is not None:
        qs = qs.filter(hora_inicio__lte=fim)
    return qs.order_by("-hora_inicio", "-id")


# ----------------- projeção de status -----------------
def derivar_status(servico: Servico) -> str:
    execucoes = Execucao.objects.filter(servico_id=servico.pk)
    if not execucoes.exists():
        return StatusServico.PENDENTE
    if soma_fechada(servico.pk) >= servico.quantidade:
        return StatusServico.FINALIZADO
    if execucoes.filter(hora_fim__isnull=True).exists():
        return StatusServico.EM_EXECUCAO
    return StatusServico.PAUSADO


def recalcular_status(servico: Servico) -> str:
    novo = derivar_status(servico)
    if servico.status != novo:
        servico.status = novo
        servico.save(update_fields=["status", "updated_at"])
    return novo


# ----------------- escrita -----------------
def abrir_registro(servico: Servico, user, quando: datetime | None = None) -> Execucao:
    if registro_aberto(servico.pk, user.pk):
        raise DuplicateOpenRecord()
    try:
        # savepoint: a constraint parcial cobre a corrida entre duas aberturas
        with transaction.atomic():
            execucao = Execucao.objects.create(
                servico=servico,
                user=user,
                hora_inicio=quando or timezone.now(),
            )
    except IntegrityError as e:
        raise DuplicateOpenRecord() from e
    log.debug("[ledger] aberta execucao=%s servico=%s user=%s", execucao.pk, servico.pk, user.pk)
    return execucao


def fechar_registro(
    execucao: Execucao,
    quantidade: int,
    motivo: str | None = None,
    quando: datetime | None = None,
) -> Execucao:
    """Fecha a execução uma única vez (UPDATE condicionado a hora_fim nula)."""
    fim = max(quando or timezone.now(), execucao.hora_inicio)
    n = Execucao.objects.filter(pk=execucao.pk, hora_fim__isnull=True).update(
        hora_fim=fim,
        quantidade_executada=quantidade,
        motivo_pausa=motivo,
    )
    if not n:
        raise NoOpenRecord("Execução já encerrada")
    execucao.hora_fim = fim
    execucao.quantidade_executada = quantidade
    execucao.motivo_pausa = motivo
    log.debug("[ledger] fechada execucao=%s quantidade=%s", execucao.pk, quantidade)
    return execucao
