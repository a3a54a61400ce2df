# pedidos/maquina.py
"""
Máquina de estados da execução de serviços.

    pending --iniciar--> in_progress --pausar/finalizar--> paused | finished
    paused  --iniciar--> in_progress

Cada transição roda numa única transação com lock da linha do serviço,
de modo que dois fechamentos concorrentes no mesmo serviço sejam
serializados e o segundo enxergue a quantidade já lançada pelo primeiro.
"""
from __future__ import annotations

import logging
from typing import Iterable

from core.exceptions import (
    AlreadyFinished,
    AlreadyInProgress,
    DuplicateOpenRecord,
    Forbidden,
    InvalidPayload,
    NoOpenRecord,
    NotFound,
    NotInProgress,
    QuantityExceedsRemaining,
    ServiceNotStarted,
)
from core.permissions import pode_operar
from . import ledger
from .models import Servico, StatusServico

log = logging.getLogger(__name__)

MOTIVO_MAX = 200


# ----------------- validações -----------------
def _quantidade(valor) -> int:
    if valor is None:
        return 0
    # a coerção de texto fica no serializer da API
    if isinstance(valor, bool) or not isinstance(valor, int) or valor < 0:
        raise InvalidPayload("Quantidade inválida")
    return valor


def _motivo(valor) -> str | None:
    if valor is None:
        return None
    if not isinstance(valor, str):
        raise InvalidPayload("Motivo inválido")
    if len(valor) > MOTIVO_MAX:
        raise InvalidPayload(f"Motivo deve ter no máximo {MOTIVO_MAX} caracteres")
    return valor.strip() or None


def _carregar(servico_id) -> Servico:
    try:
        return Servico.objects.select_for_update().get(pk=servico_id)
    except (Servico.DoesNotExist, ValueError, TypeError):
        raise NotFound("Serviço não encontrado") from None


def _autorizar(servico: Servico, funcoes: Iterable[str]) -> None:
    if not pode_operar(funcoes, servico.tipo_servico):
        raise Forbidden()


# ----------------- transições -----------------
def iniciar(servico_id, user, funcoes: Iterable[str]) -> Servico:
    """Abre uma execução do operador e coloca o serviço em execução."""
    with ledger.atomico():
        servico = _carregar(servico_id)
        _autorizar(servico, funcoes)

        status = ledger.recalcular_status(servico)
        if status == StatusServico.FINALIZADO:
            raise AlreadyFinished()
        if ledger.registro_aberto(servico.pk, user.pk):
            raise DuplicateOpenRecord()
        if status == StatusServico.EM_EXECUCAO:
            raise AlreadyInProgress()

        execucao = ledger.abrir_registro(servico, user)
        ledger.recalcular_status(servico)

    log.info(
        "[execucao] iniciado servico=%s execucao=%s por %s",
        servico.pk, execucao.pk, getattr(user, "username", user.pk),
    )
    return servico


def pausar(servico_id, user, funcoes: Iterable[str], quantidade=0, motivo=None) -> Servico:
    """Fecha a execução aberta do operador registrando peças e motivo."""
    qtd = _quantidade(quantidade)
    motivo = _motivo(motivo)
    return _fechar(servico_id, user, funcoes, qtd, motivo, operacao="pausar")


def finalizar(servico_id, user, funcoes: Iterable[str], quantidade=0) -> Servico:
    """
    Fechamento "final" da execução do operador. Se ainda restarem peças,
    o serviço volta para pausado aguardando outro início.
    """
    qtd = _quantidade(quantidade)
    return _fechar(servico_id, user, funcoes, qtd, None, operacao="finalizar")


def _fechar(servico_id, user, funcoes, qtd: int, motivo: str | None, *, operacao: str) -> Servico:
    with ledger.atomico():
        servico = _carregar(servico_id)
        _autorizar(servico, funcoes)

        status = ledger.recalcular_status(servico)
        if operacao == "pausar" and status != StatusServico.EM_EXECUCAO:
            raise NotInProgress()
        if operacao == "finalizar" and status == StatusServico.PENDENTE:
            raise ServiceNotStarted()

        aberta = ledger.registro_aberto(servico.pk, user.pk)
        if not aberta:
            raise NoOpenRecord()

        disponivel = ledger.restante(servico, excluir_id=aberta.pk)
        if qtd > disponivel:
            raise QuantityExceedsRemaining(disponivel)

        ledger.fechar_registro(aberta, qtd, motivo)
        novo = ledger.recalcular_status(servico)

    log.info(
        "[execucao] %s servico=%s execucao=%s quantidade=%s status=%s por %s",
        operacao, servico.pk, aberta.pk, qtd, novo, getattr(user, "username", user.pk),
    )
    return servico
