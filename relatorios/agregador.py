# relatorios/agregador.py
"""
Agregação do livro de execuções em relatórios por operador e por tipo
de serviço.

Ordem determinística:
- operadores na ordem em que aparecem (execuções mais recentes primeiro);
- resumo por serviço ordenado pelo nome do tipo;
- execuções de cada operador por início decrescente.

Os valores monetários são sempre calculados aqui; quem decide se saem
na resposta é relatorios.visibility.projetar_relatorio.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal
from typing import Iterable

from django.utils import timezone

from core.exceptions import InvalidPayload
from core.permissions import funcoes_do_usuario
from pedidos import ledger
from pedidos.models import Execucao
from .visibility import escopo_operador

log = logging.getLogger(__name__)


@dataclass
class LinhaExecucao:
    id: int
    servico_id: int
    pedido_numero: str
    pedido_id: int | None
    cliente: str
    tipo_servico: str
    quantidade: int
    preco_unitario: Decimal
    valor_total: Decimal
    hora_inicio: datetime
    hora_fim: datetime | None
    motivo_pausa: str | None
    observacoes: str | None


@dataclass
class ResumoServico:
    tipo_servico: str
    total_servicos: int = 0
    total_quantidade: int = 0


@dataclass
class ResumoOperador:
    user_id: int
    nome: str
    funcoes: list[str]
    total_servicos: int = 0
    total_quantidade: int = 0
    total_valor: Decimal = Decimal("0.00")
    por_servico: dict[str, ResumoServico] = field(default_factory=dict)
    execucoes: list[LinhaExecucao] = field(default_factory=list)

    def por_servico_ordenado(self) -> list[ResumoServico]:
        return [self.por_servico[k] for k in sorted(self.por_servico)]


@dataclass
class Relatorio:
    inicio: datetime | None
    fim: datetime
    operadores: list[ResumoOperador] = field(default_factory=list)

    @property
    def total_quantidade(self) -> int:
        return sum(op.total_quantidade for op in self.operadores)


def quantidade_produzida(execucao: Execucao) -> int:
    """
    Quantidade gravada no fechamento. Registros antigos fechados sem
    quantidade contam o alvo inteiro do serviço; execução ainda aberta
    não produziu nada contabilizável.
    """
    if execucao.quantidade_executada is not None:
        return execucao.quantidade_executada
    if execucao.hora_fim is None:
        return 0
    return execucao.servico.quantidade


def _linha(execucao: Execucao) -> LinhaExecucao:
    servico = execucao.servico
    pedido = servico.pedido
    quantidade = quantidade_produzida(execucao)
    preco = Decimal(servico.preco_unitario or 0)
    return LinhaExecucao(
        id=execucao.pk,
        servico_id=servico.pk,
        pedido_numero=pedido.numero_pedido if pedido else "",
        pedido_id=servico.pedido_id,
        cliente=pedido.cliente if pedido else "",
        tipo_servico=servico.tipo_servico,
        quantidade=quantidade,
        preco_unitario=preco,
        valor_total=preco * quantidade,
        hora_inicio=execucao.hora_inicio,
        hora_fim=execucao.hora_fim,
        motivo_pausa=execucao.motivo_pausa,
        observacoes=servico.observacoes,
    )


def agregar(execucoes: Iterable[Execucao]) -> list[ResumoOperador]:
    """Espera as execuções já ordenadas por início decrescente."""
    operadores: dict[int, ResumoOperador] = {}
    for execucao in execucoes:
        op = operadores.get(execucao.user_id)
        if op is None:
            user = execucao.user
            op = operadores[execucao.user_id] = ResumoOperador(
                user_id=user.pk,
                nome=user.get_full_name() or user.get_username(),
                funcoes=sorted(funcoes_do_usuario(user)),
            )

        linha = _linha(execucao)
        op.total_servicos += 1
        op.total_quantidade += linha.quantidade
        op.total_valor += linha.valor_total

        resumo = op.por_servico.setdefault(linha.tipo_servico, ResumoServico(linha.tipo_servico))
        resumo.total_servicos += 1
        resumo.total_quantidade += linha.quantidade

        op.execucoes.append(linha)
    return list(operadores.values())


def montar_relatorio(
    solicitante,
    funcoes: Iterable[str],
    inicio: datetime | None = None,
    fim: datetime | None = None,
    operador_id: int | None = None,
) -> Relatorio:
    """
    Execuções com início em [inicio, fim]. Sem `inicio` não há limite
    inferior; sem `fim`, vale o instante atual. Não-admin sempre recebe
    apenas as próprias execuções, qualquer que seja o `operador_id`.
    """
    funcoes = set(funcoes or ())
    fim = fim or timezone.now()
    if inicio is not None and inicio > fim:
        raise InvalidPayload("Data inicial deve ser anterior à final")

    alvo = escopo_operador(solicitante, funcoes, operador_id)
    if operador_id is not None and alvo != operador_id:
        log.info(
            "[relatorio] filtro de operador %s ignorado para %s (sem permissão)",
            operador_id, solicitante.pk,
        )

    execucoes = ledger.listar(operador_id=alvo, inicio=inicio, fim=fim)
    relatorio = Relatorio(inicio=inicio, fim=fim, operadores=agregar(execucoes))
    log.debug(
        "[relatorio] %s operador(es), %s peça(s) (solicitante=%s alvo=%s)",
        len(relatorio.operadores), relatorio.total_quantidade, solicitante.pk, alvo,
    )
    return relatorio
