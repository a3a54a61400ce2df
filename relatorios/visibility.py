# relatorios/visibility.py
"""
Regras de visibilidade do relatório:
- quem não é admin só enxerga as próprias execuções;
- valores monetários só saem para admin (projeção pós-agregação).
"""
from __future__ import annotations

from typing import Iterable

from core.permissions import is_admin

CAMPOS_MONETARIOS = ("precoUnitario", "valorTotal", "totalValor")


def escopo_operador(solicitante, funcoes: Iterable[str], operador_id: int | None) -> int | None:
    """admin: respeita o filtro pedido (None = todos). Demais: sempre o próprio id."""
    if is_admin(funcoes):
        return operador_id
    return solicitante.pk


def _iso(dt):
    return dt.isoformat() if dt else None


def _execucao_dict(linha, incluir_valores: bool) -> dict:
    data = {
        "id": linha.id,
        "servicoId": linha.servico_id,
        "pedidoNumero": linha.pedido_numero,
        "pedidoId": linha.pedido_id,
        "cliente": linha.cliente,
        "tipoServico": linha.tipo_servico,
        "quantidade": linha.quantidade,
        "horaInicio": _iso(linha.hora_inicio),
        "horaFim": _iso(linha.hora_fim),
        "motivoPausa": linha.motivo_pausa,
        "observacoes": linha.observacoes,
    }
    if incluir_valores:
        data["precoUnitario"] = linha.preco_unitario
        data["valorTotal"] = linha.valor_total
    return data


def _operador_dict(op, incluir_valores: bool) -> dict:
    data = {
        "userId": op.user_id,
        "nome": op.nome,
        "funcoes": list(op.funcoes),
        "totalServicos": op.total_servicos,
        "totalQuantidade": op.total_quantidade,
        "porServico": [
            {
                "tipoServico": r.tipo_servico,
                "totalServicos": r.total_servicos,
                "totalQuantidade": r.total_quantidade,
            }
            for r in op.por_servico_ordenado()
        ],
        "execucoes": [_execucao_dict(linha, incluir_valores) for linha in op.execucoes],
    }
    if incluir_valores:
        data["totalValor"] = op.total_valor
    return data


def projetar_relatorio(relatorio, incluir_valores: bool) -> dict:
    """Mesmo formato para todos; os campos monetários simplesmente não existem para não-admin."""
    return {
        "startDate": _iso(relatorio.inicio),
        "endDate": _iso(relatorio.fim),
        "operadores": [_operador_dict(op, incluir_valores) for op in relatorio.operadores],
    }
