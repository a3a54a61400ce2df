# core/exceptions.py
"""
Taxonomia de erros de negócio da produção.

Cada erro carrega um `kind` estável (consumido pelos clientes) e uma
mensagem legível. Nenhum deles é repetido automaticamente: são violações
determinísticas de regra, exceto `StorageUnavailable`, que o chamador
pode tentar de novo com a sua própria política.
"""
from __future__ import annotations

import logging

from django.http import Http404
from rest_framework import exceptions as drf_exceptions
from rest_framework import status
from rest_framework.response import Response
from rest_framework.views import exception_handler

log = logging.getLogger(__name__)


class ProducaoError(Exception):
    kind = "Error"
    code: str | None = None
    status_code = status.HTTP_400_BAD_REQUEST
    default_message = "Não foi possível concluir a operação"

    def __init__(self, message: str | None = None, *, errors=None):
        self.message = message or self.default_message
        self.errors = errors
        super().__init__(self.message)

    def as_dict(self) -> dict:
        data = {
            "ok": False,
            "error": self.kind,
            "code": self.code or self.kind,
            "message": self.message,
        }
        if self.errors is not None:
            data["errors"] = self.errors
        return data


class NotFound(ProducaoError):
    kind = "NotFound"
    status_code = status.HTTP_404_NOT_FOUND
    default_message = "Registro não encontrado"


class Forbidden(ProducaoError):
    kind = "Forbidden"
    status_code = status.HTTP_403_FORBIDDEN
    default_message = "Você não tem permissão para executar este serviço"


class InvalidState(ProducaoError):
    kind = "InvalidState"
    code = "InvalidState"


class AlreadyFinished(InvalidState):
    code = "AlreadyFinished"
    default_message = "Serviço já finalizado"


class AlreadyInProgress(InvalidState):
    code = "AlreadyInProgress"
    default_message = "Serviço já está em execução"


class NotInProgress(InvalidState):
    code = "NotInProgress"
    default_message = "Serviço não está em execução no momento"


class ServiceNotStarted(InvalidState):
    code = "ServiceNotStarted"
    default_message = "Serviço ainda não foi iniciado"


class DuplicateOpenRecord(ProducaoError):
    kind = "DuplicateOpenRecord"
    default_message = "Você já iniciou este serviço. Finalize antes de iniciar novamente."


class NoOpenRecord(ProducaoError):
    kind = "NoOpenRecord"
    default_message = "Nenhuma execução aberta encontrada para este serviço"


class QuantityExceedsRemaining(ProducaoError):
    kind = "QuantityExceedsRemaining"

    def __init__(self, restante: int, message: str | None = None):
        self.restante = restante
        super().__init__(
            message or f"Quantidade informada excede o restante do serviço. Restam {restante} peças."
        )

    def as_dict(self) -> dict:
        data = super().as_dict()
        data["restante"] = self.restante
        return data


class InvalidPayload(ProducaoError):
    kind = "ValidationError"
    default_message = "Dados inválidos"


class Conflict(ProducaoError):
    kind = "Conflict"
    status_code = status.HTTP_409_CONFLICT
    default_message = "Registro duplicado"


class StorageUnavailable(ProducaoError):
    kind = "StorageUnavailable"
    status_code = status.HTTP_503_SERVICE_UNAVAILABLE
    default_message = "Banco de dados indisponível. Tente novamente."


# -------------------------------
# Handler do DRF
# -------------------------------
def _erro(kind: str, message: str, http_status: int, errors=None) -> Response:
    data = {"ok": False, "error": kind, "code": kind, "message": message}
    if errors is not None:
        data["errors"] = errors
    return Response(data, status=http_status)


def api_exception_handler(exc, context):
    """
    Converte erros de negócio e erros do DRF no mesmo formato JSON:
    {"ok": false, "error": <kind>, "code": <sub-kind>, "message": <texto>}
    """
    if isinstance(exc, ProducaoError):
        view = context.get("view")
        log.warning(
            "[api] %s (%s) em %s: %s",
            exc.kind, exc.code or exc.kind, view.__class__.__name__ if view else "-", exc.message,
        )
        return Response(exc.as_dict(), status=exc.status_code)

    if isinstance(exc, drf_exceptions.ValidationError):
        return _erro("ValidationError", "Dados inválidos", status.HTTP_400_BAD_REQUEST, errors=exc.detail)

    if isinstance(exc, Http404) or isinstance(exc, drf_exceptions.NotFound):
        return _erro("NotFound", "Registro não encontrado", status.HTTP_404_NOT_FOUND)

    if isinstance(exc, (drf_exceptions.NotAuthenticated, drf_exceptions.AuthenticationFailed)):
        # o APIView já ajustou status_code/auth_header conforme as autenticações ativas
        resp = _erro("NotAuthenticated", str(exc.detail), exc.status_code)
        if getattr(exc, "auth_header", None):
            resp["WWW-Authenticate"] = exc.auth_header
        return resp

    if isinstance(exc, drf_exceptions.PermissionDenied):
        return _erro("Forbidden", str(exc.detail), status.HTTP_403_FORBIDDEN)

    return exception_handler(exc, context)
