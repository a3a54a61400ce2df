# core/permissions.py
from __future__ import annotations

from typing import Iterable

from django.conf import settings
from rest_framework import permissions


def admin_role() -> str:
    return getattr(settings, "PRODUCAO_ADMIN_ROLE", "admin")


def funcoes_do_usuario(user) -> set[str]:
    """
    Funções do usuário = nomes dos grupos do Django.
    Superusuário sempre carrega a função privilegiada.
    """
    if not user or not user.is_authenticated:
        return set()
    # .all() aproveita prefetch_related("user__groups") dos relatórios
    funcoes = {g.name for g in user.groups.all()}
    if user.is_superuser:
        funcoes.add(admin_role())
    return funcoes


def is_admin(funcoes: Iterable[str]) -> bool:
    return admin_role() in set(funcoes or ())


def pode_operar(funcoes: Iterable[str], tipo_servico: str) -> bool:
    """
    Admin opera qualquer serviço; os demais só o tipo que coincide
    com uma das suas funções (o nome da função é a autorização).
    """
    funcoes = set(funcoes or ())
    if admin_role() in funcoes:
        return True
    return tipo_servico in funcoes


class IsProducaoAdmin(permissions.BasePermission):
    """Acesso restrito para administradores."""
    message = "Acesso restrito para administradores"

    def has_permission(self, request, view) -> bool:
        return is_admin(funcoes_do_usuario(request.user))
