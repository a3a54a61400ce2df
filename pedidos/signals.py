# pedidos/signals.py
from __future__ import annotations

import logging
from django.db.models.signals import pre_save, post_save
from django.dispatch import receiver

from .models import Execucao, Servico, StatusServico

log = logging.getLogger(__name__)


@receiver(pre_save, sender=Servico)
def servico_pre_save(sender, instance: Servico, **kwargs):
    """
    - Na criação: força status = pending (execuções ainda não existem).
    - Loga qualquer mudança de status (diagnóstico de drift).
    """
    if instance._state.adding:
        if instance.status != StatusServico.PENDENTE:
            log.warning(
                "[signals][pre_save] Forçando pending na criação (recebido=%s, pedido=%s)",
                instance.status, instance.pedido_id,
            )
            instance.status = StatusServico.PENDENTE
        return

    old_status = sender.objects.filter(pk=instance.pk).values_list("status", flat=True).first()
    if old_status is not None and old_status != instance.status:
        log.info(
            "[signals][pre_save] Status mudando servico=%s %s -> %s",
            instance.pk, old_status, instance.status,
        )


@receiver(post_save, sender=Execucao)
def execucao_post_save(sender, instance: Execucao, created: bool, **kwargs):
    if created:
        log.debug(
            "[signals][post_save] Execução registrada id=%s servico=%s user=%s",
            instance.pk, instance.servico_id, instance.user_id,
        )
