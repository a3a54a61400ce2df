# pedidos/models.py
from __future__ import annotations

from decimal import Decimal

from django.conf import settings
from django.core.validators import MinValueValidator
from django.db import models
from django.db.models import F, Q
from django.utils import timezone

User = settings.AUTH_USER_MODEL


class StatusServico(models.TextChoices):
    # valores consumidos pelos clientes; não traduzir
    PENDENTE    = "pending",     "Pendente"
    EM_EXECUCAO = "in_progress", "Em execução"
    PAUSADO     = "paused",      "Pausado"
    FINALIZADO  = "finished",    "Finalizado"


class Pedido(models.Model):
    numero_pedido = models.CharField(max_length=60, unique=True)
    cliente = models.CharField(max_length=160)
    data_criacao = models.DateTimeField(default=timezone.now, editable=False)

    class Meta:
        ordering = ["-data_criacao"]

    def __str__(self):
        return f"Pedido {self.numero_pedido} — {self.cliente}"

    def tem_execucoes(self) -> bool:
        return Execucao.objects.filter(servico__pedido=self).exists()


class Servico(models.Model):
    """
    Unidade faturável de um pedido. O `status` é uma projeção das execuções
    (ver pedidos.ledger.derivar_status); é recalculado a cada transição.
    """
    pedido = models.ForeignKey(Pedido, on_delete=models.CASCADE, related_name="servicos")
    catalogo = models.ForeignKey(
        "catalogo.ServicoCatalogo",
        on_delete=models.SET_NULL,
        null=True, blank=True,
        related_name="servicos",
    )
    tipo_servico = models.CharField(max_length=60, db_index=True)
    quantidade = models.PositiveIntegerField(validators=[MinValueValidator(1)])
    preco_unitario = models.DecimalField(
        max_digits=10, decimal_places=2, default=Decimal("0.00"),
        validators=[MinValueValidator(Decimal("0.00"))],
    )
    observacoes = models.TextField(null=True, blank=True)
    status = models.CharField(
        max_length=20,
        choices=StatusServico.choices,
        default=StatusServico.PENDENTE,
    )

    created_at = models.DateTimeField(default=timezone.now, editable=False)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["id"]
        indexes = [
            models.Index(fields=["pedido", "status"], name="servico_pedido_status_idx"),
        ]
        constraints = [
            models.CheckConstraint(name="servico_quantidade_positiva", condition=Q(quantidade__gt=0)),
        ]

    def __str__(self):
        return f"{self.tipo_servico} ×{self.quantidade} [{self.status}] (pedido {self.pedido_id})"

    @property
    def finalizado(self) -> bool:
        return self.status == StatusServico.FINALIZADO


class Execucao(models.Model):
    """
    Intervalo em que um operador trabalhou num serviço.
    Aberta enquanto `hora_fim` é nula; o fechamento grava fim, quantidade
    e motivo uma única vez. Nunca é apagada.
    """
    servico = models.ForeignKey(Servico, on_delete=models.PROTECT, related_name="execucoes")
    user = models.ForeignKey(User, on_delete=models.PROTECT, related_name="execucoes")

    hora_inicio = models.DateTimeField(default=timezone.now, db_index=True)
    hora_fim = models.DateTimeField(null=True, blank=True)
    motivo_pausa = models.CharField(max_length=200, null=True, blank=True)
    # nula enquanto aberta (e em registros antigos fechados sem quantidade)
    quantidade_executada = models.PositiveIntegerField(null=True, blank=True)

    class Meta:
        ordering = ["-hora_inicio", "-id"]
        indexes = [
            models.Index(fields=["servico", "user", "hora_fim"], name="exec_servico_user_fim_idx"),
            models.Index(fields=["user", "hora_inicio"], name="exec_user_inicio_idx"),
        ]
        constraints = [
            # no máximo uma execução aberta por (serviço, operador)
            models.UniqueConstraint(
                fields=["servico", "user"],
                condition=Q(hora_fim__isnull=True),
                name="uniq_execucao_aberta_por_operador",
            ),
            models.CheckConstraint(
                name="exec_fim_gte_inicio_or_null",
                condition=Q(hora_fim__isnull=True) | Q(hora_fim__gte=F("hora_inicio")),
            ),
        ]

    def __str__(self):
        fim = f"{timezone.localtime(self.hora_fim):%d/%m %H:%M}" if self.hora_fim else "aberta"
        return f"{self.user} · {self.servico.tipo_servico} ({timezone.localtime(self.hora_inicio):%d/%m %H:%M} → {fim})"

    @property
    def aberta(self) -> bool:
        return self.hora_fim is None
