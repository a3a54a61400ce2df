from decimal import Decimal

import django.core.validators
import django.db.models.deletion
import django.utils.timezone
from django.conf import settings
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        ("catalogo", "0001_initial"),
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name="Pedido",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("numero_pedido", models.CharField(max_length=60, unique=True)),
                ("cliente", models.CharField(max_length=160)),
                ("data_criacao", models.DateTimeField(default=django.utils.timezone.now, editable=False)),
            ],
            options={
                "ordering": ["-data_criacao"],
            },
        ),
        migrations.CreateModel(
            name="Servico",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("tipo_servico", models.CharField(db_index=True, max_length=60)),
                ("quantidade", models.PositiveIntegerField(validators=[django.core.validators.MinValueValidator(1)])),
                ("preco_unitario", models.DecimalField(
                    decimal_places=2, default=Decimal("0.00"), max_digits=10,
                    validators=[django.core.validators.MinValueValidator(Decimal("0.00"))],
                )),
                ("observacoes", models.TextField(blank=True, null=True)),
                ("status", models.CharField(
                    choices=[
                        ("pending", "Pendente"),
                        ("in_progress", "Em execução"),
                        ("paused", "Pausado"),
                        ("finished", "Finalizado"),
                    ],
                    default="pending",
                    max_length=20,
                )),
                ("created_at", models.DateTimeField(default=django.utils.timezone.now, editable=False)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                ("catalogo", models.ForeignKey(
                    blank=True, null=True,
                    on_delete=django.db.models.deletion.SET_NULL,
                    related_name="servicos",
                    to="catalogo.servicocatalogo",
                )),
                ("pedido", models.ForeignKey(
                    on_delete=django.db.models.deletion.CASCADE,
                    related_name="servicos",
                    to="pedidos.pedido",
                )),
            ],
            options={
                "ordering": ["id"],
                "indexes": [models.Index(fields=["pedido", "status"], name="servico_pedido_status_idx")],
                "constraints": [
                    models.CheckConstraint(condition=models.Q(("quantidade__gt", 0)), name="servico_quantidade_positiva"),
                ],
            },
        ),
        migrations.CreateModel(
            name="Execucao",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("hora_inicio", models.DateTimeField(db_index=True, default=django.utils.timezone.now)),
                ("hora_fim", models.DateTimeField(blank=True, null=True)),
                ("motivo_pausa", models.CharField(blank=True, max_length=200, null=True)),
                ("quantidade_executada", models.PositiveIntegerField(blank=True, null=True)),
                ("servico", models.ForeignKey(
                    on_delete=django.db.models.deletion.PROTECT,
                    related_name="execucoes",
                    to="pedidos.servico",
                )),
                ("user", models.ForeignKey(
                    on_delete=django.db.models.deletion.PROTECT,
                    related_name="execucoes",
                    to=settings.AUTH_USER_MODEL,
                )),
            ],
            options={
                "ordering": ["-hora_inicio", "-id"],
                "indexes": [
                    models.Index(fields=["servico", "user", "hora_fim"], name="exec_servico_user_fim_idx"),
                    models.Index(fields=["user", "hora_inicio"], name="exec_user_inicio_idx"),
                ],
                "constraints": [
                    models.UniqueConstraint(
                        condition=models.Q(("hora_fim__isnull", True)),
                        fields=("servico", "user"),
                        name="uniq_execucao_aberta_por_operador",
                    ),
                    models.CheckConstraint(
                        condition=models.Q(("hora_fim__isnull", True), ("hora_fim__gte", models.F("hora_inicio")), _connector="OR"),
                        name="exec_fim_gte_inicio_or_null",
                    ),
                ],
            },
        ),
    ]
