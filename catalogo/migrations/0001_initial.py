from decimal import Decimal

import django.core.validators
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name="ServicoCatalogo",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("nome", models.CharField(max_length=120, unique=True)),
                ("funcao", models.CharField(db_index=True, max_length=60)),
                ("preco_padrao", models.DecimalField(
                    decimal_places=2, default=Decimal("0.00"), max_digits=10,
                    validators=[django.core.validators.MinValueValidator(Decimal("0.00"))],
                )),
                ("descricao", models.TextField(blank=True, null=True)),
                ("ativo", models.BooleanField(default=True)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
            ],
            options={
                "verbose_name": "serviço do catálogo",
                "verbose_name_plural": "catálogo de serviços",
                "ordering": ["nome"],
            },
        ),
    ]
