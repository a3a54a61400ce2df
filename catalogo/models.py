# catalogo/models.py
from decimal import Decimal
from django.core.validators import MinValueValidator
from django.db import models


class ServicoCatalogo(models.Model):
    """
    Item do catálogo: define o tipo de serviço (função que o executa)
    e o preço padrão sugerido ao incluir o serviço num pedido.
    """
    nome = models.CharField(max_length=120, unique=True)
    funcao = models.CharField(max_length=60, db_index=True)
    preco_padrao = models.DecimalField(
        max_digits=10, decimal_places=2, default=Decimal("0.00"),
        validators=[MinValueValidator(Decimal("0.00"))],
    )
    descricao = models.TextField(null=True, blank=True)
    ativo = models.BooleanField(default=True)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["nome"]
        verbose_name = "serviço do catálogo"
        verbose_name_plural = "catálogo de serviços"

    def __str__(self):
        return f"{self.nome} ({self.funcao})"

    def save(self, *args, **kwargs):
        # função é comparada literalmente com os nomes de grupo
        self.nome = (self.nome or "").strip()
        self.funcao = (self.funcao or "").strip().lower()
        super().save(*args, **kwargs)
