# pedidos/forms.py
from django import forms

from . import ledger
from .models import Servico


class ServicoAdminForm(forms.ModelForm):
    """Edição pelo admin: a quantidade alvo nunca fica abaixo do já produzido."""

    class Meta:
        model = Servico
        fields = ("pedido", "catalogo", "tipo_servico", "quantidade", "preco_unitario", "observacoes")

    def clean_tipo_servico(self):
        return (self.cleaned_data.get("tipo_servico") or "").strip().lower()

    def clean_quantidade(self):
        quantidade = self.cleaned_data.get("quantidade")
        if quantidade is None or not self.instance.pk:
            return quantidade
        produzido = ledger.soma_fechada(self.instance.pk)
        if quantidade < produzido:
            raise forms.ValidationError(
                f"Quantidade não pode ser menor que o já produzido ({produzido} peças)."
            )
        return quantidade
