# catalogo/admin.py
from django.contrib import admin, messages
from django.http import HttpResponse
import csv

from .models import ServicoCatalogo


@admin.register(ServicoCatalogo)
class ServicoCatalogoAdmin(admin.ModelAdmin):
    # Lista
    list_display = ("nome", "funcao", "preco_padrao", "ativo", "updated_at")
    list_filter = ("funcao", "ativo")
    search_fields = ("nome", "funcao", "descricao")
    ordering = ("nome",)
    list_per_page = 50

    # Edição rápida na listagem
    list_editable = ("preco_padrao", "ativo")

    readonly_fields = ("created_at", "updated_at")
    fieldsets = (
        (None, {"fields": ("nome", "funcao", "descricao")}),
        ("Preço", {"fields": ("preco_padrao",)}),
        ("Status", {"fields": ("ativo",)}),
        ("Auditoria", {"classes": ("collapse",), "fields": ("created_at", "updated_at")}),
    )

    actions = ("ativar", "desativar", "exportar_csv")

    @admin.action(description="Ativar selecionados")
    def ativar(self, request, queryset):
        n = queryset.update(ativo=True)
        self.message_user(request, f"{n} item(ns) ativado(s).", level=messages.SUCCESS)

    @admin.action(description="Desativar selecionados")
    def desativar(self, request, queryset):
        n = queryset.update(ativo=False)
        self.message_user(request, f"{n} item(ns) desativado(s).", level=messages.SUCCESS)

    @admin.action(description="Exportar CSV (selecionados)")
    def exportar_csv(self, request, queryset):
        response = HttpResponse(content_type="text/csv; charset=utf-8")
        response["Content-Disposition"] = 'attachment; filename="catalogo_servicos.csv"'
        writer = csv.writer(response, delimiter=";")
        writer.writerow(["nome", "funcao", "preco_padrao", "ativo"])
        for item in queryset.order_by("nome"):
            writer.writerow([
                item.nome,
                item.funcao,
                f"{item.preco_padrao:.2f}",
                1 if item.ativo else 0,
            ])
        return response
