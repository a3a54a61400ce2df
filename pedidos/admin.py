# pedidos/admin.py
from django.contrib import admin

from . import ledger
from .forms import ServicoAdminForm
from .models import Execucao, Pedido, Servico


class ServicoInline(admin.TabularInline):
    model = Servico
    form = ServicoAdminForm
    extra = 0
    fields = ("tipo_servico", "quantidade", "preco_unitario", "status", "observacoes")
    readonly_fields = ("status",)
    show_change_link = True


@admin.register(Pedido)
class PedidoAdmin(admin.ModelAdmin):
    list_display  = ("numero_pedido", "cliente", "data_criacao")
    search_fields = ("numero_pedido", "cliente")
    ordering      = ("-data_criacao",)
    inlines       = [ServicoInline]

    def save_formset(self, request, form, formset, change):
        with ledger.atomico():
            super().save_formset(request, form, formset, change)
            if formset.model is Servico:
                for servico in form.instance.servicos.all():
                    ledger.recalcular_status(servico)


class ExecucaoInline(admin.TabularInline):
    model = Execucao
    extra = 0
    can_delete = False
    fields = ("user", "hora_inicio", "hora_fim", "quantidade_executada", "motivo_pausa")
    readonly_fields = fields

    def has_add_permission(self, request, obj=None):
        return False


@admin.register(Servico)
class ServicoAdmin(admin.ModelAdmin):
    form = ServicoAdminForm
    list_display  = ("id", "pedido", "tipo_servico", "quantidade", "preco_unitario", "status")
    list_filter   = ("status", "tipo_servico")
    search_fields = ("pedido__numero_pedido", "pedido__cliente", "tipo_servico", "observacoes")
    # status é projeção das execuções; só a máquina de estados escreve
    readonly_fields = ("status", "created_at", "updated_at")
    inlines = [ExecucaoInline]

    def save_model(self, request, obj, form, change):
        with ledger.atomico():
            super().save_model(request, obj, form, change)
            if change:
                ledger.recalcular_status(obj)


@admin.register(Execucao)
class ExecucaoAdmin(admin.ModelAdmin):
    list_display  = ("hora_inicio", "hora_fim", "user", "servico", "quantidade_executada", "motivo_pausa")
    list_filter   = ("servico__tipo_servico", "user")
    search_fields = ("servico__pedido__numero_pedido", "user__username", "motivo_pausa")
    ordering      = ("-hora_inicio",)

    # livro de execuções: somente leitura no admin
    def has_add_permission(self, request):
        return False

    def has_change_permission(self, request, obj=None):
        return False

    def has_delete_permission(self, request, obj=None):
        return False
