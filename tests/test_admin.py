from django.contrib import admin
from django.contrib.auth import get_user_model
from django.test import RequestFactory
from django.urls import reverse

from pedidos.admin import ServicoAdmin
from pedidos.forms import ServicoAdminForm
from pedidos.models import Servico, StatusServico
from .base import ProducaoTestCase


class ServicoAdminTests(ProducaoTestCase):
    def setUp(self):
        self.root = get_user_model().objects.create_superuser("root", "root@example.com", "senha-forte-123")
        self.servico = self.novo_servico(quantidade=10)
        self.execucao(self.servico, self.ana, self.horas_atras(1), quantidade=6)
        self.servico.status = StatusServico.PAUSADO
        self.servico.save(update_fields=["status"])

    def dados(self, quantidade) -> dict:
        return {
            "pedido": self.pedido.pk,
            "catalogo": "",
            "tipo_servico": "corte",
            "quantidade": quantidade,
            "preco_unitario": "2.50",
            "observacoes": "",
        }

    def test_form_rejeita_quantidade_abaixo_do_produzido(self):
        form = ServicoAdminForm(data=self.dados(4), instance=self.servico)
        self.assertFalse(form.is_valid())
        self.assertIn("quantidade", form.errors)

        self.assertTrue(ServicoAdminForm(data=self.dados(6), instance=self.servico).is_valid())

    def test_edicao_pelo_admin_abaixo_do_produzido_nao_grava(self):
        self.client.force_login(self.root)
        data = self.dados(4)
        execucao = self.servico.execucoes.get()
        data.update({
            "execucoes-TOTAL_FORMS": "1",
            "execucoes-INITIAL_FORMS": "1",
            "execucoes-MIN_NUM_FORMS": "0",
            "execucoes-MAX_NUM_FORMS": "1000",
            "execucoes-0-id": str(execucao.pk),
            "execucoes-0-servico": str(self.servico.pk),
        })

        resp = self.client.post(reverse("admin:pedidos_servico_change", args=[self.servico.pk]), data)
        self.assertEqual(resp.status_code, 200)

        self.servico.refresh_from_db()
        self.assertEqual(self.servico.quantidade, 10)
        self.assertEqual(self.servico.status, StatusServico.PAUSADO)

    def test_salvar_pelo_admin_recalcula_status(self):
        form = ServicoAdminForm(data=self.dados(6), instance=self.servico)
        self.assertTrue(form.is_valid(), form.errors)
        request = RequestFactory().post("/")
        request.user = self.root

        ServicoAdmin(Servico, admin.site).save_model(request, form.save(commit=False), form, change=True)

        self.servico.refresh_from_db()
        self.assertEqual(self.servico.quantidade, 6)
        self.assertEqual(self.servico.status, StatusServico.FINALIZADO)
