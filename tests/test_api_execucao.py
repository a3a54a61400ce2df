from unittest import mock

from django.db import OperationalError
from django.urls import reverse
from rest_framework.test import APIClient

from pedidos.models import Execucao, StatusServico
from .base import ProducaoTestCase


class ExecucaoApiTests(ProducaoTestCase):
    def setUp(self):
        self.client = APIClient()
        self.servico = self.novo_servico(quantidade=10, preco="2.50")

    def url(self, acao: str, servico_id=None) -> str:
        return reverse(f"api_execucao:{acao}", args=[servico_id or self.servico.pk])

    def test_requer_autenticacao(self):
        resp = self.client.post(self.url("iniciar"))
        self.assertEqual(resp.status_code, 403)
        self.assertEqual(resp.json()["error"], "NotAuthenticated")
        self.assertFalse(Execucao.objects.exists())

    def test_ciclo_completo_do_operador(self):
        self.client.force_authenticate(self.ana)

        resp = self.client.post(self.url("iniciar"))
        self.assertEqual(resp.status_code, 200)
        body = resp.json()
        self.assertEqual(body["status"], StatusServico.EM_EXECUCAO)
        self.assertEqual(len(body["execucoes"]), 1)
        self.assertNotIn("precoUnitario", body)

        resp = self.client.post(self.url("pausar"), {"quantidadeExecutada": 4, "motivo": "almoço"}, format="json")
        self.assertEqual(resp.status_code, 200)
        self.assertEqual(resp.json()["status"], StatusServico.PAUSADO)
        self.assertEqual(resp.json()["execucoes"][0]["motivoPausa"], "almoço")

        self.client.post(self.url("iniciar"))
        resp = self.client.post(self.url("finalizar"), {"quantidadeExecutada": 6}, format="json")
        self.assertEqual(resp.status_code, 200)
        body = resp.json()
        self.assertEqual(body["status"], StatusServico.FINALIZADO)
        self.assertEqual([e["quantidadeExecutada"] for e in body["execucoes"]], [6, 4])

    def test_admin_recebe_preco(self):
        self.client.force_authenticate(self.admin)
        resp = self.client.post(self.url("iniciar"))
        self.assertEqual(resp.status_code, 200)
        self.assertEqual(resp.json()["precoUnitario"], 2.5)

    def test_excesso_retorna_restante(self):
        self.client.force_authenticate(self.ana)
        self.client.post(self.url("iniciar"))

        resp = self.client.post(self.url("finalizar"), {"quantidadeExecutada": 15}, format="json")
        self.assertEqual(resp.status_code, 400)
        body = resp.json()
        self.assertFalse(body["ok"])
        self.assertEqual(body["error"], "QuantityExceedsRemaining")
        self.assertEqual(body["restante"], 10)

    def test_funcao_errada(self):
        self.client.force_authenticate(self.carla)
        resp = self.client.post(self.url("iniciar"))
        self.assertEqual(resp.status_code, 403)
        self.assertEqual(resp.json()["error"], "Forbidden")

    def test_servico_inexistente(self):
        self.client.force_authenticate(self.ana)
        resp = self.client.post(self.url("iniciar", servico_id=987654))
        self.assertEqual(resp.status_code, 404)
        self.assertEqual(resp.json()["error"], "NotFound")

    def test_estados_invalidos_trazem_subcodigo(self):
        self.client.force_authenticate(self.ana)

        resp = self.client.post(self.url("pausar"), {}, format="json")
        self.assertEqual(resp.status_code, 400)
        self.assertEqual(resp.json()["error"], "InvalidState")
        self.assertEqual(resp.json()["code"], "NotInProgress")

        resp = self.client.post(self.url("finalizar"), {}, format="json")
        self.assertEqual(resp.json()["code"], "ServiceNotStarted")

        self.client.post(self.url("iniciar"))
        resp = self.client.post(self.url("iniciar"))
        self.assertEqual(resp.status_code, 400)
        self.assertEqual(resp.json()["error"], "DuplicateOpenRecord")

        self.client.force_authenticate(self.bruno)
        resp = self.client.post(self.url("iniciar"))
        self.assertEqual(resp.json()["code"], "AlreadyInProgress")

    def test_quantidade_negativa_e_motivo_longo(self):
        self.client.force_authenticate(self.ana)
        self.client.post(self.url("iniciar"))

        resp = self.client.post(self.url("pausar"), {"quantidadeExecutada": -2}, format="json")
        self.assertEqual(resp.status_code, 400)
        self.assertEqual(resp.json()["error"], "ValidationError")
        self.assertIn("quantidadeExecutada", resp.json()["errors"])

        resp = self.client.post(self.url("pausar"), {"motivo": "x" * 201}, format="json")
        self.assertEqual(resp.status_code, 400)
        self.assertIn("motivo", resp.json()["errors"])

        execucao = Execucao.objects.get(servico=self.servico)
        self.assertIsNone(execucao.hora_fim)

    def test_banco_indisponivel_retorna_503(self):
        self.client.force_authenticate(self.ana)
        self.client.post(self.url("iniciar"))

        with mock.patch("pedidos.ledger.fechar_registro", side_effect=OperationalError("conexão perdida")):
            resp = self.client.post(self.url("pausar"), {"quantidadeExecutada": 2}, format="json")

        self.assertEqual(resp.status_code, 503)
        self.assertEqual(resp.json()["error"], "StorageUnavailable")
        self.assertIsNone(Execucao.objects.get(servico=self.servico).hora_fim)
        self.servico.refresh_from_db()
        self.assertEqual(self.servico.status, StatusServico.EM_EXECUCAO)
