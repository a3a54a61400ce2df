from datetime import timedelta

from django.db import IntegrityError, transaction
from django.utils import timezone

from core.exceptions import DuplicateOpenRecord, NoOpenRecord
from pedidos import ledger
from pedidos.models import Execucao, StatusServico
from .base import ProducaoTestCase


class SomaERestanteTests(ProducaoTestCase):
    def test_soma_considera_somente_registros_fechados(self):
        servico = self.novo_servico(quantidade=100)
        self.execucao(servico, self.ana, self.horas_atras(3), quantidade=30)
        self.execucao(servico, self.bruno, self.horas_atras(2), quantidade=20)
        self.execucao(servico, self.ana, self.horas_atras(1), minutos=None)

        self.assertEqual(ledger.soma_fechada(servico.pk), 50)
        self.assertEqual(ledger.restante(servico), 50)

    def test_soma_exclui_registro_informado(self):
        servico = self.novo_servico(quantidade=10)
        e1 = self.execucao(servico, self.ana, self.horas_atras(3), quantidade=6)
        self.execucao(servico, self.bruno, self.horas_atras(2), quantidade=3)

        self.assertEqual(ledger.soma_fechada(servico.pk, excluir_id=e1.pk), 3)
        self.assertEqual(ledger.restante(servico, excluir_id=e1.pk), 7)

    def test_restante_nunca_negativo(self):
        servico = self.novo_servico(quantidade=5)
        self.execucao(servico, self.ana, self.horas_atras(1), quantidade=8)
        self.assertEqual(ledger.restante(servico), 0)


class DerivarStatusTests(ProducaoTestCase):
    def test_sem_registros_pendente(self):
        servico = self.novo_servico()
        self.assertEqual(ledger.derivar_status(servico), StatusServico.PENDENTE)

    def test_registro_aberto_em_execucao(self):
        servico = self.novo_servico()
        self.execucao(servico, self.ana, self.horas_atras(1), minutos=None)
        self.assertEqual(ledger.derivar_status(servico), StatusServico.EM_EXECUCAO)

    def test_todos_fechados_abaixo_do_alvo_pausado(self):
        servico = self.novo_servico(quantidade=10)
        self.execucao(servico, self.ana, self.horas_atras(1), quantidade=4)
        self.assertEqual(ledger.derivar_status(servico), StatusServico.PAUSADO)

    def test_alvo_atingido_finalizado_mesmo_com_registro_aberto(self):
        servico = self.novo_servico(quantidade=10)
        self.execucao(servico, self.ana, self.horas_atras(2), quantidade=10)
        self.execucao(servico, self.bruno, self.horas_atras(1), minutos=None)
        self.assertEqual(ledger.derivar_status(servico), StatusServico.FINALIZADO)

    def test_recalcular_grava_somente_quando_muda(self):
        servico = self.novo_servico(quantidade=10)
        self.execucao(servico, self.ana, self.horas_atras(1), quantidade=4)

        self.assertEqual(ledger.recalcular_status(servico), StatusServico.PAUSADO)
        servico.refresh_from_db()
        self.assertEqual(servico.status, StatusServico.PAUSADO)


class AbrirFecharTests(ProducaoTestCase):
    def test_abrir_registro_duas_vezes(self):
        servico = self.novo_servico()
        ledger.abrir_registro(servico, self.ana)
        with self.assertRaises(DuplicateOpenRecord):
            ledger.abrir_registro(servico, self.ana)
        self.assertEqual(Execucao.objects.filter(servico=servico).count(), 1)

    def test_constraint_impede_dois_abertos_do_mesmo_operador(self):
        servico = self.novo_servico()
        self.execucao(servico, self.ana, self.horas_atras(1), minutos=None)

        with self.assertRaises(IntegrityError):
            with transaction.atomic():
                Execucao.objects.create(servico=servico, user=self.ana)

    def test_operadores_diferentes_podem_ter_abertos(self):
        servico = self.novo_servico()
        ledger.abrir_registro(servico, self.ana)
        ledger.abrir_registro(servico, self.bruno)
        self.assertEqual(Execucao.objects.filter(servico=servico, hora_fim__isnull=True).count(), 2)

    def test_fechar_registro_uma_unica_vez(self):
        servico = self.novo_servico()
        execucao = ledger.abrir_registro(servico, self.ana)
        ledger.fechar_registro(execucao, 5, "almoço")

        execucao.refresh_from_db()
        self.assertIsNotNone(execucao.hora_fim)
        self.assertEqual(execucao.quantidade_executada, 5)
        self.assertEqual(execucao.motivo_pausa, "almoço")

        with self.assertRaises(NoOpenRecord):
            ledger.fechar_registro(execucao, 1)

    def test_fim_nunca_anterior_ao_inicio(self):
        servico = self.novo_servico()
        execucao = ledger.abrir_registro(servico, self.ana)
        ledger.fechar_registro(execucao, 1, quando=execucao.hora_inicio - timedelta(minutes=5))

        execucao.refresh_from_db()
        self.assertGreaterEqual(execucao.hora_fim, execucao.hora_inicio)


class ListarTests(ProducaoTestCase):
    def test_filtros_e_ordem(self):
        servico = self.novo_servico()
        agora = timezone.now()
        antiga = self.execucao(servico, self.ana, agora - timedelta(days=3), quantidade=1)
        meio = self.execucao(servico, self.bruno, agora - timedelta(days=1), quantidade=1)
        recente = self.execucao(servico, self.ana, agora - timedelta(hours=1), quantidade=1)

        self.assertEqual(list(ledger.listar()), [recente, meio, antiga])
        self.assertEqual(list(ledger.listar(operador_id=self.ana.pk)), [recente, antiga])
        self.assertEqual(
            list(ledger.listar(inicio=agora - timedelta(days=2), fim=agora)),
            [recente, meio],
        )

    def test_limites_inclusivos(self):
        servico = self.novo_servico()
        marco = timezone.now() - timedelta(hours=5)
        execucao = self.execucao(servico, self.ana, marco, quantidade=1)

        self.assertEqual(list(ledger.listar(inicio=marco, fim=marco)), [execucao])
