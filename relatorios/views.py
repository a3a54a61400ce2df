# relatorios/views.py
from __future__ import annotations

from rest_framework import permissions
from rest_framework.response import Response
from rest_framework.views import APIView

from core.permissions import funcoes_do_usuario, is_admin
from .agregador import montar_relatorio
from .periodos import janela
from .serializers import RelatorioQuerySerializer
from .visibility import projetar_relatorio


class RelatorioExecucoesView(APIView):
    """
    GET /api/servicos/relatorios/?period=day|week|month|all|custom
        [&userId=<id>|all][&startDate=YYYY-MM-DD&endDate=YYYY-MM-DD]

    Admin vê todos os operadores (ou o escolhido em userId) com valores;
    operador vê somente as próprias execuções, sem valores, e o userId
    que ele mandar é ignorado.
    """
    permission_classes = [permissions.IsAuthenticated]

    def get(self, request, *args, **kwargs):
        ser = RelatorioQuerySerializer(data=request.query_params)
        ser.is_valid(raise_exception=True)
        q = ser.validated_data

        funcoes = funcoes_do_usuario(request.user)
        admin = is_admin(funcoes)
        inicio, fim = janela(q["period"], q.get("startDate"), q.get("endDate"))
        relatorio = montar_relatorio(
            request.user,
            funcoes,
            inicio=inicio,
            fim=fim,
            operador_id=ser.operador_id() if admin else None,
        )
        return Response({"period": q["period"], **projetar_relatorio(relatorio, admin)})
