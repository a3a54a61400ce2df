# catalogo/api_views.py
from __future__ import annotations

from rest_framework import permissions
from rest_framework.response import Response
from rest_framework.views import APIView

from core.permissions import IsProducaoAdmin
from .importacao import importar_itens
from .models import ServicoCatalogo


class CatalogoListView(APIView):
    permission_classes = [permissions.IsAuthenticated, IsProducaoAdmin]

    def get(self, request, *args, **kwargs):
        itens = ServicoCatalogo.objects.order_by("nome")
        if request.query_params.get("ativos") == "1":
            itens = itens.filter(ativo=True)
        return Response([
            {
                "id": item.pk,
                "nome": item.nome,
                "funcao": item.funcao,
                "precoPadrao": item.preco_padrao,
                "ativo": item.ativo,
            }
            for item in itens
        ])


class CatalogoImportView(APIView):
    """Importação em lote (tudo-ou-nada); nomes já cadastrados são ignorados."""
    permission_classes = [permissions.IsAuthenticated, IsProducaoAdmin]

    def post(self, request, *args, **kwargs):
        total = importar_itens(request.data)
        return Response({"imported": total})
