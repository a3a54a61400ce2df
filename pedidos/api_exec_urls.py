# pedidos/api_exec_urls.py
from django.urls import path
from . import api_views

app_name = "api_execucao"

urlpatterns = [
    path("<int:servico_id>/iniciar/", api_views.IniciarServicoView.as_view(), name="iniciar"),
    path("<int:servico_id>/pausar/", api_views.PausarServicoView.as_view(), name="pausar"),
    path("<int:servico_id>/finalizar/", api_views.FinalizarServicoView.as_view(), name="finalizar"),
]
