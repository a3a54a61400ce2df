# relatorios/urls.py
from django.urls import path
from . import views

app_name = "relatorios"

urlpatterns = [
    path("", views.RelatorioExecucoesView.as_view(), name="execucoes"),
]
