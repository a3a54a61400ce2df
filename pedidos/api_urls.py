# pedidos/api_urls.py
from django.urls import path
from . import api_views

app_name = "api_pedidos"

urlpatterns = [
    path("", api_views.PedidoListCreateView.as_view(), name="list_create"),
    path("numero/<str:numero_pedido>/", api_views.PedidoPorNumeroView.as_view(), name="por_numero"),
    path("<int:pedido_id>/", api_views.PedidoDeleteView.as_view(), name="delete"),
    path("<int:pedido_id>/servicos/", api_views.PedidoServicosView.as_view(), name="servicos"),
    path("<int:pedido_id>/servicos/<int:servico_id>/", api_views.PedidoServicoDetailView.as_view(), name="servico_detalhe"),
]
