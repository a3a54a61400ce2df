# core/urls.py
from django.contrib import admin
from django.urls import include, path

urlpatterns = [
    path("admin/", admin.site.urls),

    # -------- API --------
    path("api/pedidos/", include(("pedidos.api_urls", "api_pedidos"))),
    # relatórios antes de <int:servico_id>/ para não colidir
    path("api/servicos/relatorios/", include(("relatorios.urls", "relatorios"))),
    path("api/servicos/", include(("pedidos.api_exec_urls", "api_execucao"))),
    path("api/catalogo/", include(("catalogo.api_urls", "api_catalogo"))),
]
