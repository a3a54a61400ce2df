# catalogo/api_urls.py
from django.urls import path
from . import api_views

app_name = "api_catalogo"

urlpatterns = [
    path("", api_views.CatalogoListView.as_view(), name="lista"),
    path("import/", api_views.CatalogoImportView.as_view(), name="import"),
]
