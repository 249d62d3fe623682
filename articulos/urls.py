"""
URLs para la API REST del módulo de Artículos
"""
from django.urls import path, include
from rest_framework.routers import DefaultRouter

from articulos.views import ArticuloViewSet

router = DefaultRouter()
router.register(r'articulos', ArticuloViewSet, basename='articulo')

urlpatterns = [
    path('', include(router.urls)),
]
