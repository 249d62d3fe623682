from django.urls import path, include
from rest_framework.routers import DefaultRouter

from auditoria.views import HistorialEstadoOrdenViewSet

router = DefaultRouter()
router.register(r'historial-estados', HistorialEstadoOrdenViewSet, basename='historial-estado')

urlpatterns = [
    path('', include(router.urls)),
]
