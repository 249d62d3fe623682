from django.urls import path, include
from rest_framework.routers import DefaultRouter

from ordenes.views import EstadosOCAPIView, OrdenCompraViewSet

router = DefaultRouter()
router.register(r'ordenes', OrdenCompraViewSet, basename='orden')

urlpatterns = [
    path('', include(router.urls)),
    path('estados-oc/', EstadosOCAPIView.as_view(), name='estados-oc'),
]
