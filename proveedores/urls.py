from django.urls import path, include
from rest_framework.routers import DefaultRouter
from rest_framework_nested import routers

from proveedores.views import (
    ArticuloProveedorDetalleAPIView,
    ArticuloProveedoresAPIView,
    AsociarArticuloAPIView,
    ProveedorArticuloViewSet,
    ProveedorPredeterminadoAPIView,
    ProveedorViewSet
)

router = DefaultRouter()
router.register(r'proveedores', ProveedorViewSet, basename='proveedor')

# Router anidado: /api/proveedores/{proveedor_pk}/articulos/
proveedores_router = routers.NestedDefaultRouter(router, r'proveedores', lookup='proveedor')
proveedores_router.register(r'articulos', ProveedorArticuloViewSet, basename='proveedor-articulos')

urlpatterns = [
    path('', include(router.urls)),
    path('', include(proveedores_router.urls)),
    path(
        'articulos-proveedores/articulo/<int:cod_articulo>/',
        ArticuloProveedoresAPIView.as_view(),
        name='links-articulo'
    ),
    path(
        'articulos-proveedores/<int:cod_proveedor>/',
        AsociarArticuloAPIView.as_view(),
        name='asociar-articulo'
    ),
    path(
        'articulos-proveedores/<int:cod_proveedor>/<int:cod_articulo>/',
        ArticuloProveedorDetalleAPIView.as_view(),
        name='articulo-proveedor-detalle'
    ),
    path(
        'articulos-proveedores/<int:cod_proveedor>/<int:cod_articulo>/predeterminado/',
        ProveedorPredeterminadoAPIView.as_view(),
        name='articulo-proveedor-predeterminado'
    ),
]
