"""
Vistas API REST para el módulo de Artículos
"""
from rest_framework import viewsets, status
from rest_framework.decorators import action
from rest_framework.response import Response
from rest_framework.permissions import IsAuthenticated
from django_filters.rest_framework import DjangoFilterBackend
from rest_framework.filters import SearchFilter, OrderingFilter

from articulos.filters import ArticuloFilter
from articulos.models import Articulo
from articulos.serializers import (
    ArticuloSerializer,
    ArticuloListSerializer,
    ActualizarStockSerializer
)
from articulos import services
from core.pagination import StandardResultsSetPagination
from core.permissions import IsAdminOrReadOnly
from proveedores.serializers import LinkDeArticuloSerializer
from proveedores.services import listar_links_articulo


class ArticuloViewSet(viewsets.ModelViewSet):
    """
    ViewSet para Artículos

    Endpoints:
    - GET /api/articulos/ - Listar artículos
    - POST /api/articulos/ - Crear artículo
    - GET /api/articulos/{id}/ - Obtener detalle
    - PUT/PATCH /api/articulos/{id}/ - Actualizar artículo
    - DELETE /api/articulos/{id}/ - Baja lógica (fecha_hora_baja)
    - PUT /api/articulos/{id}/stock/ - Actualizar stock
    - GET /api/articulos/{id}/proveedores/ - Proveedores asociados
    - GET /api/articulos/{id}/contadores/ - Cantidad de órdenes y ventas
    - GET /api/articulos/estadisticas/ - Resumen del inventario

    Filtros:
    - ?modelo_inventario=LOTEFIJO
    - ?activo=true
    - ?q=tornillo (busca por nombre o código)
    """
    queryset = Articulo.objects.all()
    serializer_class = ArticuloSerializer
    permission_classes = [IsAuthenticated, IsAdminOrReadOnly]
    pagination_class = StandardResultsSetPagination
    filter_backends = [DjangoFilterBackend, SearchFilter, OrderingFilter]
    filterset_class = ArticuloFilter
    search_fields = ['nombre', 'descripcion']
    ordering_fields = ['cod_articulo', 'nombre', 'stock_actual', 'costo_compra', 'fecha_creacion']
    ordering = ['cod_articulo']

    def get_serializer_class(self):
        if self.action in ['list', 'activos']:
            return ArticuloListSerializer
        if self.action == 'stock':
            return ActualizarStockSerializer
        return ArticuloSerializer

    def create(self, request, *args, **kwargs):
        """Crear nuevo artículo"""
        serializer = self.get_serializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        serializer.save()
        return Response({
            'success': True,
            'message': 'Artículo creado exitosamente',
            'data': serializer.data
        }, status=status.HTTP_201_CREATED)

    def retrieve(self, request, *args, **kwargs):
        """Obtener detalle de un artículo"""
        instance = self.get_object()
        serializer = self.get_serializer(instance)
        return Response({
            'success': True,
            'data': serializer.data
        }, status=status.HTTP_200_OK)

    def update(self, request, *args, **kwargs):
        """Actualizar artículo"""
        partial = kwargs.pop('partial', False)
        instance = self.get_object()
        serializer = self.get_serializer(instance, data=request.data, partial=partial)
        serializer.is_valid(raise_exception=True)
        serializer.save()
        return Response({
            'success': True,
            'message': 'Artículo actualizado exitosamente',
            'data': serializer.data
        }, status=status.HTTP_200_OK)

    def destroy(self, request, *args, **kwargs):
        """
        Baja lógica: registra la fecha de baja en lugar de eliminar
        """
        instance = services.dar_de_baja(self.get_object())
        return Response({
            'success': True,
            'message': 'Artículo dado de baja exitosamente',
            'data': {
                'cod_articulo': instance.cod_articulo,
                'nombre': instance.nombre,
                'fecha_hora_baja': instance.fecha_hora_baja
            }
        }, status=status.HTTP_200_OK)

    @action(detail=False, methods=['get'], url_path='activos')
    def activos(self, request):
        """Listar solo artículos activos"""
        articulos = self.filter_queryset(self.get_queryset().activos())
        serializer = self.get_serializer(articulos, many=True)
        return Response({
            'success': True,
            'count': len(serializer.data),
            'data': serializer.data
        }, status=status.HTTP_200_OK)

    @action(detail=False, methods=['get'], url_path='estadisticas')
    def estadisticas(self, request):
        """Totales por estado de stock y valor del inventario activo"""
        resumen = services.estadisticas_inventario(self.get_queryset().activos())
        return Response({
            'success': True,
            'data': resumen
        }, status=status.HTTP_200_OK)

    @action(detail=True, methods=['put'], url_path='stock')
    def stock(self, request, pk=None):
        """PUT /api/articulos/{id}/stock/ con {"stock_actual": n}"""
        serializer = self.get_serializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        articulo = services.actualizar_stock(pk, serializer.validated_data['stock_actual'])
        return Response({
            'success': True,
            'message': 'Stock actualizado correctamente',
            'data': ArticuloSerializer(articulo).data
        }, status=status.HTTP_200_OK)

    @action(detail=True, methods=['get'], url_path='proveedores')
    def proveedores(self, request, pk=None):
        """Proveedores que pueden abastecer el artículo, con precio y demora"""
        links = listar_links_articulo(pk)
        serializer = LinkDeArticuloSerializer(links, many=True)
        return Response({
            'success': True,
            'count': len(serializer.data),
            'data': serializer.data
        }, status=status.HTTP_200_OK)

    @action(detail=True, methods=['get'], url_path='contadores')
    def contadores(self, request, pk=None):
        articulo = self.get_object()
        return Response({
            'success': True,
            'cod_articulo': articulo.cod_articulo,
            'data': services.contar_movimientos(articulo)
        }, status=status.HTTP_200_OK)
