from rest_framework import viewsets, status
from rest_framework.decorators import action
from rest_framework.filters import SearchFilter, OrderingFilter
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from rest_framework.views import APIView
from django_filters.rest_framework import DjangoFilterBackend

from core.pagination import StandardResultsSetPagination
from core.permissions import IsAdminOrReadOnly
from proveedores import services
from proveedores.filters import ProveedorFilter
from proveedores.models import Proveedor
from proveedores.serializers import (
    AsociacionArticuloSerializer,
    LinkDeArticuloSerializer,
    LinkDeProveedorSerializer,
    ProveedorCrearSerializer,
    ProveedorSerializer
)


def _crear_asociacion(cod_proveedor, data):
    serializer = AsociacionArticuloSerializer(data=data)
    serializer.is_valid(raise_exception=True)
    datos = serializer.validated_data
    link = services.crear_link(
        cod_proveedor,
        datos['cod_articulo'],
        datos['precio_unitario'],
        cargos_pedido=datos['cargos_pedido'],
        demora_entrega_dias=datos['demora_entrega_dias'],
        es_predeterminado=datos['es_predeterminado']
    )
    return Response({
        'success': True,
        'message': 'Artículo asociado al proveedor exitosamente',
        'data': LinkDeProveedorSerializer(link).data
    }, status=status.HTTP_201_CREATED)


class ProveedorViewSet(viewsets.ModelViewSet):
    """
    ViewSet para Proveedores

    - GET /api/proveedores/ - Listar
    - POST /api/proveedores/ - Crear (acepta "articulos" con las asociaciones iniciales)
    - GET/PUT/PATCH /api/proveedores/{id}/
    - DELETE /api/proveedores/{id}/ - Baja lógica
    - GET /api/proveedores/activos/
    """
    queryset = Proveedor.objects.all()
    serializer_class = ProveedorSerializer
    permission_classes = [IsAuthenticated, IsAdminOrReadOnly]
    pagination_class = StandardResultsSetPagination
    filter_backends = [DjangoFilterBackend, SearchFilter, OrderingFilter]
    filterset_class = ProveedorFilter
    search_fields = ['nombre', 'email', 'telefono']
    ordering_fields = ['cod_proveedor', 'nombre', 'fecha_creacion']
    ordering = ['nombre']

    def get_serializer_class(self):
        if self.action == 'create':
            return ProveedorCrearSerializer
        return ProveedorSerializer

    def create(self, request, *args, **kwargs):
        serializer = self.get_serializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        proveedor = serializer.save()
        return Response({
            'success': True,
            'message': 'Proveedor creado exitosamente',
            'data': ProveedorSerializer(proveedor).data
        }, status=status.HTTP_201_CREATED)

    def retrieve(self, request, *args, **kwargs):
        serializer = self.get_serializer(self.get_object())
        return Response({
            'success': True,
            'data': serializer.data
        }, status=status.HTTP_200_OK)

    def update(self, request, *args, **kwargs):
        partial = kwargs.pop('partial', False)
        serializer = self.get_serializer(self.get_object(), data=request.data, partial=partial)
        serializer.is_valid(raise_exception=True)
        serializer.save()
        return Response({
            'success': True,
            'message': 'Proveedor actualizado correctamente',
            'data': serializer.data
        }, status=status.HTTP_200_OK)

    def destroy(self, request, *args, **kwargs):
        # Soft delete: se registra la fecha de baja
        proveedor = services.dar_de_baja_proveedor(self.get_object())
        return Response({
            'success': True,
            'message': 'Proveedor dado de baja correctamente',
            'data': {
                'cod_proveedor': proveedor.cod_proveedor,
                'fecha_hora_baja': proveedor.fecha_hora_baja
            }
        }, status=status.HTTP_200_OK)

    # /api/proveedores/activos/
    @action(detail=False, methods=['get'])
    def activos(self, request):
        proveedores = self.filter_queryset(self.get_queryset().activos())
        serializer = self.get_serializer(proveedores, many=True)
        return Response({
            'success': True,
            'count': len(serializer.data),
            'data': serializer.data
        }, status=status.HTTP_200_OK)


class ProveedorArticuloViewSet(viewsets.ViewSet):
    """
    Artículos de un proveedor: /api/proveedores/{proveedor_pk}/articulos/

    - GET    - artículos que abastece el proveedor
    - POST   - asociar un artículo
    - DELETE /{articulo_id}/ - quitar la asociación
    """
    permission_classes = [IsAuthenticated, IsAdminOrReadOnly]

    def list(self, request, proveedor_pk=None):
        links = services.listar_links_proveedor(proveedor_pk)
        serializer = LinkDeProveedorSerializer(links, many=True)
        return Response({
            'success': True,
            'count': len(serializer.data),
            'data': serializer.data
        }, status=status.HTTP_200_OK)

    def create(self, request, proveedor_pk=None):
        return _crear_asociacion(proveedor_pk, request.data)

    def destroy(self, request, pk=None, proveedor_pk=None):
        services.eliminar_link(proveedor_pk, pk)
        return Response({
            'success': True,
            'message': 'Asociación eliminada correctamente'
        }, status=status.HTTP_200_OK)


class ArticuloProveedoresAPIView(APIView):
    """GET /api/articulos-proveedores/articulo/{cod_articulo}/"""
    permission_classes = [IsAuthenticated]

    def get(self, request, cod_articulo):
        links = services.listar_links_articulo(cod_articulo)
        serializer = LinkDeArticuloSerializer(links, many=True)
        return Response({
            'success': True,
            'count': len(serializer.data),
            'data': serializer.data
        }, status=status.HTTP_200_OK)


class AsociarArticuloAPIView(APIView):
    """POST /api/articulos-proveedores/{cod_proveedor}/"""
    permission_classes = [IsAuthenticated, IsAdminOrReadOnly]

    def post(self, request, cod_proveedor):
        return _crear_asociacion(cod_proveedor, request.data)


class ArticuloProveedorDetalleAPIView(APIView):
    """DELETE /api/articulos-proveedores/{cod_proveedor}/{cod_articulo}/"""
    permission_classes = [IsAuthenticated, IsAdminOrReadOnly]

    def delete(self, request, cod_proveedor, cod_articulo):
        services.eliminar_link(cod_proveedor, cod_articulo)
        return Response({
            'success': True,
            'message': 'Asociación eliminada correctamente'
        }, status=status.HTTP_200_OK)


class ProveedorPredeterminadoAPIView(APIView):
    """PUT /api/articulos-proveedores/{cod_proveedor}/{cod_articulo}/predeterminado/"""
    permission_classes = [IsAuthenticated, IsAdminOrReadOnly]

    def put(self, request, cod_proveedor, cod_articulo):
        link = services.marcar_predeterminado(cod_proveedor, cod_articulo)
        return Response({
            'success': True,
            'message': f'{link.proveedor.nombre} es ahora el proveedor predeterminado',
            'data': LinkDeArticuloSerializer(link).data
        }, status=status.HTTP_200_OK)
