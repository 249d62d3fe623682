from rest_framework import mixins, viewsets, status
from rest_framework.decorators import action
from rest_framework.filters import OrderingFilter
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from rest_framework.views import APIView
from django_filters.rest_framework import DjangoFilterBackend

from auditoria.utils import auditoria_context
from core.pagination import StandardResultsSetPagination
from core.permissions import IsAdminOrReadOnly
from ordenes.filters import OrdenCompraFilter
from ordenes.models import OrdenCompra
from ordenes.serializers import OrdenReadSerializer, OrdenWriteSerializer
from ordenes.services import OrdenCompraService, listar_estados


class OrdenCompraViewSet(mixins.ListModelMixin,
                         mixins.RetrieveModelMixin,
                         viewsets.GenericViewSet):
    """
    Órdenes de compra a proveedores.

    No hay actualización genérica de estado: cada transición tiene su endpoint.
    - PUT /api/ordenes/{id}/enviar/      PENDIENTE -> ENVIADA
    - PUT /api/ordenes/{id}/finalizar/   ENVIADA -> FINALIZADA (ingresa stock)
    - DELETE /api/ordenes/{id}/cancelar/ PENDIENTE -> CANCELADA
    """
    queryset = OrdenCompra.objects.select_related('articulo', 'proveedor').prefetch_related('detalles')
    pagination_class = StandardResultsSetPagination
    permission_classes = [IsAuthenticated, IsAdminOrReadOnly]
    filter_backends = [DjangoFilterBackend, OrderingFilter]
    filterset_class = OrdenCompraFilter
    ordering_fields = ['numero_orden', 'fecha_creacion', 'monto_compra', 'estado']
    ordering = ['-numero_orden']
    service = OrdenCompraService()

    def get_serializer_class(self):
        if self.action == 'create':
            return OrdenWriteSerializer
        return OrdenReadSerializer

    def retrieve(self, request, *args, **kwargs):
        serializer = self.get_serializer(self.get_object())
        return Response({
            'success': True,
            'data': serializer.data
        }, status=status.HTTP_200_OK)

    def create(self, request, *args, **kwargs):
        """
        Crea una orden. Si el stock proyectado no supera el punto de pedido
        responde 409 con requiere_confirmacion; reenviar con confirmar=true.
        """
        serializer = self.get_serializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        datos = serializer.validated_data

        with auditoria_context(request.user, motivo=request.data.get('motivo')):
            resultado = self.service.crear_orden(
                datos['cod_articulo'],
                datos['cantidad'],
                cod_proveedor=datos.get('cod_proveedor'),
                confirmar=datos['confirmar']
            )

        return Response({
            'success': True,
            'message': f'Orden de compra {resultado.orden.numero_orden} creada exitosamente',
            'advertencias': resultado.advertencias,
            'data': OrdenReadSerializer(resultado.orden).data
        }, status=status.HTTP_201_CREATED)

    def _responder_transicion(self, request, pk, nombre, mensaje):
        motivo = request.data.get('motivo') if hasattr(request.data, 'get') else None
        with auditoria_context(request.user, motivo=motivo):
            orden = getattr(self.service, nombre)(pk)
        return Response({
            'success': True,
            'message': mensaje.format(numero=orden.numero_orden),
            'data': OrdenReadSerializer(orden).data
        }, status=status.HTTP_200_OK)

    @action(detail=True, methods=['put'], url_path='enviar')
    def enviar(self, request, pk=None):
        return self._responder_transicion(request, pk, 'enviar', 'Orden {numero} enviada al proveedor')

    @action(detail=True, methods=['put'], url_path='finalizar')
    def finalizar(self, request, pk=None):
        return self._responder_transicion(request, pk, 'finalizar', 'Orden {numero} finalizada; stock actualizado')

    @action(detail=True, methods=['delete'], url_path='cancelar')
    def cancelar(self, request, pk=None):
        return self._responder_transicion(request, pk, 'cancelar', 'Orden {numero} cancelada')

    @action(detail=False, methods=['get'], url_path=r'articulo/(?P<cod_articulo>[^/.]+)')
    def por_articulo(self, request, cod_articulo=None):
        ordenes = self.service.listar_por_articulo(cod_articulo)
        serializer = OrdenReadSerializer(ordenes, many=True)
        return Response({
            'success': True,
            'count': len(serializer.data),
            'data': serializer.data
        }, status=status.HTTP_200_OK)

    @action(detail=False, methods=['get'], url_path=r'articulo/(?P<cod_articulo>[^/.]+)/activas')
    def activas_por_articulo(self, request, cod_articulo=None):
        ordenes = self.service.listar_por_articulo(cod_articulo, solo_activas=True)
        serializer = OrdenReadSerializer(ordenes, many=True)
        return Response({
            'success': True,
            'count': len(serializer.data),
            'data': serializer.data
        }, status=status.HTTP_200_OK)

    @action(detail=False, methods=['get'], url_path='estadisticas')
    def estadisticas(self, request):
        return Response({
            'success': True,
            'data': self.service.estadisticas()
        }, status=status.HTTP_200_OK)


class EstadosOCAPIView(APIView):
    """GET /api/estados-oc/ - estados de orden de compra y sus transiciones"""
    permission_classes = [IsAuthenticated]

    def get(self, request, *args, **kwargs):
        return Response({
            'success': True,
            'data': listar_estados()
        }, status=status.HTTP_200_OK)
