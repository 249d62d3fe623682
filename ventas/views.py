from rest_framework import viewsets, status
from rest_framework.decorators import action
from rest_framework.filters import OrderingFilter
from rest_framework.response import Response
from django_filters.rest_framework import DjangoFilterBackend

from core.pagination import StandardResultsSetPagination
from ventas.models import Venta
from ventas.permissions import PuedeRegistrarVentas
from ventas.serializers import VentaReadSerializer, VentaWriteSerializer
from ventas.services import VentaService
from ventas.utils import formatear_precio, valor_venta_estimado


class VentaViewSet(viewsets.ReadOnlyModelViewSet):
    """
    Ventas registradas. Son inmutables: no hay edición ni borrado.

    - GET /api/ventas/
    - GET /api/ventas/articulo/{id}/ (lista vacía si no hay ventas)
    - POST /api/ventas/ventas/ con {"cod_articulo", "cantidad_vendida"}
    """
    queryset = Venta.objects.select_related('articulo')
    serializer_class = VentaReadSerializer
    pagination_class = StandardResultsSetPagination
    permission_classes = [PuedeRegistrarVentas]
    filter_backends = [DjangoFilterBackend, OrderingFilter]
    filterset_fields = ['articulo']
    ordering_fields = ['fecha_venta', 'cantidad_vendida']
    ordering = ['-fecha_venta', '-cod_venta']
    service = VentaService()

    @action(detail=False, methods=['get'], url_path=r'articulo/(?P<cod_articulo>[^/.]+)')
    def por_articulo(self, request, cod_articulo=None):
        ventas = self.service.listar_por_articulo(cod_articulo)
        serializer = VentaReadSerializer(ventas, many=True)
        return Response({
            'success': True,
            'count': len(serializer.data),
            'data': serializer.data
        }, status=status.HTTP_200_OK)

    @action(detail=False, methods=['post'], url_path='ventas')
    def registrar(self, request):
        serializer = VentaWriteSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        resultado = self.service.registrar_venta(
            serializer.validated_data['cod_articulo'],
            serializer.validated_data['cantidad_vendida']
        )
        venta = resultado.venta
        importe = valor_venta_estimado(venta.articulo.costo_compra) * venta.cantidad_vendida

        return Response({
            'success': True,
            'message': (
                f"Venta registrada: {venta.cantidad_vendida} x {venta.articulo.nombre} "
                f"(valor estimado {formatear_precio(importe)})"
            ),
            'data': {
                **VentaReadSerializer(venta).data,
                'stock_actual': resultado.stock_actual,
                'estado_stock': resultado.estado_stock.value,
                'requiere_reposicion': resultado.requiere_reposicion,
            }
        }, status=status.HTTP_201_CREATED)
