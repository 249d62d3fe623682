from rest_framework import viewsets
from rest_framework.decorators import action
from rest_framework.response import Response
from rest_framework.permissions import IsAuthenticated
from django_filters.rest_framework import DjangoFilterBackend
from rest_framework.filters import OrderingFilter

from auditoria.filters import HistorialEstadoOrdenFilter
from auditoria.models import HistorialEstadoOrden
from auditoria.serializers import HistorialEstadoOrdenSerializer
from auditoria.utils import obtener_historial_orden
from core.pagination import StandardResultsSetPagination


class HistorialEstadoOrdenViewSet(viewsets.ReadOnlyModelViewSet):
    """
    ViewSet de solo lectura para consultar los cambios de estado de las órdenes
    """
    queryset = HistorialEstadoOrden.objects.select_related('orden').all()
    serializer_class = HistorialEstadoOrdenSerializer
    permission_classes = [IsAuthenticated]
    pagination_class = StandardResultsSetPagination
    filter_backends = [DjangoFilterBackend, OrderingFilter]
    filterset_class = HistorialEstadoOrdenFilter
    ordering_fields = ['fecha_cambio']
    ordering = ['-fecha_cambio']

    @action(detail=False, methods=['get'], url_path='por-orden/(?P<numero_orden>[0-9]+)')
    def por_orden(self, request, numero_orden=None):
        """
        GET /api/auditoria/historial-estados/por-orden/{numero_orden}/
        Historial de una orden en orden cronológico
        """
        historial = obtener_historial_orden(numero_orden)
        serializer = self.get_serializer(historial, many=True)

        return Response({
            'numero_orden': int(numero_orden),
            'total_registros': len(serializer.data),
            'historial': serializer.data
        })
