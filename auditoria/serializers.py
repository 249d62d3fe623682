from rest_framework import serializers
from auditoria.models import HistorialEstadoOrden


class HistorialEstadoOrdenSerializer(serializers.ModelSerializer):
    """Serializer para HistorialEstadoOrden"""

    numero_orden = serializers.IntegerField(source='orden.numero_orden', read_only=True)
    cod_articulo = serializers.IntegerField(source='orden.articulo_id', read_only=True)

    class Meta:
        model = HistorialEstadoOrden
        fields = [
            'historial_id',
            'numero_orden',
            'cod_articulo',
            'estado_anterior',
            'estado_nuevo',
            'fecha_cambio',
            'usuario',
            'motivo',
        ]
        read_only_fields = fields
