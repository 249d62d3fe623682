from rest_framework import serializers

from ventas.models import Venta


class VentaReadSerializer(serializers.ModelSerializer):
    cod_articulo = serializers.IntegerField(source='articulo.cod_articulo', read_only=True)
    nombre_articulo = serializers.CharField(source='articulo.nombre', read_only=True)

    class Meta:
        model = Venta
        fields = ['cod_venta', 'cod_articulo', 'nombre_articulo', 'cantidad_vendida', 'fecha_venta']
        read_only_fields = fields


class VentaWriteSerializer(serializers.Serializer):
    cod_articulo = serializers.IntegerField()
    cantidad_vendida = serializers.IntegerField(min_value=1)
