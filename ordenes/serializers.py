from rest_framework import serializers

from ordenes.models import DetalleOrdenCompra, OrdenCompra
from ordenes.services import estados_siguientes


class DetalleOrdenReadSerializer(serializers.ModelSerializer):
    cod_proveedor = serializers.IntegerField(source='articulo_proveedor.proveedor_id', read_only=True, default=None)

    class Meta:
        model = DetalleOrdenCompra
        fields = ['num_detalle', 'articulo', 'cod_proveedor', 'cantidad', 'precio_unitario', 'subtotal']


class OrdenReadSerializer(serializers.ModelSerializer):
    """Representación completa de una orden de compra con sus líneas"""
    cod_articulo = serializers.IntegerField(source='articulo.cod_articulo', read_only=True)
    nombre_articulo = serializers.CharField(source='articulo.nombre', read_only=True)
    cod_proveedor = serializers.IntegerField(source='proveedor.cod_proveedor', read_only=True)
    nombre_proveedor = serializers.CharField(source='proveedor.nombre', read_only=True)
    estado_display = serializers.CharField(source='get_estado_display', read_only=True)
    estados_siguientes = serializers.SerializerMethodField()
    detalles = DetalleOrdenReadSerializer(many=True, read_only=True)

    class Meta:
        model = OrdenCompra
        fields = [
            'numero_orden',
            'cod_articulo',
            'nombre_articulo',
            'cod_proveedor',
            'nombre_proveedor',
            'cantidad_articulos',
            'monto_compra',
            'estado',
            'estado_display',
            'estados_siguientes',
            'fecha_creacion',
            'fecha_entrega_estimada',
            'fecha_modificacion',
            'detalles'
        ]
        read_only_fields = fields

    def get_estados_siguientes(self, obj):
        return [str(estado) for estado in estados_siguientes(obj.estado)]


class OrdenWriteSerializer(serializers.Serializer):
    """
    Datos para crear una orden. Si no se indica proveedor se usa el
    predeterminado del artículo o su único proveedor.
    """
    cod_articulo = serializers.IntegerField()
    cantidad = serializers.IntegerField(min_value=1)
    cod_proveedor = serializers.IntegerField(required=False, allow_null=True)
    confirmar = serializers.BooleanField(default=False)
