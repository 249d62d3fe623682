"""
Serializadores para el módulo de Artículos
"""
from rest_framework import serializers

from articulos.models import Articulo
from articulos.services import clasificar_stock


class ArticuloSerializer(serializers.ModelSerializer):
    """
    Serializador para Articulo.
    Expone la clasificación de stock y el proveedor predeterminado (o null).
    """
    estado_stock = serializers.SerializerMethodField()
    activo = serializers.BooleanField(read_only=True)
    proveedor_predeterminado = serializers.SerializerMethodField()

    class Meta:
        model = Articulo
        fields = [
            'cod_articulo',
            'nombre',
            'descripcion',
            'demanda_anual',
            'costo_almacenamiento',
            'costo_pedido',
            'costo_compra',
            'stock_actual',
            'punto_pedido',
            'lote_optimo',
            'inventario_max',
            'stock_seguridad',
            'cgi',
            'modelo_inventario',
            'nivel_servicio',
            'desviacion_demanda',
            'estado_stock',
            'activo',
            'proveedor_predeterminado',
            'fecha_hora_baja',
            'fecha_creacion',
            'fecha_modificacion'
        ]
        read_only_fields = ['cod_articulo', 'fecha_hora_baja', 'fecha_creacion', 'fecha_modificacion']

    def get_estado_stock(self, obj):
        return clasificar_stock(obj).value

    def get_proveedor_predeterminado(self, obj):
        proveedor = obj.proveedor_predeterminado
        if proveedor is None:
            return None
        return {
            'cod_proveedor': proveedor.cod_proveedor,
            'nombre': proveedor.nombre,
        }

    def validate_stock_actual(self, value):
        if value < 0:
            raise serializers.ValidationError("El stock debe ser un número positivo")
        return value


class ArticuloListSerializer(serializers.ModelSerializer):
    """
    Serializador simplificado para listar artículos
    """
    estado_stock = serializers.SerializerMethodField()

    class Meta:
        model = Articulo
        fields = [
            'cod_articulo',
            'nombre',
            'stock_actual',
            'punto_pedido',
            'lote_optimo',
            'stock_seguridad',
            'costo_compra',
            'modelo_inventario',
            'estado_stock',
            'fecha_hora_baja'
        ]

    def get_estado_stock(self, obj):
        return clasificar_stock(obj).value


class ActualizarStockSerializer(serializers.Serializer):
    stock_actual = serializers.IntegerField(min_value=0)
