from rest_framework import serializers

from proveedores.models import ArticuloProveedor, Proveedor
from proveedores.services import crear_proveedor_con_articulos


class ProveedorSerializer(serializers.ModelSerializer):
    """
    Serializer para el modelo Proveedor.
    Convierte el modelo a JSON y valida los datos recibidos.
    """
    activo = serializers.BooleanField(read_only=True)
    cantidad_articulos = serializers.SerializerMethodField()

    class Meta:
        model = Proveedor
        fields = [
            'cod_proveedor',
            'nombre',
            'direccion',
            'telefono',
            'email',
            'intervalo_reposicion',
            'activo',
            'cantidad_articulos',
            'fecha_hora_baja',
            'fecha_creacion',
            'fecha_modificacion'
        ]
        read_only_fields = ('cod_proveedor', 'fecha_hora_baja', 'fecha_creacion', 'fecha_modificacion')

    def get_cantidad_articulos(self, obj):
        return obj.articulos_proveedor.count()

    def validate_nombre(self, value):
        if not value or not value.strip():
            raise serializers.ValidationError("El nombre es obligatorio")
        return value.strip()

    def validate_email(self, value):
        if value:
            value = value.lower()
        return value

    def to_representation(self, instance):
        """
        Formatea las fechas en un formato más legible
        """
        representation = super().to_representation(instance)

        if instance.fecha_creacion:
            representation['fecha_creacion'] = instance.fecha_creacion.strftime('%Y-%m-%d %H:%M:%S')

        if instance.fecha_modificacion:
            representation['fecha_modificacion'] = instance.fecha_modificacion.strftime('%Y-%m-%d %H:%M:%S')

        return representation


class AsociacionArticuloSerializer(serializers.Serializer):
    """
    Datos para asociar un artículo a un proveedor.
    El precio se valida en el servicio (InvalidPrice).
    """
    cod_articulo = serializers.IntegerField()
    precio_unitario = serializers.DecimalField(max_digits=12, decimal_places=2)
    cargos_pedido = serializers.DecimalField(max_digits=12, decimal_places=2, min_value=0, default=0)
    demora_entrega_dias = serializers.IntegerField(min_value=0, default=0)
    es_predeterminado = serializers.BooleanField(default=False)


class ProveedorCrearSerializer(ProveedorSerializer):
    """Alta de proveedor con sus artículos iniciales (todo o nada)"""
    articulos = AsociacionArticuloSerializer(many=True, required=False, write_only=True)

    class Meta(ProveedorSerializer.Meta):
        fields = ProveedorSerializer.Meta.fields + ['articulos']

    def create(self, validated_data):
        articulos = validated_data.pop('articulos', [])
        return crear_proveedor_con_articulos(validated_data, articulos)


class LinkDeArticuloSerializer(serializers.ModelSerializer):
    """Proveedor que abastece un artículo, con sus condiciones"""
    cod_proveedor = serializers.IntegerField(source='proveedor.cod_proveedor', read_only=True)
    nombre_proveedor = serializers.CharField(source='proveedor.nombre', read_only=True)

    class Meta:
        model = ArticuloProveedor
        fields = [
            'cod_proveedor',
            'nombre_proveedor',
            'precio_unitario',
            'cargos_pedido',
            'demora_entrega_dias',
            'es_predeterminado'
        ]


class LinkDeProveedorSerializer(serializers.ModelSerializer):
    cod_articulo = serializers.IntegerField(source='articulo.cod_articulo', read_only=True)
    nombre_articulo = serializers.CharField(source='articulo.nombre', read_only=True)
    stock_actual = serializers.IntegerField(source='articulo.stock_actual', read_only=True)

    class Meta:
        model = ArticuloProveedor
        fields = [
            'cod_articulo',
            'nombre_articulo',
            'stock_actual',
            'precio_unitario',
            'cargos_pedido',
            'demora_entrega_dias',
            'es_predeterminado'
        ]
