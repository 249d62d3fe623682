import django_filters

from proveedores.models import Proveedor


class ProveedorFilter(django_filters.FilterSet):
    """Filtros para Proveedor"""

    nombre = django_filters.CharFilter(lookup_expr='icontains')
    activo = django_filters.BooleanFilter(field_name='fecha_hora_baja', lookup_expr='isnull', label='Activo')
    # Proveedores que abastecen un artículo dado
    articulo = django_filters.NumberFilter(field_name='articulos_proveedor__articulo', distinct=True)

    class Meta:
        model = Proveedor
        fields = ['nombre', 'activo', 'articulo']
