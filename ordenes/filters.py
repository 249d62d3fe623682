import django_filters

from gestion_inventario.choices import EstadoOrdenCompra, ESTADOS_ACTIVOS
from ordenes.models import OrdenCompra


class OrdenCompraFilter(django_filters.FilterSet):
    """Filtros para OrdenCompra"""

    estado = django_filters.MultipleChoiceFilter(choices=EstadoOrdenCompra.choices)
    proveedor = django_filters.NumberFilter(field_name='proveedor_id')
    articulo = django_filters.NumberFilter(field_name='articulo_id')
    activas = django_filters.BooleanFilter(method='filter_activas', label='Solo activas')
    fecha_desde = django_filters.DateFilter(field_name='fecha_creacion', lookup_expr='date__gte')
    fecha_hasta = django_filters.DateFilter(field_name='fecha_creacion', lookup_expr='date__lte')

    class Meta:
        model = OrdenCompra
        fields = ['estado', 'proveedor', 'articulo']

    def filter_activas(self, queryset, name, value):
        if value:
            return queryset.filter(estado__in=ESTADOS_ACTIVOS)
        return queryset.exclude(estado__in=ESTADOS_ACTIVOS)
