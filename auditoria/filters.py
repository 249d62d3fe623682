import django_filters

from auditoria.models import HistorialEstadoOrden
from gestion_inventario.choices import EstadoOrdenCompra


class HistorialEstadoOrdenFilter(django_filters.FilterSet):
    """Filtros para HistorialEstadoOrden"""

    estado_nuevo = django_filters.ChoiceFilter(choices=EstadoOrdenCompra.choices)
    usuario = django_filters.CharFilter(lookup_expr='iexact')
    articulo_id = django_filters.NumberFilter(field_name='orden__articulo_id')
    fecha_desde = django_filters.DateFilter(field_name='fecha_cambio', lookup_expr='date__gte')
    fecha_hasta = django_filters.DateFilter(field_name='fecha_cambio', lookup_expr='date__lte')

    class Meta:
        model = HistorialEstadoOrden
        fields = ['estado_nuevo', 'usuario', 'articulo_id']
