import django_filters
from django.db.models import Q

from articulos.models import Articulo
from gestion_inventario.choices import ModeloInventario


class ArticuloFilter(django_filters.FilterSet):
    """Filtros para Articulo"""

    modelo_inventario = django_filters.ChoiceFilter(choices=ModeloInventario.choices)
    activo = django_filters.BooleanFilter(field_name='fecha_hora_baja', lookup_expr='isnull', label='Activo')
    stock_min = django_filters.NumberFilter(field_name='stock_actual', lookup_expr='gte')
    stock_max = django_filters.NumberFilter(field_name='stock_actual', lookup_expr='lte')

    # Búsqueda por nombre o código
    q = django_filters.CharFilter(method='filter_q', label='Búsqueda general')

    class Meta:
        model = Articulo
        fields = ['modelo_inventario', 'activo']

    def filter_q(self, queryset, name, value):
        condicion = Q(nombre__icontains=value)
        if value.isdigit():
            condicion |= Q(cod_articulo=int(value))
        return queryset.filter(condicion)
