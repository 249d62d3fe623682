from django.contrib import admin
from auditoria.models import HistorialEstadoOrden


@admin.register(HistorialEstadoOrden)
class HistorialEstadoOrdenAdmin(admin.ModelAdmin):
    list_display = (
        'orden',
        'estado_anterior',
        'estado_nuevo',
        'usuario',
        'fecha_cambio',
    )
    list_filter = ('estado_nuevo', 'fecha_cambio')
    search_fields = ('usuario', 'motivo')
    readonly_fields = ('historial_id', 'orden', 'estado_anterior', 'estado_nuevo', 'usuario', 'motivo', 'fecha_cambio')
    date_hierarchy = 'fecha_cambio'
    ordering = ('-fecha_cambio',)
