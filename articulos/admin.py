from django.contrib import admin

from articulos.models import Articulo


@admin.register(Articulo)
class ArticuloAdmin(admin.ModelAdmin):
    list_display = ('cod_articulo', 'nombre', 'stock_actual', 'punto_pedido', 'stock_seguridad', 'modelo_inventario', 'fecha_hora_baja')
    list_filter = ('modelo_inventario', 'fecha_hora_baja')
    search_fields = ('nombre', 'descripcion')
    readonly_fields = ('cod_articulo', 'fecha_creacion', 'fecha_modificacion')
    ordering = ('cod_articulo',)

    fieldsets = (
        ('Información Básica', {
            'fields': ('cod_articulo', 'nombre', 'descripcion', 'modelo_inventario')
        }),
        ('Costos y Demanda', {
            'fields': ('demanda_anual', 'costo_almacenamiento', 'costo_pedido', 'costo_compra', 'nivel_servicio', 'desviacion_demanda')
        }),
        ('Inventario', {
            'fields': ('stock_actual', 'punto_pedido', 'lote_optimo', 'inventario_max', 'stock_seguridad', 'cgi')
        }),
        ('Baja y Fechas', {
            'fields': ('fecha_hora_baja', 'fecha_creacion', 'fecha_modificacion')
        }),
    )
