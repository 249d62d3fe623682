from django.contrib import admin

from ordenes.models import DetalleOrdenCompra, OrdenCompra


class DetalleOrdenCompraInline(admin.TabularInline):
    model = DetalleOrdenCompra
    extra = 0
    readonly_fields = ('num_detalle', 'articulo', 'articulo_proveedor', 'cantidad', 'precio_unitario', 'subtotal')
    can_delete = False


@admin.register(OrdenCompra)
class OrdenCompraAdmin(admin.ModelAdmin):
    list_display = ('numero_orden', 'articulo', 'proveedor', 'cantidad_articulos', 'monto_compra', 'estado', 'fecha_creacion')
    list_filter = ('estado', 'fecha_creacion')
    search_fields = ('articulo__nombre', 'proveedor__nombre')
    # El estado solo cambia a través de las transiciones de la API
    readonly_fields = ('numero_orden', 'estado', 'monto_compra', 'cantidad_articulos', 'fecha_creacion', 'fecha_modificacion')
    inlines = [DetalleOrdenCompraInline]
