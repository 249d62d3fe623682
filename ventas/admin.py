from django.contrib import admin

from ventas.models import Venta


@admin.register(Venta)
class VentaAdmin(admin.ModelAdmin):
    list_display = ('cod_venta', 'articulo', 'cantidad_vendida', 'fecha_venta')
    list_filter = ('fecha_venta',)
    search_fields = ('articulo__nombre',)
    readonly_fields = ('cod_venta', 'articulo', 'cantidad_vendida', 'fecha_venta')

    # Las ventas se registran por la API para descontar stock
    def has_add_permission(self, request):
        return False

    def has_change_permission(self, request, obj=None):
        return False

    def has_delete_permission(self, request, obj=None):
        return False
