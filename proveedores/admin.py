from django.contrib import admin

from proveedores.models import ArticuloProveedor, Proveedor


class ArticuloProveedorInline(admin.TabularInline):
    model = ArticuloProveedor
    extra = 0
    fields = ('articulo', 'precio_unitario', 'cargos_pedido', 'demora_entrega_dias', 'es_predeterminado')


@admin.register(Proveedor)
class ProveedorAdmin(admin.ModelAdmin):
    list_display = ('cod_proveedor', 'nombre', 'email', 'telefono', 'intervalo_reposicion', 'fecha_hora_baja')
    list_filter = ('fecha_hora_baja', 'fecha_creacion')
    search_fields = ('nombre', 'email')
    readonly_fields = ('cod_proveedor', 'fecha_creacion', 'fecha_modificacion')
    ordering = ('nombre',)
    inlines = [ArticuloProveedorInline]

    fieldsets = (
        ('Información Básica', {
            'fields': ('cod_proveedor', 'nombre', 'intervalo_reposicion')
        }),
        ('Datos de Contacto', {
            'fields': ('direccion', 'telefono', 'email')
        }),
        ('Baja y Fechas', {
            'fields': ('fecha_hora_baja', 'fecha_creacion', 'fecha_modificacion')
        }),
    )
