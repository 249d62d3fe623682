from django.db import models
from django.db.models import Q


class ProveedorQuerySet(models.QuerySet):

    def activos(self):
        return self.filter(fecha_hora_baja__isnull=True)


class Proveedor(models.Model):
    cod_proveedor = models.AutoField(primary_key=True)
    nombre = models.CharField(max_length=200, null=False)
    direccion = models.CharField(max_length=300, null=True, blank=True)
    telefono = models.CharField(max_length=20, null=True, blank=True)
    email = models.EmailField(max_length=100, null=True, blank=True)
    # Días entre reposiciones (modelo de intervalo fijo)
    intervalo_reposicion = models.PositiveIntegerField(null=True, blank=True)
    fecha_hora_baja = models.DateTimeField(null=True, blank=True)
    fecha_creacion = models.DateTimeField(auto_now_add=True, null=False)
    fecha_modificacion = models.DateTimeField(auto_now=True, null=False)

    objects = ProveedorQuerySet.as_manager()

    def __str__(self):
        return self.nombre

    @property
    def activo(self):
        return self.fecha_hora_baja is None

    class Meta:
        db_table = 'proveedores'
        ordering = ["nombre"]


class ArticuloProveedor(models.Model):
    """Vínculo proveedor-artículo con las condiciones de compra."""
    proveedor = models.ForeignKey(
        Proveedor,
        on_delete=models.RESTRICT,
        related_name='articulos_proveedor'
    )
    articulo = models.ForeignKey(
        'articulos.Articulo',
        on_delete=models.RESTRICT,
        related_name='proveedores_articulo'
    )
    precio_unitario = models.DecimalField(max_digits=12, decimal_places=2)
    cargos_pedido = models.DecimalField(max_digits=12, decimal_places=2, default=0)
    demora_entrega_dias = models.PositiveIntegerField(default=0)
    es_predeterminado = models.BooleanField(default=False)
    fecha_creacion = models.DateTimeField(auto_now_add=True, null=False)
    fecha_modificacion = models.DateTimeField(auto_now=True, null=False)

    def __str__(self):
        return f"{self.proveedor} - {self.articulo}"

    class Meta:
        db_table = 'articulos_proveedores'
        ordering = ["articulo", "proveedor"]
        constraints = [
            models.UniqueConstraint(
                fields=['proveedor', 'articulo'],
                name='uq_proveedor_articulo'
            ),
            models.UniqueConstraint(
                fields=['articulo'],
                condition=Q(es_predeterminado=True),
                name='uq_articulo_proveedor_predeterminado'
            ),
        ]
