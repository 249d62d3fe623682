from django.db import models

from gestion_inventario.choices import EstadoOrdenCompra, ESTADOS_ACTIVOS


class OrdenCompraQuerySet(models.QuerySet):

    def activas(self):
        return self.filter(estado__in=ESTADOS_ACTIVOS)

    def de_articulo(self, cod_articulo):
        return self.filter(articulo_id=cod_articulo)


class OrdenCompra(models.Model):
    numero_orden = models.BigAutoField(primary_key=True)
    cantidad_articulos = models.PositiveIntegerField()
    # Fijado al crear la orden; ninguna transición lo modifica
    monto_compra = models.DecimalField(max_digits=14, decimal_places=2)
    fecha_creacion = models.DateTimeField(auto_now_add=True, null=False)
    fecha_entrega_estimada = models.DateField(null=True, blank=True)
    estado = models.CharField(
        max_length=12,
        choices=EstadoOrdenCompra.choices,
        default=EstadoOrdenCompra.PENDIENTE
    )
    proveedor = models.ForeignKey(
        'proveedores.Proveedor',
        on_delete=models.RESTRICT,
        related_name='ordenes_compra'
    )
    articulo = models.ForeignKey(
        'articulos.Articulo',
        on_delete=models.RESTRICT,
        related_name='ordenes_compra'
    )
    fecha_modificacion = models.DateTimeField(auto_now=True, null=False)

    objects = OrdenCompraQuerySet.as_manager()

    def __str__(self):
        return f"OC-{self.numero_orden} ({self.estado})"

    class Meta:
        db_table = 'ordenes_compra'
        ordering = ["-numero_orden"]
        indexes = [
            models.Index(fields=['articulo', 'estado'], name='idx_orden_articulo_estado'),
        ]


class DetalleOrdenCompra(models.Model):
    num_detalle = models.PositiveIntegerField()
    orden = models.ForeignKey(
        OrdenCompra,
        on_delete=models.CASCADE,
        related_name='detalles'
    )
    # Si se elimina la asociación proveedor-artículo el detalle se conserva
    articulo_proveedor = models.ForeignKey(
        'proveedores.ArticuloProveedor',
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='detalles_orden'
    )
    articulo = models.ForeignKey(
        'articulos.Articulo',
        on_delete=models.RESTRICT,
        related_name='detalles_orden'
    )
    cantidad = models.PositiveIntegerField()
    precio_unitario = models.DecimalField(max_digits=12, decimal_places=2)
    subtotal = models.DecimalField(max_digits=14, decimal_places=2)

    def __str__(self):
        return f"OC-{self.orden_id} #{self.num_detalle}"

    class Meta:
        db_table = 'detalles_orden_compra'
        ordering = ["orden", "num_detalle"]
        constraints = [
            models.UniqueConstraint(fields=['orden', 'num_detalle'], name='uq_detalle_orden_num'),
        ]
