from decimal import Decimal

from django.core.validators import MaxValueValidator, MinValueValidator
from django.db import models

from gestion_inventario.choices import ModeloInventario


class ArticuloQuerySet(models.QuerySet):

    def activos(self):
        return self.filter(fecha_hora_baja__isnull=True)


class Articulo(models.Model):
    cod_articulo = models.AutoField(primary_key=True)
    nombre = models.CharField(max_length=150, null=False)
    descripcion = models.CharField(max_length=300, null=True, blank=True)
    demanda_anual = models.PositiveIntegerField(default=0)
    costo_almacenamiento = models.DecimalField(max_digits=12, decimal_places=2, default=0)
    costo_pedido = models.DecimalField(max_digits=12, decimal_places=2, default=0)
    costo_compra = models.DecimalField(max_digits=12, decimal_places=2, default=0)
    stock_actual = models.PositiveIntegerField(default=0)

    # Calculados por el servicio de inventario; se guardan tal cual llegan
    punto_pedido = models.IntegerField(null=True, blank=True)
    lote_optimo = models.IntegerField(null=True, blank=True)
    inventario_max = models.IntegerField(null=True, blank=True)
    stock_seguridad = models.IntegerField(null=True, blank=True)
    cgi = models.DecimalField(max_digits=14, decimal_places=2, null=True, blank=True)

    modelo_inventario = models.CharField(max_length=15, choices=ModeloInventario.choices, default=ModeloInventario.LOTE_FIJO)
    nivel_servicio = models.DecimalField(
        max_digits=4, decimal_places=3, default=Decimal('0.95'),
        validators=[MinValueValidator(0), MaxValueValidator(1)]
    )
    desviacion_demanda = models.DecimalField(
        max_digits=12, decimal_places=2, default=0,
        validators=[MinValueValidator(0)]
    )
    fecha_hora_baja = models.DateTimeField(null=True, blank=True)
    fecha_creacion = models.DateTimeField(auto_now_add=True, null=False)
    fecha_modificacion = models.DateTimeField(auto_now=True, null=False)

    objects = ArticuloQuerySet.as_manager()

    def __str__(self):
        return self.nombre

    @property
    def activo(self):
        return self.fecha_hora_baja is None

    @property
    def proveedor_predeterminado(self):
        """Proveedor activo del vínculo marcado como predeterminado, o None."""
        link = (
            self.proveedores_articulo
            .select_related('proveedor')
            .filter(es_predeterminado=True, proveedor__fecha_hora_baja__isnull=True)
            .first()
        )
        return link.proveedor if link else None

    class Meta:
        db_table = 'articulos'
        ordering = ["cod_articulo"]
