from django.core.validators import MinValueValidator
from django.db import models


class Venta(models.Model):
    cod_venta = models.AutoField(primary_key=True)
    cantidad_vendida = models.PositiveIntegerField(validators=[MinValueValidator(1)])
    fecha_venta = models.DateTimeField(auto_now_add=True, null=False)
    articulo = models.ForeignKey(
        'articulos.Articulo',
        on_delete=models.RESTRICT,
        related_name='ventas'
    )

    def __str__(self):
        return f"Venta {self.cod_venta} - {self.cantidad_vendida} x {self.articulo_id}"

    class Meta:
        db_table = 'ventas'
        ordering = ['-fecha_venta', '-cod_venta']
