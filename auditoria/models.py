import uuid
from django.db import models

from gestion_inventario.choices import EstadoOrdenCompra


class HistorialEstadoOrden(models.Model):
    historial_id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    orden = models.ForeignKey('ordenes.OrdenCompra', on_delete=models.CASCADE, null=False, related_name='historial_estados')
    # Vacío para el registro de creación
    estado_anterior = models.CharField(max_length=12, choices=EstadoOrdenCompra.choices, null=True, blank=True)
    estado_nuevo = models.CharField(max_length=12, choices=EstadoOrdenCompra.choices, null=False)
    fecha_cambio = models.DateTimeField(auto_now_add=True, null=False)
    usuario = models.CharField(max_length=150, null=False, default='sistema')
    motivo = models.TextField(null=False, blank=True, default='')

    class Meta:
        db_table = 'historial_estados_ordenes'
        ordering = ["-fecha_cambio"]
        verbose_name = "Historial de Estado de Orden"
        verbose_name_plural = "Historial de Estados de Órdenes"

    def __str__(self):
        return f"OC-{self.orden_id}: {self.estado_anterior or '-'} -> {self.estado_nuevo} ({self.fecha_cambio})"
