from django.db import models


class ModeloInventario(models.TextChoices):
    LOTE_FIJO = 'LOTEFIJO', "Lote fijo"
    INTERVALO_FIJO = 'INTERVALOFIJO', "Intervalo fijo"


class EstadoOrdenCompra(models.TextChoices):
    PENDIENTE = 'PENDIENTE', "Pendiente"
    ENVIADA = 'ENVIADA', "Enviada"
    FINALIZADA = 'FINALIZADA', "Finalizada"
    CANCELADA = 'CANCELADA', "Cancelada"


class EstadoStock(models.TextChoices):
    SIN_STOCK = 'sin-stock', "Sin Stock"
    CRITICO = 'critico', "Stock Crítico"
    BAJO = 'bajo', "Stock Bajo"
    NORMAL = 'normal', "Stock Normal"


# Estados en los que una orden sigue en curso
ESTADOS_ACTIVOS = (EstadoOrdenCompra.PENDIENTE, EstadoOrdenCompra.ENVIADA)

ESTADOS_TERMINALES = (EstadoOrdenCompra.FINALIZADA, EstadoOrdenCompra.CANCELADA)
