"""
Servicios del modelo de lectura de inventario.

La clasificación de stock y las estadísticas son funciones puras sobre la
instantánea del artículo; los valores de reposición (punto de pedido, stock de
seguridad, lote óptimo) se calculan en otro servicio y aquí solo se leen.
"""
import logging
from decimal import Decimal
from typing import Iterable

from django.conf import settings
from django.db import DatabaseError, transaction
from django.utils import timezone
from rest_framework.exceptions import NotFound, ValidationError

from articulos.models import Articulo
from core.exceptions import BusinessRuleViolationError
from core.utils import reintentar_una_vez
from gestion_inventario.choices import EstadoStock, ESTADOS_ACTIVOS

logger = logging.getLogger(__name__)


def _numero(valor):
    return valor if valor is not None else 0


def clasificar_stock(articulo) -> EstadoStock:
    """
    Clasifica el stock de un artículo.

    Los campos numéricos ausentes se toman como 0, por lo que la función es
    total: siempre devuelve exactamente una de las cuatro categorías.
    """
    stock = _numero(articulo.stock_actual)
    punto_pedido = _numero(articulo.punto_pedido)

    if stock <= 0:
        return EstadoStock.SIN_STOCK
    if stock <= punto_pedido:
        return EstadoStock.CRITICO

    if settings.INVENTARIO['CRITERIO_STOCK_BAJO'] == 'punto_pedido':
        umbral_bajo = punto_pedido * settings.INVENTARIO['FACTOR_STOCK_BAJO']
    else:
        umbral_bajo = _numero(getattr(articulo, 'stock_seguridad', None))

    if stock <= umbral_bajo:
        return EstadoStock.BAJO
    return EstadoStock.NORMAL


def alcanzo_punto_pedido(articulo) -> bool:
    return clasificar_stock(articulo) in (EstadoStock.SIN_STOCK, EstadoStock.CRITICO)


@reintentar_una_vez
def estadisticas_inventario(articulos: Iterable[Articulo]) -> dict:
    total = 0
    normal = 0
    bajo = 0
    sin_stock = 0
    valor_total = Decimal('0.00')

    for articulo in articulos:
        total += 1
        estado = clasificar_stock(articulo)
        if estado == EstadoStock.NORMAL:
            normal += 1
        elif estado == EstadoStock.SIN_STOCK:
            sin_stock += 1
        else:
            bajo += 1
        valor_total += _numero(articulo.stock_actual) * _numero(articulo.costo_compra)

    return {
        'total_articulos': total,
        'stock_normal': normal,
        'stock_bajo': bajo,
        'sin_stock': sin_stock,
        'valor_total_inventario': valor_total.quantize(Decimal('0.01')),
    }


def contar_movimientos(articulo: Articulo) -> dict:
    """
    Contadores de órdenes y ventas de un artículo.

    Es una consulta secundaria: si un contador falla se informa 0 en lugar de
    propagar el error.
    """
    contadores = {}
    consultas = {
        'ordenes': lambda: articulo.ordenes_compra.count(),
        'ordenes_activas': lambda: articulo.ordenes_compra.filter(estado__in=ESTADOS_ACTIVOS).count(),
        'ventas': lambda: articulo.ventas.count(),
    }
    for nombre, consulta in consultas.items():
        try:
            contadores[nombre] = consulta()
        except DatabaseError as exc:
            logger.warning("No se pudo contar %s del artículo %s: %s", nombre, articulo.pk, exc)
            contadores[nombre] = 0
    return contadores


@transaction.atomic
def actualizar_stock(cod_articulo, stock_actual) -> Articulo:
    if stock_actual is None or stock_actual < 0:
        raise ValidationError("El stock debe ser un número positivo")

    try:
        articulo = Articulo.objects.select_for_update().get(pk=cod_articulo)
    except (Articulo.DoesNotExist, ValueError, TypeError):
        raise NotFound(f"Artículo {cod_articulo} no encontrado")

    anterior = articulo.stock_actual
    articulo.stock_actual = stock_actual
    articulo.save(update_fields=['stock_actual', 'fecha_modificacion'])
    logger.info("Stock del artículo %s actualizado: %s -> %s", articulo.pk, anterior, stock_actual)
    return articulo


@transaction.atomic
def dar_de_baja(articulo: Articulo) -> Articulo:
    """Baja lógica: registra fecha_hora_baja; nunca elimina la fila."""
    if not articulo.activo:
        raise BusinessRuleViolationError("El artículo ya está dado de baja")

    activas = articulo.ordenes_compra.filter(estado__in=ESTADOS_ACTIVOS).count()
    if activas:
        raise BusinessRuleViolationError(
            f"No se puede dar de baja: el artículo tiene {activas} orden(es) de compra activa(s)"
        )

    articulo.fecha_hora_baja = timezone.now()
    articulo.save(update_fields=['fecha_hora_baja', 'fecha_modificacion'])
    logger.info("Artículo %s dado de baja", articulo.pk)
    return articulo
