"""
Servicios para la lógica de negocio de Ventas.

Registrar una venta crea el registro y descuenta el stock del artículo en la
misma transacción, con la fila del artículo bloqueada.
"""
import dataclasses
import logging

from django.db import transaction
from rest_framework.exceptions import NotFound, ValidationError

from articulos.models import Articulo
from articulos.services import alcanzo_punto_pedido, clasificar_stock
from core.exceptions import InsufficientStockError
from core.utils import reintentar_una_vez
from gestion_inventario.choices import EstadoStock
from ventas.models import Venta

logger = logging.getLogger(__name__)


@dataclasses.dataclass
class VentaRegistrada:
    """Venta creada y el estado del artículo luego del descuento."""
    venta: Venta
    stock_actual: int
    estado_stock: EstadoStock
    requiere_reposicion: bool


class VentaService:
    """
    Servicio para gestionar la lógica de negocio de ventas.
    """

    def registrar_venta(self, cod_articulo, cantidad_vendida: int) -> VentaRegistrada:
        """
        Registra una venta y descuenta el stock.

        Raises:
            ValidationError: cantidad no positiva o artículo dado de baja
            NotFound: el artículo no existe
            InsufficientStockError: la cantidad supera el stock disponible
        """
        if isinstance(cantidad_vendida, bool) or not isinstance(cantidad_vendida, int) or cantidad_vendida <= 0:
            raise ValidationError({'cantidad_vendida': ["La cantidad vendida debe ser mayor a 0"]})

        with transaction.atomic():
            try:
                articulo = Articulo.objects.select_for_update().get(pk=cod_articulo)
            except (Articulo.DoesNotExist, ValueError, TypeError):
                raise NotFound(f"Artículo {cod_articulo} no encontrado")

            if not articulo.activo:
                raise ValidationError("No se pueden registrar ventas de un artículo dado de baja")

            if cantidad_vendida > articulo.stock_actual:
                raise InsufficientStockError(
                    f"Stock insuficiente para {articulo.nombre}. "
                    f"Disponible: {articulo.stock_actual}, solicitado: {cantidad_vendida}"
                )

            venta = Venta.objects.create(articulo=articulo, cantidad_vendida=cantidad_vendida)
            articulo.stock_actual -= cantidad_vendida
            articulo.save(update_fields=['stock_actual', 'fecha_modificacion'])

        estado = clasificar_stock(articulo)
        requiere_reposicion = alcanzo_punto_pedido(articulo)
        logger.info(
            "Venta %s registrada: artículo %s, cantidad %s, stock restante %s (%s)",
            venta.cod_venta, articulo.pk, cantidad_vendida, articulo.stock_actual, estado.value
        )
        if requiere_reposicion:
            logger.info("El artículo %s alcanzó su punto de pedido", articulo.pk)

        return VentaRegistrada(
            venta=venta,
            stock_actual=articulo.stock_actual,
            estado_stock=estado,
            requiere_reposicion=requiere_reposicion
        )

    @reintentar_una_vez
    def listar_por_articulo(self, cod_articulo):
        """Ventas del artículo; lista vacía si no existe o no tiene ventas."""
        try:
            return list(Venta.objects.filter(articulo_id=int(cod_articulo)).select_related('articulo'))
        except (TypeError, ValueError):
            return []
