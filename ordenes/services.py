"""
Servicios para el ciclo de vida de las órdenes de compra.

La creación aplica dos capas de validación independientes:
- advertencias (órdenes activas previas, stock proyectado bajo el punto de
  pedido) que el usuario puede confirmar;
- reglas estructurales (transiciones de estado) que nunca se pueden saltear.

Cada transición es una operación propia respaldada por la tabla TRANSICIONES.
"""
import dataclasses
import logging
from datetime import timedelta
from decimal import Decimal
from typing import Callable, Dict, List, Optional

from django.db import transaction
from django.db.models import Count, F, Sum
from django.utils import timezone
from rest_framework.exceptions import NotFound, ValidationError

from articulos.models import Articulo
from core.exceptions import IllegalTransitionError, RequiresConfirmationError
from core.utils import reintentar_una_vez
from gestion_inventario.choices import EstadoOrdenCompra, ESTADOS_TERMINALES, ModeloInventario
from ordenes.models import DetalleOrdenCompra, OrdenCompra
from proveedores.services import resolver_link
from ventas.models import Venta
from ventas.utils import valor_venta_estimado

logger = logging.getLogger(__name__)


@dataclasses.dataclass(frozen=True)
class Transicion:
    """Transición permitida entre dos estados de una orden."""
    nombre: str
    origen: str
    destino: str


TRANSICIONES: Dict[str, Transicion] = {
    'enviar': Transicion('enviar', EstadoOrdenCompra.PENDIENTE, EstadoOrdenCompra.ENVIADA),
    'finalizar': Transicion('finalizar', EstadoOrdenCompra.ENVIADA, EstadoOrdenCompra.FINALIZADA),
    'cancelar': Transicion('cancelar', EstadoOrdenCompra.PENDIENTE, EstadoOrdenCompra.CANCELADA),
}


def estados_siguientes(estado) -> List[str]:
    return [t.destino for t in TRANSICIONES.values() if t.origen == estado]


def listar_estados() -> List[dict]:
    """Vocabulario de estados con las transiciones que admite cada uno."""
    return [
        {
            'codigo': estado.value,
            'nombre': estado.label,
            'terminal': estado in ESTADOS_TERMINALES,
            'siguientes': [str(s) for s in estados_siguientes(estado)],
        }
        for estado in EstadoOrdenCompra
    ]


@dataclasses.dataclass
class ResultadoOrden:
    """Orden creada junto con las advertencias que se aceptaron al crearla."""
    orden: OrdenCompra
    advertencias: List[str] = dataclasses.field(default_factory=list)


def _validar_cantidad(cantidad) -> int:
    if isinstance(cantidad, bool) or not isinstance(cantidad, int) or cantidad <= 0:
        raise ValidationError({'cantidad': ["La cantidad debe ser un entero mayor a 0"]})
    return cantidad


class OrdenCompraService:
    """
    Servicio para gestionar la creación y las transiciones de órdenes de compra.
    """

    def crear_orden(self, cod_articulo, cantidad: int, cod_proveedor=None,
                    confirmar: bool = False) -> ResultadoOrden:
        """
        Crea una orden de compra PENDIENTE con una única línea.

        Raises:
            ValidationError: cantidad inválida o artículo dado de baja
            NotFound: el artículo no existe
            NoSupplierAssociatedError: ningún proveedor resuelve
            RequiresConfirmationError: lote fijo con stock proyectado <= punto de
                pedido y sin confirmar; no se persiste nada
        """
        cantidad = _validar_cantidad(cantidad)

        with transaction.atomic():
            # El bloqueo del artículo serializa las verificaciones por artículo
            try:
                articulo = Articulo.objects.select_for_update().get(pk=cod_articulo)
            except (Articulo.DoesNotExist, ValueError, TypeError):
                raise NotFound(f"Artículo {cod_articulo} no encontrado")

            if not articulo.activo:
                raise ValidationError("No se pueden generar órdenes para un artículo dado de baja")

            link = resolver_link(articulo, cod_proveedor)

            advertencias = []
            ordenes_activas = OrdenCompra.objects.de_articulo(articulo.pk).activas().count()
            if ordenes_activas:
                advertencias.append(f"El artículo ya tiene {ordenes_activas} orden(es) activa(s)")

            if articulo.modelo_inventario == ModeloInventario.LOTE_FIJO:
                stock_proyectado = articulo.stock_actual + cantidad
                punto_pedido = articulo.punto_pedido or 0
                if stock_proyectado <= punto_pedido:
                    if not confirmar:
                        raise RequiresConfirmationError(stock_proyectado, punto_pedido, ordenes_activas)
                    advertencias.append(
                        f"El stock resultante ({stock_proyectado}) no supera el punto de pedido ({punto_pedido})"
                    )

            precio_unitario = link.precio_unitario
            monto = (precio_unitario * cantidad).quantize(Decimal('0.01'))

            orden = OrdenCompra.objects.create(
                cantidad_articulos=cantidad,
                monto_compra=monto,
                fecha_entrega_estimada=timezone.localdate() + timedelta(days=link.demora_entrega_dias),
                estado=EstadoOrdenCompra.PENDIENTE,
                proveedor=link.proveedor,
                articulo=articulo
            )
            DetalleOrdenCompra.objects.create(
                num_detalle=1,
                orden=orden,
                articulo_proveedor=link,
                articulo=articulo,
                cantidad=cantidad,
                precio_unitario=precio_unitario,
                subtotal=monto
            )

        logger.info(
            "Orden %s creada: artículo %s, proveedor %s, cantidad %s, monto %s",
            orden.numero_orden, articulo.pk, link.proveedor_id, cantidad, monto
        )
        return ResultadoOrden(orden=orden, advertencias=advertencias)

    def enviar(self, numero_orden) -> OrdenCompra:
        return self._transicionar(numero_orden, 'enviar')

    def finalizar(self, numero_orden) -> OrdenCompra:
        """Finaliza la orden e ingresa la cantidad pedida al stock, una sola vez."""
        return self._transicionar(numero_orden, 'finalizar', efecto=self._ingresar_stock)

    def cancelar(self, numero_orden) -> OrdenCompra:
        return self._transicionar(numero_orden, 'cancelar')

    def _transicionar(self, numero_orden, nombre: str,
                      efecto: Optional[Callable[[OrdenCompra], None]] = None) -> OrdenCompra:
        transicion = TRANSICIONES[nombre]

        with transaction.atomic():
            try:
                orden = OrdenCompra.objects.select_for_update().get(pk=numero_orden)
            except (OrdenCompra.DoesNotExist, ValueError, TypeError):
                raise NotFound(f"Orden de compra {numero_orden} no encontrada")

            if orden.estado != transicion.origen:
                raise IllegalTransitionError(
                    f"No se puede {nombre} la orden {orden.numero_orden}: está {orden.estado} "
                    f"y solo puede hacerse desde {transicion.origen}"
                )

            estado_anterior = orden.estado
            orden.estado = transicion.destino
            orden.save(update_fields=['estado', 'fecha_modificacion'])

            if efecto is not None:
                efecto(orden)

        logger.info("Orden %s: %s -> %s", orden.numero_orden, estado_anterior, orden.estado)
        return orden

    def _ingresar_stock(self, orden: OrdenCompra):
        Articulo.objects.filter(pk=orden.articulo_id).update(
            stock_actual=F('stock_actual') + orden.cantidad_articulos
        )
        logger.info(
            "Stock del artículo %s incrementado en %s por la orden %s",
            orden.articulo_id, orden.cantidad_articulos, orden.numero_orden
        )

    @reintentar_una_vez
    def listar_por_articulo(self, cod_articulo, solo_activas=False):
        """Órdenes del artículo; lista vacía si el código no es un artículo válido."""
        try:
            cod_articulo = int(cod_articulo)
        except (TypeError, ValueError):
            return []
        queryset = OrdenCompra.objects.de_articulo(cod_articulo).select_related('proveedor', 'articulo')
        if solo_activas:
            queryset = queryset.activas()
        return list(queryset)

    @reintentar_una_vez
    def estadisticas(self) -> dict:
        """
        Totales de órdenes por estado y resumen de ventas.

        El valor de venta estimado aplica el margen configurado sobre el costo
        de compra de cada artículo vendido.
        """
        por_estado = {estado.value: 0 for estado in EstadoOrdenCompra}
        for fila in OrdenCompra.objects.values('estado').annotate(total=Count('numero_orden')):
            por_estado[fila['estado']] = fila['total']

        monto_compras = OrdenCompra.objects.exclude(
            estado=EstadoOrdenCompra.CANCELADA
        ).aggregate(total=Sum('monto_compra'))['total'] or Decimal('0.00')

        ventas = Venta.objects.select_related('articulo')
        unidades_vendidas = 0
        valor_ventas = Decimal('0.00')
        for venta in ventas:
            unidades_vendidas += venta.cantidad_vendida
            valor_ventas += valor_venta_estimado(venta.articulo.costo_compra) * venta.cantidad_vendida

        return {
            'total_ordenes': sum(por_estado.values()),
            'ordenes_por_estado': por_estado,
            'ordenes_activas': por_estado[EstadoOrdenCompra.PENDIENTE] + por_estado[EstadoOrdenCompra.ENVIADA],
            'monto_total_compras': monto_compras,
            'total_ventas': ventas.count(),
            'unidades_vendidas': unidades_vendidas,
            'valor_venta_estimado': valor_ventas.quantize(Decimal('0.01')),
        }
