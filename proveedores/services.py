"""
Servicios de proveedores y vínculos proveedor-artículo.

Un artículo puede tener varios proveedores, pero a lo sumo uno predeterminado.
La resolución del proveedor efectivo para una orden vive en `resolver_link`.
"""
import logging
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation

from django.db import IntegrityError, transaction
from django.utils import timezone
from rest_framework.exceptions import NotFound, ValidationError

from articulos.models import Articulo
from core.exceptions import (
    BusinessRuleViolationError,
    DuplicateAssociationError,
    InvalidPriceError,
    NoSupplierAssociatedError
)
from core.utils import reintentar_una_vez
from gestion_inventario.choices import ESTADOS_ACTIVOS
from proveedores.models import ArticuloProveedor, Proveedor

logger = logging.getLogger(__name__)


def _decimal(valor, campo):
    """Convierte a Decimal redondeado a centavos, como se guarda en la base."""
    try:
        return Decimal(str(valor)).quantize(Decimal('0.01'), rounding=ROUND_HALF_UP)
    except (InvalidOperation, TypeError, ValueError):
        raise ValidationError({campo: ["Debe ser un número válido"]})


def _dias(valor, campo):
    try:
        numero = Decimal(str(valor))
    except (InvalidOperation, TypeError, ValueError):
        raise ValidationError({campo: ["Debe ser un número entero de días"]})
    if not numero.is_finite() or numero != numero.to_integral_value():
        raise ValidationError({campo: ["Debe ser un número entero de días"]})
    return int(numero)


def obtener_proveedor(cod_proveedor, solo_activos=True) -> Proveedor:
    queryset = Proveedor.objects.activos() if solo_activos else Proveedor.objects.all()
    try:
        return queryset.get(pk=cod_proveedor)
    except (Proveedor.DoesNotExist, ValueError, TypeError):
        raise NotFound(f"Proveedor {cod_proveedor} no encontrado")


@reintentar_una_vez
def listar_links_articulo(cod_articulo):
    """
    Proveedores activos que abastecen al artículo.

    Un artículo inexistente o sin proveedores devuelve una lista vacía.
    """
    return list(
        ArticuloProveedor.objects
        .select_related('proveedor')
        .filter(articulo_id=cod_articulo, proveedor__fecha_hora_baja__isnull=True)
        .order_by('-es_predeterminado', 'precio_unitario')
    )


@reintentar_una_vez
def listar_links_proveedor(cod_proveedor):
    proveedor = obtener_proveedor(cod_proveedor, solo_activos=False)
    return list(
        proveedor.articulos_proveedor
        .select_related('articulo')
        .order_by('articulo__nombre')
    )


def crear_link(cod_proveedor, cod_articulo, precio_unitario, cargos_pedido=0,
               demora_entrega_dias=0, es_predeterminado=False) -> ArticuloProveedor:
    """
    Asocia un proveedor a un artículo.

    Raises:
        InvalidPriceError: si el precio unitario no es mayor a 0
        ValidationError: si los cargos o la demora son negativos
        NotFound: si el proveedor o el artículo no existen
        DuplicateAssociationError: si el par ya está asociado
    """
    if precio_unitario is None:
        raise InvalidPriceError()
    precio = _decimal(precio_unitario, 'precio_unitario')
    if precio <= 0:
        raise InvalidPriceError()

    cargos = _decimal(cargos_pedido or 0, 'cargos_pedido')
    if cargos < 0:
        raise ValidationError({'cargos_pedido': ["Los cargos de pedido no pueden ser negativos"]})

    demora = _dias(demora_entrega_dias or 0, 'demora_entrega_dias')
    if demora < 0:
        raise ValidationError({'demora_entrega_dias': ["La demora de entrega no puede ser negativa"]})

    with transaction.atomic():
        proveedor = obtener_proveedor(cod_proveedor)
        # Bloquea el artículo para serializar cambios de predeterminado
        try:
            articulo = Articulo.objects.select_for_update().get(pk=cod_articulo)
        except (Articulo.DoesNotExist, ValueError, TypeError):
            raise NotFound(f"Artículo {cod_articulo} no encontrado")

        if ArticuloProveedor.objects.filter(proveedor=proveedor, articulo=articulo).exists():
            raise DuplicateAssociationError()

        if es_predeterminado:
            articulo.proveedores_articulo.filter(es_predeterminado=True).update(es_predeterminado=False)

        try:
            with transaction.atomic():
                link = ArticuloProveedor.objects.create(
                    proveedor=proveedor,
                    articulo=articulo,
                    precio_unitario=precio,
                    cargos_pedido=cargos,
                    demora_entrega_dias=demora,
                    es_predeterminado=bool(es_predeterminado)
                )
        except IntegrityError:
            raise DuplicateAssociationError()

    logger.info(
        "Proveedor %s asociado al artículo %s (precio %s%s)",
        proveedor.pk, articulo.pk, precio, ", predeterminado" if link.es_predeterminado else ""
    )
    return link


@transaction.atomic
def eliminar_link(cod_proveedor, cod_articulo):
    eliminados, _ = ArticuloProveedor.objects.filter(
        proveedor_id=cod_proveedor,
        articulo_id=cod_articulo
    ).delete()
    if not eliminados:
        raise NotFound(f"El proveedor {cod_proveedor} no está asociado al artículo {cod_articulo}")
    logger.info("Proveedor %s desasociado del artículo %s", cod_proveedor, cod_articulo)


@transaction.atomic
def marcar_predeterminado(cod_proveedor, cod_articulo) -> ArticuloProveedor:
    """Cambia el proveedor predeterminado del artículo, desmarcando el anterior."""
    try:
        articulo = Articulo.objects.select_for_update().get(pk=cod_articulo)
    except (Articulo.DoesNotExist, ValueError, TypeError):
        raise NotFound(f"Artículo {cod_articulo} no encontrado")

    try:
        link = articulo.proveedores_articulo.select_related('proveedor').get(proveedor_id=cod_proveedor)
    except (ArticuloProveedor.DoesNotExist, ValueError, TypeError):
        raise NotFound(f"El proveedor {cod_proveedor} no está asociado al artículo {cod_articulo}")

    if not link.proveedor.activo:
        raise BusinessRuleViolationError("Un proveedor dado de baja no puede ser predeterminado")

    articulo.proveedores_articulo.exclude(pk=link.pk).filter(es_predeterminado=True).update(es_predeterminado=False)
    if not link.es_predeterminado:
        link.es_predeterminado = True
        link.save(update_fields=['es_predeterminado', 'fecha_modificacion'])

    logger.info("Proveedor %s marcado como predeterminado del artículo %s", cod_proveedor, cod_articulo)
    return link


def resolver_link(articulo: Articulo, cod_proveedor=None) -> ArticuloProveedor:
    """
    Determina el vínculo proveedor-artículo efectivo para una orden.

    Orden de resolución:
    1. El proveedor indicado explícitamente.
    2. El vínculo marcado como predeterminado.
    3. El único vínculo existente, si hay exactamente uno.

    Raises:
        NoSupplierAssociatedError: si ningún vínculo resuelve
    """
    links = articulo.proveedores_articulo.select_related('proveedor').filter(
        proveedor__fecha_hora_baja__isnull=True
    )

    if cod_proveedor is not None:
        link = links.filter(proveedor_id=cod_proveedor).first()
        if link is None:
            raise NoSupplierAssociatedError(
                f"El proveedor {cod_proveedor} no está asociado al artículo {articulo.nombre}"
            )
        return link

    link = links.filter(es_predeterminado=True).first()
    if link is not None:
        return link

    candidatos = list(links[:2])
    if len(candidatos) == 1:
        return candidatos[0]

    if candidatos:
        raise NoSupplierAssociatedError(
            f"El artículo {articulo.nombre} tiene varios proveedores y ninguno predeterminado; indique uno"
        )
    raise NoSupplierAssociatedError(f"El artículo {articulo.nombre} no tiene proveedores asociados")


@transaction.atomic
def crear_proveedor_con_articulos(datos: dict, articulos=None) -> Proveedor:
    """
    Crea un proveedor y, opcionalmente, sus asociaciones iniciales.
    Si alguna asociación falla no se crea nada.
    """
    proveedor = Proveedor.objects.create(**datos)
    for item in articulos or []:
        crear_link(
            proveedor.pk,
            item.get('cod_articulo'),
            item.get('precio_unitario'),
            cargos_pedido=item.get('cargos_pedido', 0),
            demora_entrega_dias=item.get('demora_entrega_dias', 0),
            es_predeterminado=item.get('es_predeterminado', False)
        )
    logger.info("Proveedor %s creado con %d artículo(s)", proveedor.pk, len(articulos or []))
    return proveedor


@transaction.atomic
def dar_de_baja_proveedor(proveedor: Proveedor) -> Proveedor:
    if not proveedor.activo:
        raise BusinessRuleViolationError("El proveedor ya está dado de baja")

    activas = proveedor.ordenes_compra.filter(estado__in=ESTADOS_ACTIVOS).count()
    if activas:
        raise BusinessRuleViolationError(
            f"No se puede dar de baja: el proveedor tiene {activas} orden(es) de compra activa(s)"
        )

    predeterminado = proveedor.articulos_proveedor.filter(
        es_predeterminado=True,
        articulo__fecha_hora_baja__isnull=True
    ).select_related('articulo').first()
    if predeterminado is not None:
        raise BusinessRuleViolationError(
            f"No se puede dar de baja: es el proveedor predeterminado del artículo {predeterminado.articulo.nombre}"
        )

    proveedor.fecha_hora_baja = timezone.now()
    proveedor.save(update_fields=['fecha_hora_baja', 'fecha_modificacion'])
    logger.info("Proveedor %s dado de baja", proveedor.pk)
    return proveedor
