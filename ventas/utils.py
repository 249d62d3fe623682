from decimal import Decimal, ROUND_HALF_UP

from django.conf import settings

CENTAVOS = Decimal('0.01')


def valor_venta_estimado(costo, margen=None) -> Decimal:
    """
    Calcula el valor de venta estimado a partir del costo de compra.

    Args:
        costo (Decimal | int | float): Costo unitario o total de compra.
        margen (Decimal, opcional): Factor de margen. Si no se indica se usa
            INVENTARIO['MARGEN_VENTA'] de la configuración.

    Returns:
        Decimal: costo * margen, redondeado a dos decimales.
    """
    if margen is None:
        margen = settings.INVENTARIO['MARGEN_VENTA']
    valor = Decimal(str(costo or 0)) * Decimal(str(margen))
    return valor.quantize(CENTAVOS, rounding=ROUND_HALF_UP)


def formatear_precio(valor) -> str:
    """
    Formatea un importe al estilo es-AR: separador de miles "." y decimal ",".

    Ejemplo:
        formatear_precio(Decimal('1234.5')) -> '$1.234,50'
    """
    importe = Decimal(str(valor or 0)).quantize(CENTAVOS, rounding=ROUND_HALF_UP)
    texto = f"{abs(importe):,.2f}".replace(',', '_').replace('.', ',').replace('_', '.')
    signo = '-' if importe < 0 else ''
    return f"{signo}${texto}"
