import functools
import logging
import time

from django.conf import settings
from django.db import InterfaceError, OperationalError

logger = logging.getLogger(__name__)

ERRORES_TRANSITORIOS = (OperationalError, InterfaceError)


def reintentar_una_vez(func=None, *, excepciones=ERRORES_TRANSITORIOS, espera=None):
    """
    Decorador para lecturas: si la consulta falla por un error de conexión,
    espera un momento y la repite una única vez.

    Solo se reintentan errores transitorios de base de datos; los errores de
    negocio y de validación se propagan sin reintento.

    Uso:
        @reintentar_una_vez
        def listar(...): ...
    """
    def decorador(f):
        @functools.wraps(f)
        def wrapper(*args, **kwargs):
            try:
                return f(*args, **kwargs)
            except excepciones as exc:
                pausa = espera if espera is not None else settings.INVENTARIO['REINTENTO_ESPERA']
                logger.warning("Error transitorio en %s (%s); reintentando en %.2fs", f.__name__, exc, pausa)
                time.sleep(pausa)
                return f(*args, **kwargs)
        return wrapper

    if func is not None:
        return decorador(func)
    return decorador
