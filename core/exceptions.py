import logging

from rest_framework.views import exception_handler
from rest_framework.exceptions import APIException
from rest_framework import status
from django.core.exceptions import ValidationError as DjangoValidationError
from django.db import InterfaceError, OperationalError
from django.db.models import ProtectedError, RestrictedError
from django.http import Http404
from rest_framework.response import Response

logger = logging.getLogger(__name__)


def custom_exception_handler(exc, context):
    """
    Handler personalizado para excepciones.
    Proporciona respuestas consistentes: {success, error, code, status_code}.
    """
    if isinstance(exc, (OperationalError, InterfaceError)):
        logger.warning("Base de datos no disponible: %s", exc)
        exc = NetworkError()

    # Llamar al handler por defecto primero
    response = exception_handler(exc, context)

    # Si es una excepción de Django no manejada por DRF
    if response is None:
        if isinstance(exc, DjangoValidationError):
            response = Response(
                {
                    'detail': exc.messages if hasattr(exc, 'messages') else str(exc),
                    'code': 'invalid',
                },
                status=status.HTTP_400_BAD_REQUEST
            )
        elif isinstance(exc, (ProtectedError, RestrictedError)):
            response = Response(
                {
                    'detail': 'El recurso está referenciado por otros registros',
                    'code': 'business_rule_violation',
                },
                status=status.HTTP_400_BAD_REQUEST
            )
        else:
            # Error no controlado
            logger.error("Error inesperado en %s", context.get('view'), exc_info=exc)
            response = Response(
                {
                    'detail': 'Ha ocurrido un error inesperado',
                    'code': 'error',
                },
                status=status.HTTP_500_INTERNAL_SERVER_ERROR
            )

    data = response.data
    custom_response_data = {
        'success': False,
        'status_code': response.status_code,
    }

    if isinstance(data, dict) and 'detail' in data:
        detail = data['detail']
        custom_response_data['error'] = str(detail) if not isinstance(detail, list) else ' '.join(map(str, detail))
        custom_response_data['code'] = getattr(detail, 'code', None) or data.get('code') or _default_code(exc)
    elif isinstance(data, list):
        # ValidationError lanzado con un mensaje simple
        custom_response_data['error'] = ' '.join(map(str, data))
        custom_response_data['code'] = 'invalid'
    else:
        # Errores de validación de serializers: {campo: [mensajes]}
        custom_response_data['error'] = 'Datos inválidos'
        custom_response_data['code'] = 'invalid'
        custom_response_data['errors'] = data

    # Datos adicionales que acompañan a la excepción (p.ej. confirmación requerida)
    extra = getattr(exc, 'datos', None)
    if extra:
        custom_response_data.update(extra)

    response.data = custom_response_data
    return response


def _default_code(exc):
    if isinstance(exc, Http404):
        return 'not_found'
    return getattr(exc, 'default_code', 'error')


# ==================== EXCEPCIONES PERSONALIZADAS ====================

class NoSupplierAssociatedError(APIException):
    """No se pudo resolver un proveedor asociado al artículo"""
    status_code = status.HTTP_400_BAD_REQUEST
    default_detail = 'El artículo no tiene un proveedor asociado'
    default_code = 'no_supplier_associated'


class RequiresConfirmationError(APIException):
    """
    La orden es válida pero el stock proyectado no supera el punto de pedido.
    Debe reenviarse con confirmar=true.
    """
    status_code = status.HTTP_409_CONFLICT
    default_detail = 'La orden requiere confirmación'
    default_code = 'requires_confirmation'

    def __init__(self, stock_proyectado, punto_pedido, ordenes_activas=0, detail=None):
        if detail is None:
            detail = (
                f"El stock resultante ({stock_proyectado}) no supera el punto de pedido "
                f"({punto_pedido}). Confirme para crear la orden."
            )
        super().__init__(detail)
        self.stock_proyectado = stock_proyectado
        self.punto_pedido = punto_pedido
        self.ordenes_activas = ordenes_activas
        self.datos = {
            'requiere_confirmacion': True,
            'stock_proyectado': stock_proyectado,
            'punto_pedido': punto_pedido,
            'ordenes_activas': ordenes_activas,
        }


class IllegalTransitionError(APIException):
    """Excepción para transiciones de estado inválidas"""
    status_code = status.HTTP_400_BAD_REQUEST
    default_detail = 'Transición de estado no permitida'
    default_code = 'illegal_transition'


class DuplicateAssociationError(APIException):
    """Excepción cuando el proveedor ya está asociado al artículo"""
    status_code = status.HTTP_400_BAD_REQUEST
    default_detail = 'El proveedor ya está asociado a este artículo'
    default_code = 'duplicate_association'


class InvalidPriceError(APIException):
    status_code = status.HTTP_400_BAD_REQUEST
    default_detail = 'El precio unitario debe ser mayor a 0'
    default_code = 'invalid_price'


class InsufficientStockError(APIException):
    """Excepción cuando la cantidad solicitada supera el stock disponible"""
    status_code = status.HTTP_400_BAD_REQUEST
    default_detail = 'Stock insuficiente'
    default_code = 'insufficient_stock'


class NetworkError(APIException):
    """Fallo de conexión o timeout contra la base de datos; puede reintentarse"""
    status_code = status.HTTP_503_SERVICE_UNAVAILABLE
    default_detail = 'Servicio no disponible temporalmente, intente nuevamente'
    default_code = 'network_error'


class BusinessRuleViolationError(APIException):
    """Excepción genérica para violaciones de reglas de negocio"""
    status_code = status.HTTP_400_BAD_REQUEST
    default_detail = 'Violación de regla de negocio'
    default_code = 'business_rule_violation'
