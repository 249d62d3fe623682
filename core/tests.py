from unittest import mock

from django.core.exceptions import ValidationError as DjangoValidationError
from django.db import OperationalError
from django.http import Http404
from django.test import SimpleTestCase
from rest_framework import status
from rest_framework.exceptions import ValidationError

from core.exceptions import (
    IllegalTransitionError,
    NetworkError,
    RequiresConfirmationError,
    custom_exception_handler
)
from core.utils import reintentar_una_vez


class ExceptionHandlerTestCase(SimpleTestCase):

    def _manejar(self, exc):
        return custom_exception_handler(exc, {'view': None})

    def test_excepcion_de_negocio(self):
        response = self._manejar(IllegalTransitionError("No se puede cancelar"))
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data, {
            'success': False,
            'status_code': 400,
            'error': 'No se puede cancelar',
            'code': 'illegal_transition',
        })

    def test_requiere_confirmacion_incluye_datos(self):
        response = self._manejar(RequiresConfirmationError(8, 10, ordenes_activas=1))
        self.assertEqual(response.status_code, status.HTTP_409_CONFLICT)
        self.assertEqual(response.data['code'], 'requires_confirmation')
        self.assertTrue(response.data['requiere_confirmacion'])
        self.assertEqual(response.data['stock_proyectado'], 8)
        self.assertEqual(response.data['punto_pedido'], 10)
        self.assertEqual(response.data['ordenes_activas'], 1)

    def test_not_found(self):
        response = self._manejar(Http404())
        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)
        self.assertEqual(response.data['code'], 'not_found')

    def test_error_de_base_de_datos_es_error_de_red(self):
        with self.assertLogs('core.exceptions', level='WARNING'):
            response = self._manejar(OperationalError("timeout"))
        self.assertEqual(response.status_code, status.HTTP_503_SERVICE_UNAVAILABLE)
        self.assertEqual(response.data['code'], NetworkError.default_code)

    def test_errores_de_validacion(self):
        por_campo = self._manejar(ValidationError({'cantidad': ['Requerido']}))
        self.assertEqual(por_campo.data['code'], 'invalid')
        self.assertEqual(por_campo.data['errors'], {'cantidad': ['Requerido']})

        simple = self._manejar(ValidationError("El stock debe ser un número positivo"))
        self.assertEqual(simple.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(simple.data['error'], "El stock debe ser un número positivo")

        django = self._manejar(DjangoValidationError("Valor inválido"))
        self.assertEqual(django.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(django.data['code'], 'invalid')

    def test_error_inesperado(self):
        with self.assertLogs('core.exceptions', level='ERROR'):
            response = self._manejar(RuntimeError("boom"))
        self.assertEqual(response.status_code, status.HTTP_500_INTERNAL_SERVER_ERROR)
        self.assertEqual(response.data['code'], 'error')


class ReintentarUnaVezTestCase(SimpleTestCase):

    def test_reintenta_error_transitorio(self):
        consulta = mock.Mock(side_effect=[OperationalError("conexión perdida"), 'ok'])
        consulta.__name__ = 'consulta'

        with self.assertLogs('core.utils', level='WARNING'):
            resultado = reintentar_una_vez(consulta, espera=0)()

        self.assertEqual(resultado, 'ok')
        self.assertEqual(consulta.call_count, 2)

    def test_reintenta_una_sola_vez(self):
        consulta = mock.Mock(side_effect=OperationalError("caída"))
        consulta.__name__ = 'consulta'

        with self.assertRaises(OperationalError):
            reintentar_una_vez(consulta, espera=0)()
        self.assertEqual(consulta.call_count, 2)

    def test_errores_de_negocio_no_se_reintentan(self):
        consulta = mock.Mock(side_effect=IllegalTransitionError())
        consulta.__name__ = 'consulta'

        with self.assertRaises(IllegalTransitionError):
            reintentar_una_vez(consulta, espera=0)()
        self.assertEqual(consulta.call_count, 1)
