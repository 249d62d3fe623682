from decimal import Decimal

from django.contrib.auth import get_user_model
from django.urls import reverse
from rest_framework import status
from rest_framework.test import APITestCase

from articulos.models import Articulo
from ordenes.services import OrdenCompraService
from proveedores.models import ArticuloProveedor, Proveedor

User = get_user_model()


class HistorialEstadoOrdenAPITestCase(APITestCase):
    def setUp(self):
        self.user = User.objects.create_user(username='auditor', password='password123')
        self.client.force_authenticate(user=self.user)

        proveedor = Proveedor.objects.create(nombre='Bulonera Sur')
        self.tornillo = Articulo.objects.create(nombre='Tornillo', stock_actual=50)
        self.tuerca = Articulo.objects.create(nombre='Tuerca', stock_actual=50)
        for articulo in (self.tornillo, self.tuerca):
            ArticuloProveedor.objects.create(proveedor=proveedor, articulo=articulo, precio_unitario=Decimal('1.00'))

        service = OrdenCompraService()
        orden = service.crear_orden(self.tornillo.pk, 10).orden
        service.enviar(orden.pk)
        service.crear_orden(self.tuerca.pk, 10)

    def test_listar_historial(self):
        response = self.client.get(reverse('historial-estado-list'))
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['count'], 3)

    def test_filtrar_por_articulo(self):
        response = self.client.get(reverse('historial-estado-list'), {'articulo_id': self.tornillo.pk})
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['count'], 2)

    def test_filtrar_por_estado(self):
        response = self.client.get(reverse('historial-estado-list'), {'estado_nuevo': 'ENVIADA'})
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['count'], 1)

    def test_filtros_invalidos(self):
        for parametros in ({'articulo_id': 'abc'}, {'fecha_desde': 'ayer'}):
            with self.subTest(parametros=parametros):
                response = self.client.get(reverse('historial-estado-list'), parametros)
                self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
                self.assertFalse(response.data['success'])
