from decimal import Decimal

from django.contrib.auth import get_user_model
from django.contrib.auth.models import Permission
from django.test import SimpleTestCase
from django.urls import reverse
from django.utils import timezone
from rest_framework import status
from rest_framework.test import APITestCase

from articulos.models import Articulo
from ventas.models import Venta
from ventas.utils import formatear_precio, valor_venta_estimado

User = get_user_model()


class UtilsTestCase(SimpleTestCase):

    def test_formatear_precio(self):
        self.assertEqual(formatear_precio(Decimal('1234.5')), '$1.234,50')
        self.assertEqual(formatear_precio(7.5), '$7,50')
        self.assertEqual(formatear_precio(Decimal('1000000')), '$1.000.000,00')
        self.assertEqual(formatear_precio(None), '$0,00')
        self.assertEqual(formatear_precio(Decimal('-12.345')), '-$12,35')

    def test_valor_venta_estimado(self):
        self.assertEqual(valor_venta_estimado(Decimal('10.00')), Decimal('13.00'))
        self.assertEqual(valor_venta_estimado(Decimal('10.00'), margen=Decimal('1.5')), Decimal('15.00'))
        self.assertEqual(valor_venta_estimado(None), Decimal('0.00'))


class VentaAPITestCase(APITestCase):
    def setUp(self):
        self.vendedor = User.objects.create_user(username='vendedor', password='password123')
        self.vendedor.user_permissions.add(Permission.objects.get(codename='add_venta'))
        self.consulta = User.objects.create_user(username='consulta', password='password123')
        self.client.force_authenticate(user=self.vendedor)

        self.articulo = Articulo.objects.create(
            nombre='Tornillo',
            stock_actual=8,
            punto_pedido=5,
            stock_seguridad=6,
            costo_compra=Decimal('2.00')
        )
        self.url = reverse('venta-registrar')

    def test_registrar_venta_descuenta_stock(self):
        response = self.client.post(self.url, {'cod_articulo': self.articulo.pk, 'cantidad_vendida': 3}, format='json')
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(response.data['data']['stock_actual'], 5)
        self.assertEqual(response.data['data']['estado_stock'], 'critico')
        self.assertTrue(response.data['data']['requiere_reposicion'])
        self.assertIn('$7,80', response.data['message'])

        self.articulo.refresh_from_db()
        self.assertEqual(self.articulo.stock_actual, 5)
        self.assertEqual(Venta.objects.filter(articulo=self.articulo).count(), 1)

    def test_stock_insuficiente(self):
        response = self.client.post(self.url, {'cod_articulo': self.articulo.pk, 'cantidad_vendida': 100}, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data['code'], 'insufficient_stock')
        self.articulo.refresh_from_db()
        self.assertEqual(self.articulo.stock_actual, 8)
        self.assertFalse(Venta.objects.exists())

    def test_cantidad_no_positiva(self):
        response = self.client.post(self.url, {'cod_articulo': self.articulo.pk, 'cantidad_vendida': 0}, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data['code'], 'invalid')

    def test_articulo_dado_de_baja(self):
        self.articulo.fecha_hora_baja = timezone.now()
        self.articulo.save()
        response = self.client.post(self.url, {'cod_articulo': self.articulo.pk, 'cantidad_vendida': 1}, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_usuario_sin_permiso(self):
        self.client.force_authenticate(user=self.consulta)
        response = self.client.post(self.url, {'cod_articulo': self.articulo.pk, 'cantidad_vendida': 1}, format='json')
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)

        listado = self.client.get(reverse('venta-list'))
        self.assertEqual(listado.status_code, status.HTTP_200_OK)

    def test_ventas_por_articulo(self):
        self.client.post(self.url, {'cod_articulo': self.articulo.pk, 'cantidad_vendida': 2}, format='json')

        response = self.client.get(reverse('venta-por-articulo', kwargs={'cod_articulo': self.articulo.pk}))
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['count'], 1)
        self.assertEqual(response.data['data'][0]['cantidad_vendida'], 2)

        vacio = self.client.get(reverse('venta-por-articulo', kwargs={'cod_articulo': 9999}))
        self.assertEqual(vacio.status_code, status.HTTP_200_OK)
        self.assertEqual(vacio.data['data'], [])

    def test_listar_ventas(self):
        self.client.post(self.url, {'cod_articulo': self.articulo.pk, 'cantidad_vendida': 1}, format='json')
        response = self.client.get(reverse('venta-list'))
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['count'], 1)
