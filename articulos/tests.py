from decimal import Decimal
from unittest import mock

from django.contrib.auth import get_user_model
from django.db import DatabaseError
from django.test import SimpleTestCase, override_settings
from django.urls import reverse
from django.utils import timezone
from rest_framework import status
from rest_framework.test import APITestCase

from articulos.models import Articulo
from articulos.services import clasificar_stock, contar_movimientos, estadisticas_inventario
from gestion_inventario.choices import EstadoOrdenCompra, EstadoStock
from ordenes.models import OrdenCompra
from proveedores.models import ArticuloProveedor, Proveedor

User = get_user_model()


class ClasificarStockTestCase(SimpleTestCase):

    def _articulo(self, stock, punto_pedido=10, stock_seguridad=20, costo_compra=Decimal('1.00')):
        return Articulo(
            nombre='Tornillo',
            stock_actual=stock,
            punto_pedido=punto_pedido,
            stock_seguridad=stock_seguridad,
            costo_compra=costo_compra
        )

    def test_categorias(self):
        self.assertEqual(clasificar_stock(self._articulo(0)), EstadoStock.SIN_STOCK)
        self.assertEqual(clasificar_stock(self._articulo(1)), EstadoStock.CRITICO)
        self.assertEqual(clasificar_stock(self._articulo(10)), EstadoStock.CRITICO)
        self.assertEqual(clasificar_stock(self._articulo(11)), EstadoStock.BAJO)
        self.assertEqual(clasificar_stock(self._articulo(20)), EstadoStock.BAJO)
        self.assertEqual(clasificar_stock(self._articulo(21)), EstadoStock.NORMAL)

    def test_campos_ausentes_se_toman_como_cero(self):
        self.assertEqual(clasificar_stock(self._articulo(None, None, None)), EstadoStock.SIN_STOCK)
        self.assertEqual(clasificar_stock(self._articulo(5, None, None)), EstadoStock.NORMAL)

    def test_siempre_devuelve_una_categoria(self):
        for stock in range(0, 40):
            with self.subTest(stock=stock):
                self.assertIn(clasificar_stock(self._articulo(stock)), list(EstadoStock))

    @override_settings(INVENTARIO={
        'CRITERIO_STOCK_BAJO': 'punto_pedido',
        'FACTOR_STOCK_BAJO': Decimal('1.5'),
        'MARGEN_VENTA': Decimal('1.3'),
        'REINTENTO_ESPERA': 0,
    })
    def test_criterio_alternativo_punto_pedido(self):
        self.assertEqual(clasificar_stock(self._articulo(15, stock_seguridad=0)), EstadoStock.BAJO)
        self.assertEqual(clasificar_stock(self._articulo(16, stock_seguridad=100)), EstadoStock.NORMAL)

    def test_estadisticas_inventario(self):
        articulos = [
            self._articulo(0, costo_compra=Decimal('3.00')),
            self._articulo(5, costo_compra=Decimal('2.00')),
            self._articulo(15, costo_compra=Decimal('1.50')),
            self._articulo(50, costo_compra=Decimal('1.00')),
        ]
        resumen = estadisticas_inventario(articulos)
        self.assertEqual(resumen['total_articulos'], 4)
        self.assertEqual(resumen['sin_stock'], 1)
        self.assertEqual(resumen['stock_bajo'], 2)
        self.assertEqual(resumen['stock_normal'], 1)
        self.assertEqual(resumen['valor_total_inventario'], Decimal('82.50'))


class ContarMovimientosTestCase(SimpleTestCase):

    def test_contador_fallido_informa_cero(self):
        articulo = mock.Mock(pk=1)
        articulo.ordenes_compra.count.side_effect = DatabaseError("conexión perdida")
        articulo.ordenes_compra.filter.return_value.count.return_value = 2
        articulo.ventas.count.return_value = 4

        with self.assertLogs('articulos.services', level='WARNING'):
            contadores = contar_movimientos(articulo)

        self.assertEqual(contadores, {'ordenes': 0, 'ordenes_activas': 2, 'ventas': 4})


class ArticuloAPITestCase(APITestCase):
    def setUp(self):
        self.admin_user = User.objects.create_user(username='admin', password='password123', is_staff=True)
        self.operador = User.objects.create_user(username='operador', password='password123')
        self.client.force_authenticate(user=self.admin_user)

        self.articulo = Articulo.objects.create(
            nombre='Tornillo 8mm',
            stock_actual=50,
            punto_pedido=10,
            stock_seguridad=20,
            costo_compra=Decimal('2.00')
        )
        self.proveedor = Proveedor.objects.create(nombre='Bulonera Sur')

    def test_listar_articulos(self):
        response = self.client.get(reverse('articulo-list'))
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['count'], 1)
        self.assertEqual(response.data['results'][0]['estado_stock'], 'normal')

    def test_crear_articulo(self):
        data = {
            'nombre': 'Tuerca 8mm',
            'stock_actual': 0,
            'punto_pedido': 5,
            'costo_compra': '0.50',
            'modelo_inventario': 'INTERVALOFIJO'
        }
        response = self.client.post(reverse('articulo-list'), data, format='json')
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertTrue(response.data['success'])
        self.assertEqual(response.data['data']['estado_stock'], 'sin-stock')
        self.assertIsNone(response.data['data']['proveedor_predeterminado'])

    def test_usuario_sin_staff_no_puede_crear(self):
        self.client.force_authenticate(user=self.operador)
        response = self.client.post(reverse('articulo-list'), {'nombre': 'X'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)

    def test_detalle_expone_proveedor_predeterminado(self):
        ArticuloProveedor.objects.create(
            proveedor=self.proveedor,
            articulo=self.articulo,
            precio_unitario=Decimal('1.80'),
            es_predeterminado=True
        )
        response = self.client.get(reverse('articulo-detail', args=[self.articulo.pk]))
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(
            response.data['data']['proveedor_predeterminado'],
            {'cod_proveedor': self.proveedor.pk, 'nombre': 'Bulonera Sur'}
        )

    def test_predeterminado_dado_de_baja_no_se_expone(self):
        ArticuloProveedor.objects.create(
            proveedor=self.proveedor,
            articulo=self.articulo,
            precio_unitario=Decimal('1.80'),
            es_predeterminado=True
        )
        Proveedor.objects.filter(pk=self.proveedor.pk).update(fecha_hora_baja=timezone.now())

        self.assertIsNone(self.articulo.proveedor_predeterminado)
        response = self.client.get(reverse('articulo-detail', args=[self.articulo.pk]))
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertIsNone(response.data['data']['proveedor_predeterminado'])

    def test_actualizar_stock(self):
        url = reverse('articulo-stock', args=[self.articulo.pk])
        response = self.client.put(url, {'stock_actual': 8}, format='json')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.articulo.refresh_from_db()
        self.assertEqual(self.articulo.stock_actual, 8)
        self.assertEqual(response.data['data']['estado_stock'], 'critico')

    def test_actualizar_stock_negativo(self):
        url = reverse('articulo-stock', args=[self.articulo.pk])
        response = self.client.put(url, {'stock_actual': -1}, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data['code'], 'invalid')
        self.articulo.refresh_from_db()
        self.assertEqual(self.articulo.stock_actual, 50)

    def test_actualizar_stock_articulo_inexistente(self):
        url = reverse('articulo-stock', args=[9999])
        response = self.client.put(url, {'stock_actual': 3}, format='json')
        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)
        self.assertEqual(response.data['code'], 'not_found')

    def test_baja_logica(self):
        response = self.client.delete(reverse('articulo-detail', args=[self.articulo.pk]))
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.articulo.refresh_from_db()
        self.assertIsNotNone(self.articulo.fecha_hora_baja)
        self.assertTrue(Articulo.objects.filter(pk=self.articulo.pk).exists())

        activos = self.client.get(reverse('articulo-activos'))
        self.assertEqual(activos.data['count'], 0)

    def test_baja_rechazada_con_ordenes_activas(self):
        OrdenCompra.objects.create(
            cantidad_articulos=5,
            monto_compra=Decimal('10.00'),
            estado=EstadoOrdenCompra.ENVIADA,
            proveedor=self.proveedor,
            articulo=self.articulo
        )
        response = self.client.delete(reverse('articulo-detail', args=[self.articulo.pk]))
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data['code'], 'business_rule_violation')
        self.articulo.refresh_from_db()
        self.assertIsNone(self.articulo.fecha_hora_baja)

    def test_proveedores_del_articulo(self):
        ArticuloProveedor.objects.create(
            proveedor=self.proveedor,
            articulo=self.articulo,
            precio_unitario=Decimal('1.80'),
            cargos_pedido=Decimal('5.00'),
            demora_entrega_dias=3
        )
        response = self.client.get(reverse('articulo-proveedores', args=[self.articulo.pk]))
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['count'], 1)
        link = response.data['data'][0]
        self.assertEqual(link['cod_proveedor'], self.proveedor.pk)
        self.assertEqual(link['precio_unitario'], Decimal('1.80'))
        self.assertEqual(link['demora_entrega_dias'], 3)
        self.assertFalse(link['es_predeterminado'])

    def test_contadores(self):
        response = self.client.get(reverse('articulo-contadores', args=[self.articulo.pk]))
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['data'], {'ordenes': 0, 'ordenes_activas': 0, 'ventas': 0})

    def test_estadisticas(self):
        Articulo.objects.create(nombre='Arandela', stock_actual=0, costo_compra=Decimal('1.00'))
        response = self.client.get(reverse('articulo-estadisticas'))
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['data']['total_articulos'], 2)
        self.assertEqual(response.data['data']['sin_stock'], 1)
        self.assertEqual(response.data['data']['valor_total_inventario'], Decimal('100.00'))
