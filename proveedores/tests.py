from decimal import Decimal

from django.contrib.auth import get_user_model
from django.test import TestCase
from django.urls import reverse
from rest_framework import status
from rest_framework.exceptions import NotFound, ValidationError
from rest_framework.test import APITestCase

from articulos.models import Articulo
from core.exceptions import (
    BusinessRuleViolationError,
    DuplicateAssociationError,
    InvalidPriceError,
    NoSupplierAssociatedError
)
from gestion_inventario.choices import EstadoOrdenCompra
from ordenes.models import OrdenCompra
from proveedores import services
from proveedores.models import ArticuloProveedor, Proveedor

User = get_user_model()


class LinkServiceTestCase(TestCase):
    def setUp(self):
        self.articulo = Articulo.objects.create(nombre='Tornillo', stock_actual=10)
        self.proveedor_a = Proveedor.objects.create(nombre='Proveedor A')
        self.proveedor_b = Proveedor.objects.create(nombre='Proveedor B')

    def test_crear_link(self):
        link = services.crear_link(self.proveedor_a.pk, self.articulo.pk, Decimal('2.50'), Decimal('1.00'), 4)
        self.assertEqual(link.precio_unitario, Decimal('2.50'))
        self.assertEqual(link.demora_entrega_dias, 4)
        self.assertFalse(link.es_predeterminado)

    def test_crear_link_duplicado(self):
        services.crear_link(self.proveedor_a.pk, self.articulo.pk, Decimal('2.50'))
        with self.assertRaises(DuplicateAssociationError):
            services.crear_link(self.proveedor_a.pk, self.articulo.pk, Decimal('3.00'))
        self.assertEqual(ArticuloProveedor.objects.count(), 1)

    def test_precio_invalido(self):
        for precio in (Decimal('0'), Decimal('-1.00'), Decimal('0.001'), Decimal('0.004'), None):
            with self.subTest(precio=precio):
                with self.assertRaises(InvalidPriceError):
                    services.crear_link(self.proveedor_a.pk, self.articulo.pk, precio)
        self.assertFalse(ArticuloProveedor.objects.exists())

    def test_cargos_y_demora_negativos(self):
        with self.assertRaises(ValidationError):
            services.crear_link(self.proveedor_a.pk, self.articulo.pk, Decimal('1.00'), cargos_pedido=Decimal('-1'))
        with self.assertRaises(ValidationError):
            services.crear_link(self.proveedor_a.pk, self.articulo.pk, Decimal('1.00'), demora_entrega_dias=-2)

    def test_precio_se_guarda_redondeado_a_centavos(self):
        link = services.crear_link(self.proveedor_a.pk, self.articulo.pk, Decimal('0.005'))
        link.refresh_from_db()
        self.assertEqual(link.precio_unitario, Decimal('0.01'))

    def test_demora_no_entera(self):
        for demora in (Decimal('2.7'), 'dos', '2.5'):
            with self.subTest(demora=demora):
                with self.assertRaises(ValidationError) as contexto:
                    services.crear_link(self.proveedor_a.pk, self.articulo.pk, Decimal('1.00'),
                                        demora_entrega_dias=demora)
                self.assertIn('demora_entrega_dias', contexto.exception.detail)
        self.assertFalse(ArticuloProveedor.objects.exists())

    def test_demora_entera_como_texto(self):
        link = services.crear_link(self.proveedor_a.pk, self.articulo.pk, Decimal('1.00'), demora_entrega_dias='3')
        self.assertEqual(link.demora_entrega_dias, 3)

    def test_articulo_inexistente(self):
        with self.assertRaises(NotFound):
            services.crear_link(self.proveedor_a.pk, 9999, Decimal('1.00'))

    def test_nuevo_predeterminado_desmarca_el_anterior(self):
        services.crear_link(self.proveedor_a.pk, self.articulo.pk, Decimal('2.00'), es_predeterminado=True)
        services.crear_link(self.proveedor_b.pk, self.articulo.pk, Decimal('2.10'), es_predeterminado=True)
        predeterminados = ArticuloProveedor.objects.filter(articulo=self.articulo, es_predeterminado=True)
        self.assertEqual(predeterminados.count(), 1)
        self.assertEqual(self.articulo.proveedor_predeterminado, self.proveedor_b)

    def test_marcar_predeterminado(self):
        services.crear_link(self.proveedor_a.pk, self.articulo.pk, Decimal('2.00'), es_predeterminado=True)
        services.crear_link(self.proveedor_b.pk, self.articulo.pk, Decimal('2.10'))
        services.marcar_predeterminado(self.proveedor_b.pk, self.articulo.pk)
        self.assertEqual(self.articulo.proveedor_predeterminado, self.proveedor_b)
        self.assertEqual(
            ArticuloProveedor.objects.filter(articulo=self.articulo, es_predeterminado=True).count(), 1
        )

    def test_eliminar_link_inexistente(self):
        with self.assertRaises(NotFound):
            services.eliminar_link(self.proveedor_a.pk, self.articulo.pk)

    def test_listar_links_articulo_inexistente_es_vacio(self):
        self.assertEqual(services.listar_links_articulo(9999), [])


class ResolverLinkTestCase(TestCase):
    def setUp(self):
        self.articulo = Articulo.objects.create(nombre='Tornillo', stock_actual=10)
        self.proveedor_a = Proveedor.objects.create(nombre='Proveedor A')
        self.proveedor_b = Proveedor.objects.create(nombre='Proveedor B')

    def test_sin_vinculos(self):
        with self.assertRaises(NoSupplierAssociatedError):
            services.resolver_link(self.articulo)

    def test_unico_vinculo(self):
        link = services.crear_link(self.proveedor_a.pk, self.articulo.pk, Decimal('1.00'))
        self.assertEqual(services.resolver_link(self.articulo), link)

    def test_predeterminado(self):
        services.crear_link(self.proveedor_a.pk, self.articulo.pk, Decimal('1.00'))
        link_b = services.crear_link(self.proveedor_b.pk, self.articulo.pk, Decimal('1.20'), es_predeterminado=True)
        self.assertEqual(services.resolver_link(self.articulo), link_b)

    def test_varios_sin_predeterminado(self):
        services.crear_link(self.proveedor_a.pk, self.articulo.pk, Decimal('1.00'))
        services.crear_link(self.proveedor_b.pk, self.articulo.pk, Decimal('1.20'))
        with self.assertRaises(NoSupplierAssociatedError):
            services.resolver_link(self.articulo)

    def test_proveedor_explicito(self):
        link_a = services.crear_link(self.proveedor_a.pk, self.articulo.pk, Decimal('1.00'))
        services.crear_link(self.proveedor_b.pk, self.articulo.pk, Decimal('1.20'), es_predeterminado=True)
        self.assertEqual(services.resolver_link(self.articulo, self.proveedor_a.pk), link_a)

    def test_proveedor_explicito_no_asociado(self):
        services.crear_link(self.proveedor_a.pk, self.articulo.pk, Decimal('1.00'))
        with self.assertRaises(NoSupplierAssociatedError):
            services.resolver_link(self.articulo, self.proveedor_b.pk)


class ProveedorAPITestCase(APITestCase):
    def setUp(self):
        self.admin_user = User.objects.create_user(username='admin', password='password123', is_staff=True)
        self.client.force_authenticate(user=self.admin_user)

        self.articulo = Articulo.objects.create(nombre='Tornillo', stock_actual=10)
        self.proveedor = Proveedor.objects.create(nombre='Bulonera Sur', email='ventas@bulonera.com')

    def test_asociar_articulo(self):
        url = reverse('asociar-articulo', args=[self.proveedor.pk])
        data = {'cod_articulo': self.articulo.pk, 'precio_unitario': '2.50', 'demora_entrega_dias': 5}
        response = self.client.post(url, data, format='json')
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(response.data['data']['cod_articulo'], self.articulo.pk)

        duplicado = self.client.post(url, data, format='json')
        self.assertEqual(duplicado.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(duplicado.data['code'], 'duplicate_association')

    def test_asociar_con_precio_cero(self):
        url = reverse('asociar-articulo', args=[self.proveedor.pk])
        response = self.client.post(url, {'cod_articulo': self.articulo.pk, 'precio_unitario': '0'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data['code'], 'invalid_price')

    def test_links_de_articulo_y_eliminacion(self):
        services.crear_link(self.proveedor.pk, self.articulo.pk, Decimal('2.50'))

        response = self.client.get(reverse('links-articulo', args=[self.articulo.pk]))
        self.assertEqual(response.data['count'], 1)

        url = reverse('articulo-proveedor-detalle', args=[self.proveedor.pk, self.articulo.pk])
        self.assertEqual(self.client.delete(url).status_code, status.HTTP_200_OK)
        segunda = self.client.delete(url)
        self.assertEqual(segunda.status_code, status.HTTP_404_NOT_FOUND)
        self.assertEqual(segunda.data['code'], 'not_found')

    def test_marcar_predeterminado(self):
        services.crear_link(self.proveedor.pk, self.articulo.pk, Decimal('2.50'))
        url = reverse('articulo-proveedor-predeterminado', args=[self.proveedor.pk, self.articulo.pk])
        response = self.client.put(url, format='json')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertTrue(response.data['data']['es_predeterminado'])

    def test_articulos_anidados(self):
        url = reverse('proveedor-articulos-list', kwargs={'proveedor_pk': self.proveedor.pk})
        response = self.client.post(url, {'cod_articulo': self.articulo.pk, 'precio_unitario': '3.00'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)

        listado = self.client.get(url)
        self.assertEqual(listado.data['count'], 1)
        self.assertEqual(listado.data['data'][0]['nombre_articulo'], 'Tornillo')

        detalle = reverse('proveedor-articulos-detail', kwargs={'proveedor_pk': self.proveedor.pk, 'pk': self.articulo.pk})
        self.assertEqual(self.client.delete(detalle).status_code, status.HTTP_200_OK)
        self.assertFalse(ArticuloProveedor.objects.exists())

    def test_crear_proveedor_con_articulos(self):
        data = {
            'nombre': 'Ferretería Norte',
            'email': 'Compras@Norte.com',
            'articulos': [
                {'cod_articulo': self.articulo.pk, 'precio_unitario': '1.75', 'es_predeterminado': True}
            ]
        }
        response = self.client.post(reverse('proveedor-list'), data, format='json')
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(response.data['data']['email'], 'compras@norte.com')
        self.assertEqual(response.data['data']['cantidad_articulos'], 1)
        self.assertEqual(self.articulo.proveedor_predeterminado.nombre, 'Ferretería Norte')

    def test_crear_proveedor_es_todo_o_nada(self):
        data = {
            'nombre': 'Ferretería Norte',
            'articulos': [
                {'cod_articulo': self.articulo.pk, 'precio_unitario': '1.75'},
                {'cod_articulo': 9999, 'precio_unitario': '1.00'}
            ]
        }
        response = self.client.post(reverse('proveedor-list'), data, format='json')
        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)
        self.assertFalse(Proveedor.objects.filter(nombre='Ferretería Norte').exists())
        self.assertFalse(ArticuloProveedor.objects.exists())

    def test_baja_proveedor(self):
        response = self.client.delete(reverse('proveedor-detail', args=[self.proveedor.pk]))
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.proveedor.refresh_from_db()
        self.assertFalse(self.proveedor.activo)

    def test_baja_rechazada_si_es_predeterminado(self):
        services.crear_link(self.proveedor.pk, self.articulo.pk, Decimal('2.50'), es_predeterminado=True)
        with self.assertRaises(BusinessRuleViolationError):
            services.dar_de_baja_proveedor(self.proveedor)

    def test_baja_rechazada_con_ordenes_activas(self):
        OrdenCompra.objects.create(
            cantidad_articulos=1,
            monto_compra=Decimal('2.50'),
            estado=EstadoOrdenCompra.PENDIENTE,
            proveedor=self.proveedor,
            articulo=self.articulo
        )
        response = self.client.delete(reverse('proveedor-detail', args=[self.proveedor.pk]))
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data['code'], 'business_rule_violation')
