from datetime import timedelta
from decimal import Decimal

from django.contrib.auth import get_user_model
from django.test import TestCase
from django.urls import reverse
from django.utils import timezone
from rest_framework import status
from rest_framework.exceptions import ValidationError
from rest_framework.test import APITestCase

from articulos.models import Articulo
from auditoria.models import HistorialEstadoOrden
from core.exceptions import IllegalTransitionError, NoSupplierAssociatedError, RequiresConfirmationError
from gestion_inventario.choices import EstadoOrdenCompra, ModeloInventario
from ordenes.models import OrdenCompra
from ordenes.services import OrdenCompraService, TRANSICIONES, listar_estados
from proveedores.models import ArticuloProveedor, Proveedor
from ventas.models import Venta

User = get_user_model()


class OrdenCompraServiceTestCase(TestCase):
    def setUp(self):
        self.service = OrdenCompraService()
        self.articulo = Articulo.objects.create(
            nombre='Tornillo',
            stock_actual=5,
            punto_pedido=10,
            modelo_inventario=ModeloInventario.LOTE_FIJO
        )
        self.proveedor = Proveedor.objects.create(nombre='Bulonera Sur')
        self.link = ArticuloProveedor.objects.create(
            proveedor=self.proveedor,
            articulo=self.articulo,
            precio_unitario=Decimal('2.50'),
            demora_entrega_dias=7
        )

    def _crear(self, cantidad=20, **kwargs):
        return self.service.crear_orden(self.articulo.pk, cantidad, **kwargs).orden

    def test_requiere_confirmacion_sin_persistir(self):
        with self.assertRaises(RequiresConfirmationError) as ctx:
            self.service.crear_orden(self.articulo.pk, 3)
        self.assertEqual(ctx.exception.stock_proyectado, 8)
        self.assertEqual(ctx.exception.punto_pedido, 10)
        self.assertFalse(OrdenCompra.objects.exists())

    def test_confirmada_crea_orden_pendiente(self):
        resultado = self.service.crear_orden(self.articulo.pk, 3, confirmar=True)
        orden = resultado.orden
        self.assertEqual(orden.estado, EstadoOrdenCompra.PENDIENTE)
        self.assertEqual(orden.monto_compra, Decimal('7.50'))
        self.assertEqual(orden.fecha_entrega_estimada, timezone.localdate() + timedelta(days=7))
        self.assertEqual(orden.detalles.count(), 1)
        detalle = orden.detalles.get()
        self.assertEqual(detalle.subtotal, orden.monto_compra)
        self.assertEqual(detalle.articulo_proveedor, self.link)

    def test_intervalo_fijo_no_requiere_confirmacion(self):
        self.articulo.modelo_inventario = ModeloInventario.INTERVALO_FIJO
        self.articulo.save()
        orden = self._crear(cantidad=1)
        self.assertEqual(orden.estado, EstadoOrdenCompra.PENDIENTE)

    def test_ordenes_activas_generan_advertencia(self):
        self._crear()
        resultado = self.service.crear_orden(self.articulo.pk, 20)
        self.assertEqual(resultado.advertencias, ["El artículo ya tiene 1 orden(es) activa(s)"])
        self.assertEqual(OrdenCompra.objects.count(), 2)

    def test_sin_proveedor(self):
        self.link.delete()
        with self.assertRaises(NoSupplierAssociatedError):
            self._crear()

    def test_cantidad_invalida(self):
        for cantidad in (0, -3, True, '5'):
            with self.subTest(cantidad=cantidad):
                with self.assertRaises(ValidationError):
                    self.service.crear_orden(self.articulo.pk, cantidad)

    def test_articulo_dado_de_baja(self):
        self.articulo.fecha_hora_baja = timezone.now()
        self.articulo.save()
        with self.assertRaises(ValidationError):
            self._crear()

    def test_transiciones_ilegales_no_cambian_estado(self):
        orden = self._crear()
        with self.assertRaises(IllegalTransitionError):
            self.service.finalizar(orden.pk)
        orden.refresh_from_db()
        self.assertEqual(orden.estado, EstadoOrdenCompra.PENDIENTE)

        self.service.enviar(orden.pk)
        for operacion in (self.service.enviar, self.service.cancelar):
            with self.assertRaises(IllegalTransitionError):
                operacion(orden.pk)
        orden.refresh_from_db()
        self.assertEqual(orden.estado, EstadoOrdenCompra.ENVIADA)

    def test_estados_terminales(self):
        cancelada = self._crear()
        self.service.cancelar(cancelada.pk)
        for operacion in (self.service.enviar, self.service.finalizar, self.service.cancelar):
            with self.assertRaises(IllegalTransitionError):
                operacion(cancelada.pk)

        finalizada = self._crear()
        self.service.enviar(finalizada.pk)
        self.service.finalizar(finalizada.pk)
        for operacion in (self.service.enviar, self.service.finalizar, self.service.cancelar):
            with self.assertRaises(IllegalTransitionError):
                operacion(finalizada.pk)

    def test_finalizar_ingresa_stock_una_sola_vez(self):
        orden = self._crear(cantidad=20)
        self.service.enviar(orden.pk)
        self.service.finalizar(orden.pk)
        self.articulo.refresh_from_db()
        self.assertEqual(self.articulo.stock_actual, 25)

        with self.assertRaises(IllegalTransitionError):
            self.service.finalizar(orden.pk)
        self.articulo.refresh_from_db()
        self.assertEqual(self.articulo.stock_actual, 25)

    def test_monto_invariante(self):
        orden = self._crear(cantidad=4, confirmar=True)
        self.link.precio_unitario = Decimal('9.99')
        self.link.save()
        self.service.enviar(orden.pk)
        self.service.finalizar(orden.pk)
        orden.refresh_from_db()
        self.assertEqual(orden.monto_compra, Decimal('10.00'))

    def test_historial_de_estados(self):
        orden = self._crear()
        self.service.enviar(orden.pk)
        historial = list(HistorialEstadoOrden.objects.filter(orden=orden).order_by('fecha_cambio'))
        self.assertEqual(
            [(h.estado_anterior, h.estado_nuevo) for h in historial],
            [(None, EstadoOrdenCompra.PENDIENTE), (EstadoOrdenCompra.PENDIENTE, EstadoOrdenCompra.ENVIADA)]
        )

    def test_tabla_de_transiciones(self):
        self.assertEqual(
            {(t.origen, t.destino) for t in TRANSICIONES.values()},
            {
                (EstadoOrdenCompra.PENDIENTE, EstadoOrdenCompra.ENVIADA),
                (EstadoOrdenCompra.ENVIADA, EstadoOrdenCompra.FINALIZADA),
                (EstadoOrdenCompra.PENDIENTE, EstadoOrdenCompra.CANCELADA),
            }
        )
        estados = {e['codigo']: e for e in listar_estados()}
        self.assertTrue(estados['FINALIZADA']['terminal'])
        self.assertEqual(estados['PENDIENTE']['siguientes'], ['ENVIADA', 'CANCELADA'])

    def test_estadisticas(self):
        self._crear(cantidad=20)
        cancelada = self._crear(cantidad=20)
        self.service.cancelar(cancelada.pk)
        self.articulo.costo_compra = Decimal('10.00')
        self.articulo.save()
        Venta.objects.create(articulo=self.articulo, cantidad_vendida=2)

        resumen = self.service.estadisticas()
        self.assertEqual(resumen['total_ordenes'], 2)
        self.assertEqual(resumen['ordenes_activas'], 1)
        self.assertEqual(resumen['ordenes_por_estado']['CANCELADA'], 1)
        self.assertEqual(resumen['monto_total_compras'], Decimal('50.00'))
        self.assertEqual(resumen['unidades_vendidas'], 2)
        self.assertEqual(resumen['valor_venta_estimado'], Decimal('26.00'))


class OrdenAPITestCase(APITestCase):
    def setUp(self):
        self.admin_user = User.objects.create_user(username='admin', password='password123', is_staff=True)
        self.client.force_authenticate(user=self.admin_user)

        self.articulo = Articulo.objects.create(
            nombre='Tornillo',
            stock_actual=5,
            punto_pedido=10,
            modelo_inventario=ModeloInventario.LOTE_FIJO
        )
        self.proveedor = Proveedor.objects.create(nombre='Bulonera Sur')
        ArticuloProveedor.objects.create(
            proveedor=self.proveedor,
            articulo=self.articulo,
            precio_unitario=Decimal('2.50')
        )

    def test_escenario_confirmacion_envio_y_cancelacion(self):
        url = reverse('orden-list')
        data = {'cod_articulo': self.articulo.pk, 'cantidad': 3}

        response = self.client.post(url, data, format='json')
        self.assertEqual(response.status_code, status.HTTP_409_CONFLICT)
        self.assertEqual(response.data['code'], 'requires_confirmation')
        self.assertTrue(response.data['requiere_confirmacion'])
        self.assertEqual(response.data['stock_proyectado'], 8)
        self.assertFalse(OrdenCompra.objects.exists())

        response = self.client.post(url, {**data, 'confirmar': True}, format='json')
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        orden = response.data['data']
        self.assertEqual(orden['estado'], 'PENDIENTE')
        self.assertEqual(orden['monto_compra'], Decimal('7.50'))
        numero = orden['numero_orden']

        response = self.client.put(reverse('orden-enviar', args=[numero]), format='json')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['data']['estado'], 'ENVIADA')

        response = self.client.delete(reverse('orden-cancelar', args=[numero]))
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data['code'], 'illegal_transition')
        self.assertEqual(OrdenCompra.objects.get(pk=numero).estado, EstadoOrdenCompra.ENVIADA)

    def test_finalizar_por_api(self):
        response = self.client.post(
            reverse('orden-list'),
            {'cod_articulo': self.articulo.pk, 'cantidad': 20},
            format='json'
        )
        numero = response.data['data']['numero_orden']
        self.client.put(reverse('orden-enviar', args=[numero]), format='json')
        response = self.client.put(reverse('orden-finalizar', args=[numero]), format='json')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['data']['estado'], 'FINALIZADA')
        self.articulo.refresh_from_db()
        self.assertEqual(self.articulo.stock_actual, 25)

    def test_sin_proveedor_asociado(self):
        otro = Articulo.objects.create(nombre='Arandela', stock_actual=50)
        response = self.client.post(reverse('orden-list'), {'cod_articulo': otro.pk, 'cantidad': 5}, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data['code'], 'no_supplier_associated')

    def test_articulo_inexistente(self):
        response = self.client.post(reverse('orden-list'), {'cod_articulo': 9999, 'cantidad': 5}, format='json')
        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)

    def test_ordenes_por_articulo(self):
        service = OrdenCompraService()
        activa = service.crear_orden(self.articulo.pk, 20).orden
        cancelada = service.crear_orden(self.articulo.pk, 20).orden
        service.cancelar(cancelada.pk)

        todas = self.client.get(reverse('orden-por-articulo', kwargs={'cod_articulo': self.articulo.pk}))
        self.assertEqual(todas.data['count'], 2)

        activas = self.client.get(reverse('orden-activas-por-articulo', kwargs={'cod_articulo': self.articulo.pk}))
        self.assertEqual(activas.data['count'], 1)
        self.assertEqual(activas.data['data'][0]['numero_orden'], activa.pk)

        vacio = self.client.get(reverse('orden-por-articulo', kwargs={'cod_articulo': 9999}))
        self.assertEqual(vacio.status_code, status.HTTP_200_OK)
        self.assertEqual(vacio.data['count'], 0)

    def test_ordenes_por_articulo_con_codigo_no_numerico(self):
        OrdenCompraService().crear_orden(self.articulo.pk, 20)
        for nombre in ('orden-por-articulo', 'orden-activas-por-articulo'):
            with self.subTest(ruta=nombre):
                response = self.client.get(reverse(nombre, kwargs={'cod_articulo': 'abc'}))
                self.assertEqual(response.status_code, status.HTTP_200_OK)
                self.assertEqual(response.data['count'], 0)
                self.assertEqual(response.data['data'], [])

    def test_filtrar_por_estado(self):
        OrdenCompraService().crear_orden(self.articulo.pk, 20)
        response = self.client.get(reverse('orden-list'), {'estado': 'ENVIADA'})
        self.assertEqual(response.data['count'], 0)
        response = self.client.get(reverse('orden-list'), {'estado': 'PENDIENTE'})
        self.assertEqual(response.data['count'], 1)

    def test_estados_oc(self):
        response = self.client.get(reverse('estados-oc'))
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        codigos = [estado['codigo'] for estado in response.data['data']]
        self.assertEqual(codigos, ['PENDIENTE', 'ENVIADA', 'FINALIZADA', 'CANCELADA'])

    def test_historial_registra_usuario(self):
        response = self.client.post(
            reverse('orden-list'),
            {'cod_articulo': self.articulo.pk, 'cantidad': 20, 'motivo': 'Reposición semanal'},
            format='json'
        )
        numero = response.data['data']['numero_orden']
        historial = self.client.get(reverse('historial-estado-por-orden', kwargs={'numero_orden': numero}))
        self.assertEqual(historial.status_code, status.HTTP_200_OK)
        registro = historial.data['historial'][0]
        self.assertEqual(registro['usuario'], 'admin')
        self.assertEqual(registro['motivo'], 'Reposición semanal')
        self.assertEqual(registro['estado_nuevo'], 'PENDIENTE')
