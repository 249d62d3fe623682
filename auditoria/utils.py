from contextlib import contextmanager
from auditoria.signals import set_current_user, set_audit_motivo, get_current_user, get_audit_motivo


@contextmanager
def auditoria_context(usuario, motivo=None):
    """
    Context manager para establecer el contexto de auditoría temporalmente

    Uso:
        with auditoria_context(request.user, motivo="Mercadería recibida"):
            servicio.finalizar(numero_orden)
    """
    usuario_anterior = get_current_user()
    motivo_anterior = get_audit_motivo()

    try:
        set_current_user(usuario)
        if motivo:
            set_audit_motivo(motivo)
        yield
    finally:
        set_current_user(usuario_anterior)
        set_audit_motivo(motivo_anterior)


def obtener_historial_orden(orden, limit=None):
    """
    Obtiene el historial de estados de una orden, del más antiguo al más reciente

    Args:
        orden: Instancia de OrdenCompra o su número
        limit: Número máximo de registros a retornar
    """
    from auditoria.models import HistorialEstadoOrden

    queryset = HistorialEstadoOrden.objects.filter(orden=orden).order_by('fecha_cambio')
    if limit:
        queryset = queryset[:limit]
    return queryset
