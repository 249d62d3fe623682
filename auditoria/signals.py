import threading

from django.db.models.signals import pre_save, post_save
from django.dispatch import receiver

from auditoria.models import HistorialEstadoOrden
from ordenes.models import OrdenCompra


# Variable thread-local para almacenar el usuario y motivo durante la solicitud
_thread_locals = threading.local()


def set_current_user(user):
    """Establece el usuario actual en el contexto thread-local"""
    _thread_locals.user = user


def get_current_user():
    """Obtiene el usuario actual del contexto thread-local"""
    return getattr(_thread_locals, 'user', None)


def set_audit_motivo(motivo):
    """Establece el motivo de auditoría en el contexto thread-local"""
    _thread_locals.motivo = motivo


def get_audit_motivo():
    """Obtiene el motivo de auditoría del contexto thread-local"""
    return getattr(_thread_locals, 'motivo', None)


def _nombre_usuario(usuario):
    if usuario is None or not getattr(usuario, 'is_authenticated', False):
        return 'sistema'
    return usuario.get_username()


@receiver(pre_save, sender=OrdenCompra)
def orden_compra_pre_save(sender, instance, **kwargs):
    """
    Captura el estado anterior antes de guardar para registrarlo en el historial
    """
    instance._estado_anterior = None
    if instance.pk:
        instance._estado_anterior = (
            OrdenCompra.objects.filter(pk=instance.pk).values_list('estado', flat=True).first()
        )


@receiver(post_save, sender=OrdenCompra)
def orden_compra_post_save(sender, instance, created, **kwargs):
    """
    Registra la creación de la orden y cada cambio de estado
    """
    estado_anterior = getattr(instance, '_estado_anterior', None)

    if not created and estado_anterior == instance.estado:
        return

    if created:
        motivo = get_audit_motivo() or "Creación de orden de compra"
        estado_anterior = None
    else:
        motivo = get_audit_motivo() or f"Cambio de estado {estado_anterior} -> {instance.estado}"

    HistorialEstadoOrden.objects.create(
        orden=instance,
        estado_anterior=estado_anterior,
        estado_nuevo=instance.estado,
        usuario=_nombre_usuario(get_current_user()),
        motivo=motivo
    )
