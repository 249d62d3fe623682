from rest_framework import permissions


class PuedeRegistrarVentas(permissions.BasePermission):
    """
    Lectura para cualquier usuario autenticado; registrar ventas requiere
    ser staff o tener el permiso ventas.add_venta.
    """
    def has_permission(self, request, view):
        if not (request.user and request.user.is_authenticated):
            return False

        if request.method in permissions.SAFE_METHODS:
            return True

        return request.user.is_staff or request.user.has_perm('ventas.add_venta')
