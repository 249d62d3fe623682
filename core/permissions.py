from rest_framework import permissions


class IsAdminOrReadOnly(permissions.BasePermission):
    """
    Permiso personalizado: Solo admins pueden modificar, todos pueden leer.
    """
    def has_permission(self, request, view):
        # Permitir GET, HEAD, OPTIONS para todos los usuarios autenticados
        if request.method in permissions.SAFE_METHODS:
            return bool(request.user and request.user.is_authenticated)

        # Permitir modificaciones solo a admins
        return bool(request.user and request.user.is_staff)
