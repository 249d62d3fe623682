from auditoria.signals import set_current_user, set_audit_motivo


class AuditoriaMiddleware:
    """
    Toma el usuario de la sesión y el motivo del header X-Audit-Motivo.
    Con JWT el usuario se resuelve en la vista, que usa auditoria_context.
    """

    def __init__(self, get_response):
        self.get_response = get_response

    def __call__(self, request):
        if hasattr(request, 'user') and request.user.is_authenticated:
            set_current_user(request.user)
        else:
            set_current_user(None)

        motivo = request.META.get('HTTP_X_AUDIT_MOTIVO', None)
        set_audit_motivo(motivo or None)

        try:
            return self.get_response(request)
        finally:
            # Limpiar el contexto después de la solicitud
            set_current_user(None)
            set_audit_motivo(None)
