from django.apps import AppConfig


class AuditoriaConfig(AppConfig):
    default_auto_field = 'django.db.models.BigAutoField'
    name = 'auditoria'

    def ready(self):
        # Registra los receivers de cambios de estado
        from auditoria import signals  # noqa: F401
