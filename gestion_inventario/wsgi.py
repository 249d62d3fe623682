"""
WSGI config for gestion_inventario.
"""
import os

from django.core.wsgi import get_wsgi_application

os.environ.setdefault('DJANGO_SETTINGS_MODULE', 'gestion_inventario.settings')

application = get_wsgi_application()
