"""
WSGI config para a Concessionária.

Inicializa os recursos do container (conexão de banco) junto com o
processo e os encerra na saída.
"""

import atexit
import os

from django.core.wsgi import get_wsgi_application

os.environ.setdefault('DJANGO_SETTINGS_MODULE', 'src.config.settings')

application = get_wsgi_application()

from src.config.container import get_container  # noqa: E402

_container = get_container()
_container.init_resources()
atexit.register(_container.shutdown_resources)
