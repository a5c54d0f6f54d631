"""
URL Configuration para a Concessionária.

Estrutura:
- /admin/ - Django Admin
- /veiculos/ - Webhook de pagamento e API de veículos
- /health/ - Liveness + banco de dados
"""

from django.contrib import admin
from django.http import JsonResponse
from django.urls import path, include

from src.adapters.django_app.shared.database import check_database_connection


def health(request):
    """Health check: 200 se o banco responde, 503 caso contrário."""
    database = check_database_connection()
    status = 'ok' if database['healthy'] else 'degraded'
    return JsonResponse(
        {'status': status, 'database': database},
        status=200 if database['healthy'] else 503,
    )


urlpatterns = [
    path('admin/', admin.site.urls),
    path('veiculos/', include('src.adapters.django_app.veiculos.urls')),
    path('health/', health, name='health'),
]
