"""
URL patterns para o domínio de Veículos.

Webhook (provedor de pagamento):
- POST /veiculos/webhook/pagamento/ - Notificação de pagamento
- GET /veiculos/webhook/pagamento/<veiculo_id>/ - Situação de venda

Endpoints API JSON:
- GET /veiculos/api/ - Listar veículos
- POST /veiculos/api/ - Cadastrar veículo
- GET /veiculos/api/<id>/ - Obter veículo
- PATCH /veiculos/api/<id>/ - Editar veículo
- DELETE /veiculos/api/<id>/ - Excluir veículo
"""

from django.urls import path
from . import api_views

app_name = 'veiculos'

urlpatterns = [
    # =========================================================================
    # Webhook de pagamento
    # =========================================================================

    path('webhook/pagamento/', api_views.WebhookPagamentoView.as_view(), name='webhook_pagamento'),
    path(
        'webhook/pagamento/<str:veiculo_id>/',
        api_views.StatusPagamentoView.as_view(),
        name='status_pagamento',
    ),

    # =========================================================================
    # API JSON
    # =========================================================================

    path('api/', api_views.VeiculoAPIListView.as_view(), name='api_list'),
    path('api/<str:pk>/', api_views.VeiculoAPIDetailView.as_view(), name='api_detail'),
]
