"""
Configuração do Django App para Veículos.
"""

from django.apps import AppConfig


class VeiculosConfig(AppConfig):
    """Configuração do app Veículos."""

    default_auto_field = 'django.db.models.BigAutoField'
    name = 'src.adapters.django_app.veiculos'
    label = 'veiculos'
    verbose_name = 'Estoque e Vendas de Veículos'
