"""
Configuração pytest para testes com Django.

Django é configurado pelo pytest-django (src.config.settings_test):
- Banco SQLite em memória, criado pelas migrations
- EVENT_PUBLISHER_MODE=sync

Fixtures compartilhadas dos adapters.
"""

import uuid
from decimal import Decimal

import pytest


@pytest.fixture
def veiculo_model_factory(db):
    """Factory para criar VeiculoModel direto no banco."""
    from django.utils import timezone
    from src.adapters.django_app.veiculos.models import VeiculoModel

    def create_veiculo(**kwargs):
        agora = timezone.now()
        defaults = {
            'id': str(uuid.uuid4()),
            'marca': 'Toyota',
            'modelo': 'Corolla',
            'ano': 2023,
            'cor': 'Prata',
            'preco': Decimal('85000.00'),
            'status': 'A_VENDA',
            'criado_em': agora,
            'atualizado_em': agora,
        }
        defaults.update(kwargs)
        return VeiculoModel.objects.create(**defaults)

    return create_veiculo


@pytest.fixture
def django_veiculo_repo():
    from src.adapters.django_app.veiculos.repositories import DjangoVeiculoRepository
    return DjangoVeiculoRepository()


@pytest.fixture
def inmemory_veiculo_repo():
    """Repositório em memória para testes unitários."""
    from src.core.veiculos.ports import InMemoryVeiculoRepository
    return InMemoryVeiculoRepository()


@pytest.fixture
def inmemory_uow():
    """Unit of Work em memória para testes unitários."""
    from src.adapters.django_app.shared.unit_of_work import InMemoryUnitOfWork
    return InMemoryUnitOfWork()
