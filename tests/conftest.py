"""
Configurações globais do Pytest para a Concessionária.

Este arquivo é carregado automaticamente pelo pytest e
fornece fixtures e configurações compartilhadas.

Django é configurado pelo pytest-django (src.config.settings_test).
"""

import pytest
from decimal import Decimal
from pathlib import Path


@pytest.fixture(scope="session")
def project_root():
    """Retorna o caminho raiz do projeto."""
    return Path(__file__).parent.parent


@pytest.fixture
def sample_veiculo_entity():
    """Veículo A_VENDA de R$ 85.000,00."""
    from src.core.veiculos.entities import VeiculoEntity

    return VeiculoEntity.criar(
        marca="Toyota",
        modelo="Corolla",
        ano=2023,
        cor="Prata",
        preco=Decimal("85000.00"),
    )


@pytest.fixture(autouse=True)
def reset_di_container():
    """
    Reset do container de DI entre testes.

    Garante que cada teste inicia com estado limpo (publisher singleton).
    """
    yield
    from src.config.container import reset_container
    reset_container()


def pytest_collection_modifyitems(config, items):
    """Pula testes de integração sem --run-integration."""
    if config.getoption("--run-integration"):
        return

    skip_integration = pytest.mark.skip(reason="Integration tests require --run-integration")
    for item in items:
        if "integration" in item.keywords:
            item.add_marker(skip_integration)


def pytest_addoption(parser):
    """Adiciona opções de linha de comando."""
    parser.addoption(
        "--run-integration",
        action="store_true",
        default=False,
        help="run integration tests",
    )
