"""
Dependency Injection Container.

Configura e gerencia todas as dependências da aplicação.
Usa dependency-injector para lazy-loading e injeção automática.

Padrões:
- Resource: Ciclo de vida do banco (connect/disconnect)
- Singleton: Uma instância para toda app (repositories, publisher)
- Factory: Nova instância por chamada (services, UoW)
"""

from dependency_injector import containers, providers
from typing import Optional

from django.conf import settings

from src.adapters.django_app.events.publishers import get_event_publisher
from src.adapters.django_app.shared.database import DatabaseConfig, database_lifecycle
from src.adapters.django_app.shared.unit_of_work import DjangoUnitOfWork
from src.adapters.django_app.veiculos.repositories import DjangoVeiculoRepository
from src.core.veiculos.use_cases import (
    ProcessarWebhookPagamentoService,
    ConsultarStatusPagamentoService,
    CadastrarVeiculoService,
    EditarVeiculoService,
    ExcluirVeiculoService,
    ObterVeiculoService,
    ListarVeiculosService,
)


class Container(containers.DeclarativeContainer):
    """
    Container principal de Dependency Injection.

    Organização:
    - Configuration: settings do Django
    - Infrastructure: banco, publisher de eventos
    - Repositories: Persistência
    - Unit of Work: Transações
    - Services: Use Cases

    Example:
        from src.config.container import get_container

        container = get_container()
        service = container.processar_webhook_pagamento_service()
        resultado = service.execute(input_dto)
    """

    # =========================================================================
    # Configuration
    # =========================================================================

    config = providers.Configuration()

    # =========================================================================
    # Infrastructure
    # =========================================================================

    # Conecta em init_resources(), desconecta em shutdown_resources()
    database = providers.Resource(
        database_lifecycle,
        config=providers.Callable(DatabaseConfig.from_env),
    )

    event_publisher = providers.Singleton(
        get_event_publisher,
        mode=config.event_publisher_mode,
    )

    # =========================================================================
    # Repositories (Singleton - uma instância por app)
    # =========================================================================

    veiculo_repository = providers.Singleton(DjangoVeiculoRepository)

    # =========================================================================
    # Unit of Work (Factory - nova instância por operação)
    # =========================================================================

    unit_of_work = providers.Factory(
        DjangoUnitOfWork,
        event_publisher=event_publisher,
    )

    # =========================================================================
    # Services / Use Cases (Factory - nova instância por chamada)
    # =========================================================================

    processar_webhook_pagamento_service = providers.Factory(
        ProcessarWebhookPagamentoService,
        veiculo_repo=veiculo_repository,
        uow=unit_of_work,
    )

    consultar_status_pagamento_service = providers.Factory(
        ConsultarStatusPagamentoService,
        veiculo_repo=veiculo_repository,
    )

    cadastrar_veiculo_service = providers.Factory(
        CadastrarVeiculoService,
        veiculo_repo=veiculo_repository,
        uow=unit_of_work,
    )

    editar_veiculo_service = providers.Factory(
        EditarVeiculoService,
        veiculo_repo=veiculo_repository,
        uow=unit_of_work,
    )

    excluir_veiculo_service = providers.Factory(
        ExcluirVeiculoService,
        veiculo_repo=veiculo_repository,
        uow=unit_of_work,
    )

    # Leituras (sem UoW)
    obter_veiculo_service = providers.Factory(
        ObterVeiculoService,
        veiculo_repo=veiculo_repository,
    )

    listar_veiculos_service = providers.Factory(
        ListarVeiculosService,
        veiculo_repo=veiculo_repository,
    )


# =============================================================================
# Container Global (Singleton)
# =============================================================================

_container: Optional[Container] = None


def get_container() -> Container:
    """
    Retorna instância global do container.

    Cria se não existir (lazy initialization), lendo a configuração
    das settings do Django.
    """
    global _container

    if _container is None:
        _container = Container()
        _container.config.from_dict({
            'event_publisher_mode': getattr(settings, 'EVENT_PUBLISHER_MODE', 'sync'),
        })

    return _container


def reset_container() -> None:
    """
    Reset do container (para testes).

    Encerra recursos abertos e permite criar novo container limpo.
    """
    global _container

    if _container is not None:
        _container.shutdown_resources()
    _container = None
