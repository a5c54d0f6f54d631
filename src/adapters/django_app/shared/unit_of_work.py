"""
Unit of Work - Implementação Django.

Gerencia a transação de cada use case, garantindo consistência
entre a escrita do veículo e a publicação dos eventos.

Responsabilidades:
- Iniciar/finalizar transações (django.db.transaction.atomic)
- Commit/Rollback coordenado
- Publicar eventos após commit bem-sucedido (best-effort)

Eventos nunca são publicados para uma escrita que foi desfeita, e
uma falha na publicação nunca desfaz uma escrita já confirmada.
"""

from typing import List, Optional
import logging

from django.db import transaction

from src.core.shared.interfaces import UnitOfWork, EventPublisher
from src.core.shared.events import DomainEvent

logger = logging.getLogger(__name__)


class DjangoUnitOfWork(UnitOfWork):
    """
    Implementação Django do Unit of Work.

    Entra manualmente em um bloco `transaction.atomic()`; quando já existe
    uma transação externa (ex: testes com pytest-django), vira um savepoint.

    Example:
        with DjangoUnitOfWork(event_publisher) as uow:
            repo.atualizar(veiculo.id, veiculo.dados_de_venda())
            uow.publish_event(VeiculoVendidoEvent(...))
        # Commit automático + eventos publicados

    Example com rollback:
        with DjangoUnitOfWork() as uow:
            repo.atualizar(...)
            uow.publish_event(...)
            raise ValorPagoDivergenteError(...)
        # Rollback automático, eventos descartados
    """

    def __init__(
        self,
        event_publisher: Optional[EventPublisher] = None,
        using: Optional[str] = None,
    ):
        """
        Inicializa Unit of Work.

        Args:
            event_publisher: Publicador de eventos (Logging, Celery...)
            using: Alias do banco (default do Django se None)
        """
        super().__init__()
        self._event_publisher = event_publisher
        self._using = using
        self._atomic = None
        self._committed = False
        self._rolled_back = False

    def _begin_transaction(self) -> None:
        if self._atomic is not None:
            raise RuntimeError("Unit of Work já possui transação ativa")

        self._committed = False
        self._rolled_back = False
        self.clear_events()

        self._atomic = transaction.atomic(using=self._using)
        self._atomic.__enter__()
        logger.debug("Transaction started")

    def commit(self) -> None:
        """
        Confirma a transação e publica os eventos enfileirados.

        Ordem:
        1. Commit no banco
        2. Publicação dos eventos (falhas são logadas, não propagadas)
        3. Limpeza do estado interno
        """
        if self._atomic is None:
            logger.warning("Commit sem transação ativa")
            return

        atomic, self._atomic = self._atomic, None
        try:
            atomic.__exit__(None, None, None)
        except Exception as e:
            logger.error(f"Commit failed: {e}")
            self._rolled_back = True
            self.clear_events()
            raise

        self._committed = True
        logger.debug("Transaction committed")

        if self._events:
            self._publish_events()

    def rollback(self) -> None:
        """
        Desfaz todas as mudanças e descarta eventos.

        Chamado automaticamente se exceção ocorrer dentro do contexto.
        """
        if self._atomic is None:
            return

        atomic, self._atomic = self._atomic, None
        try:
            transaction.set_rollback(True, using=self._using)
            atomic.__exit__(None, None, None)
            logger.debug("Transaction rolled back")
        finally:
            self._rolled_back = True
            self.clear_events()

    def _publish_events(self) -> None:
        """
        Publica eventos após commit.

        Se event_publisher não estiver configurado, apenas loga.
        """
        for event in self._events:
            logger.info(
                f"Publishing event: {event.event_type} "
                f"for aggregate {event.aggregate_id}"
            )

            if self._event_publisher:
                try:
                    self._event_publisher.publish(event)
                except Exception as e:
                    # Best-effort: a transição já está confirmada
                    logger.error(f"Failed to publish event {event.event_type}: {e}")

        self.clear_events()

    @property
    def is_committed(self) -> bool:
        return self._committed

    @property
    def is_rolled_back(self) -> bool:
        return self._rolled_back


class InMemoryUnitOfWork(UnitOfWork):
    """
    Unit of Work em memória para testes.

    Não persiste nada; registra commits, rollbacks e eventos
    "publicados" para asserções.

    Example:
        uow = InMemoryUnitOfWork()
        with uow:
            uow.publish_event(event)

        assert uow.committed
        assert len(uow.published_events) == 1
    """

    def __init__(self, event_publisher: Optional[EventPublisher] = None):
        super().__init__()
        self._event_publisher = event_publisher
        self._committed = False
        self._rolled_back = False
        self._published_events: List[DomainEvent] = []

    def _begin_transaction(self) -> None:
        self._committed = False
        self._rolled_back = False

    def commit(self) -> None:
        self._committed = True
        self._published_events.extend(self._events)
        if self._event_publisher:
            self._event_publisher.publish_batch(list(self._events))
        self.clear_events()

    def rollback(self) -> None:
        self._rolled_back = True
        self.clear_events()

    @property
    def committed(self) -> bool:
        return self._committed

    @property
    def rolled_back(self) -> bool:
        return self._rolled_back

    @property
    def published_events(self) -> List[DomainEvent]:
        """Retorna eventos que foram 'publicados'."""
        return self._published_events

    def reset(self) -> None:
        """Reset para próximo teste."""
        self._committed = False
        self._rolled_back = False
        self._published_events.clear()
        self.clear_events()
