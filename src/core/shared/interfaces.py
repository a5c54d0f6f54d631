"""
Interfaces (Ports) compartilhadas entre Core e Adapters.

Driven Ports (lado direito do hexágono):
- UnitOfWork: fronteira transacional de cada use case
- EventPublisher: entrega de eventos após commit

Princípio: Core define interfaces; Adapters implementam.
"""

from abc import ABC, abstractmethod
from typing import List

from .events import DomainEvent


class UnitOfWork(ABC):
    """
    Unit of Work - coordena a transação de um use case.

    Pattern: Context Manager
        with uow:
            veiculo = repo.get_by_id(veiculo_id)
            veiculo.voltar_para_venda()
            repo.atualizar(veiculo.id, veiculo.dados_de_venda())
            uow.publish_event(evento)
        # Commit ao sair sem erro, rollback se exceção

    Eventos enfileirados só são publicados após commit; em rollback
    são descartados.
    """

    def __init__(self):
        self._events: List[DomainEvent] = []

    def __enter__(self) -> "UnitOfWork":
        self._begin_transaction()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> bool:
        if exc_type is not None:
            self.rollback()
        else:
            self.commit()
        return False  # Não suprime exceções

    @abstractmethod
    def _begin_transaction(self) -> None:
        """Inicia uma nova transação."""
        raise NotImplementedError

    @abstractmethod
    def commit(self) -> None:
        """
        Persiste as mudanças e publica eventos.

        Ordem: commit no banco, depois publicação dos eventos
        enfileirados, depois limpeza do estado interno.
        """
        raise NotImplementedError

    @abstractmethod
    def rollback(self) -> None:
        """Desfaz as mudanças e descarta eventos."""
        raise NotImplementedError

    def publish_event(self, event: DomainEvent) -> None:
        """
        Enfileira evento para publicação após commit.

        Args:
            event: Evento de domínio a ser publicado
        """
        self._events.append(event)

    def collect_events(self) -> List[DomainEvent]:
        """Retorna eventos enfileirados (para testing/debugging)."""
        return list(self._events)

    def clear_events(self) -> None:
        self._events.clear()


class EventPublisher(ABC):
    """
    Interface para publicação de eventos.

    Implementações vivem em src/adapters/django_app/events/publishers.py
    (Logging, Celery, InMemory).
    """

    @abstractmethod
    def publish(self, event: DomainEvent) -> None:
        """Publica evento para consumidores."""
        raise NotImplementedError

    def publish_batch(self, events: List[DomainEvent]) -> None:
        """Publica múltiplos eventos, na ordem recebida."""
        for event in events:
            self.publish(event)
