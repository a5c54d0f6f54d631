"""
Event Publishers - Publicadores de Eventos de Domínio.

Responsável por entregar eventos, após commit, aos handlers de
notificação. Implementações:
- LoggingEventPublisher: Loga e executa handlers locais (desenvolvimento)
- CeleryEventPublisher: Publica via Celery (produção)
- InMemoryEventPublisher: Para testes

Entrega é best-effort: falhas são logadas e nunca propagadas ao
use case que gerou o evento.
"""

from typing import List, Callable, Dict
import logging
import json

from src.core.shared.events import DomainEvent
from src.core.shared.interfaces import EventPublisher
from src.core.veiculos.cpf import mascarar_cpf

logger = logging.getLogger(__name__)

EventHandler = Callable[[DomainEvent], None]


def _dados_para_log(dados: Dict) -> Dict:
    """CPF do comprador nunca vai completo para o log."""
    if dados.get("cpf_comprador"):
        return {**dados, "cpf_comprador": mascarar_cpf(dados["cpf_comprador"])}
    return dados


class _HandlerRegistry:
    """Handlers síncronos locais por tipo de evento."""

    def __init__(self):
        self._handlers: Dict[str, List[EventHandler]] = {}

    def register_handler(self, event_type: str, handler: EventHandler) -> None:
        """Registra handler para tipo de evento."""
        self._handlers.setdefault(event_type, []).append(handler)

    def _dispatch_to_handlers(self, event: DomainEvent) -> None:
        for handler in self._handlers.get(event.event_type, []):
            try:
                handler(event)
            except Exception as e:
                logger.error(f"Erro em handler para {event.event_type}: {e}")


class LoggingEventPublisher(_HandlerRegistry, EventPublisher):
    """
    Publisher que loga eventos e executa handlers locais.

    Usado em desenvolvimento (EVENT_PUBLISHER_MODE=sync) para ver os
    eventos e as notificações sem infraestrutura de mensageria.
    """

    def __init__(self, log_level: int = logging.INFO):
        super().__init__()
        self._log_level = log_level

    def publish(self, event: DomainEvent) -> None:
        event_data = event.to_dict()

        logger.log(
            self._log_level,
            f"[EVENT] {event.event_type} | "
            f"aggregate={event.aggregate_id} | "
            f"data={json.dumps(_dados_para_log(event_data['data']), default=str)}"
        )

        self._dispatch_to_handlers(event)


class CeleryEventPublisher(EventPublisher):
    """
    Publisher que envia eventos para Celery.

    Usado em produção (EVENT_PUBLISHER_MODE=celery). Os eventos são
    roteados para a fila `events` pelo dispatch_domain_event.
    """

    def __init__(self, also_log: bool = True):
        self._also_log = also_log

    def publish(self, event: DomainEvent) -> None:
        from src.adapters.django_app.events.handlers import dispatch_domain_event

        if self._also_log:
            logger.info(
                f"[EVENT->CELERY] {event.event_type} | "
                f"aggregate={event.aggregate_id}"
            )

        try:
            dispatch_domain_event.delay(event.event_type, event.to_dict())
        except Exception as e:
            # Broker indisponível não quebra o fluxo principal
            logger.error(f"Falha ao publicar evento no Celery: {e}", exc_info=True)


class InMemoryEventPublisher(_HandlerRegistry, EventPublisher):
    """
    Publisher em memória para testes.

    Armazena eventos publicados para verificação em testes.
    """

    def __init__(self):
        super().__init__()
        self._published_events: List[DomainEvent] = []

    def publish(self, event: DomainEvent) -> None:
        self._published_events.append(event)
        self._dispatch_to_handlers(event)

    @property
    def published_events(self) -> List[DomainEvent]:
        return self._published_events.copy()

    def clear(self) -> None:
        self._published_events.clear()

    def get_events_by_type(self, event_type: str) -> List[DomainEvent]:
        """Filtra eventos por tipo."""
        return [e for e in self._published_events if e.event_type == event_type]


def get_event_publisher(mode: str = "sync") -> EventPublisher:
    """
    Factory para obter publisher apropriado.

    Args:
        mode: 'sync' (log + notificações no processo) ou 'celery'

    Returns:
        Publisher configurado

    Raises:
        ValueError: Se modo desconhecido
    """
    if mode == "celery":
        return CeleryEventPublisher()

    if mode == "sync":
        from src.adapters.django_app.events.handlers import registrar_handlers_locais

        publisher = LoggingEventPublisher()
        registrar_handlers_locais(publisher)
        return publisher

    raise ValueError(f"EVENT_PUBLISHER_MODE inválido: {mode} (use 'sync' ou 'celery')")
