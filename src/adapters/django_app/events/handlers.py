"""
Event Handlers - Notificações de venda.

Handlers reagem aos Domain Events do ciclo de venda após o commit:
- VeiculoVendidoEvent: confirma a compra ao comprador e avisa o comercial
- VeiculoReservadoEvent: avisa o comercial sobre a reserva
- VeiculoDevolvidoAoEstoqueEvent: avisa o comercial sobre o cancelamento
- VeiculoCadastradoEvent: registra entrada no estoque

São tarefas Celery (fila `events`) quando EVENT_PUBLISHER_MODE=celery, e
chamadas no próprio processo quando EVENT_PUBLISHER_MODE=sync. Em ambos os
casos são best-effort: nunca afetam a transição já confirmada.

Padrão:
    @shared_task(bind=True, ...)
    def handle_<evento>(self, event_data: dict) -> None:
        ...
"""

import logging
from typing import Dict, Any

from celery import shared_task

from src.core.veiculos.cpf import mascarar_cpf

logger = logging.getLogger(__name__)

CANAL_COMPRADOR = "comprador"
CANAL_COMERCIAL = "comercial"


def _dados(event_data: Dict[str, Any]) -> Dict[str, Any]:
    return event_data.get("data", {})


def enviar_notificacao(canal: str, destinatario: str, mensagem: str) -> None:
    """
    Envia notificação.

    Hoje apenas registra em log; o CPF nunca aparece completo.
    """
    logger.info(f"[NOTIFICATION] {canal.upper()} -> {destinatario}: {mensagem}")


# =============================================================================
# Event Handlers - Veículos
# =============================================================================

@shared_task(
    bind=True,
    max_retries=3,
    default_retry_delay=60,
    acks_late=True,
)
def handle_veiculo_vendido(self, event_data: Dict[str, Any]) -> None:
    """
    Handler para VeiculoVendidoEvent.

    Ações:
    - Confirmar compra ao comprador
    - Notificar equipe comercial
    """
    veiculo_id = event_data.get("aggregate_id")
    dados = _dados(event_data)
    codigo = dados.get("codigo_pagamento")

    logger.info(f"[HANDLER] VeiculoVendido: {veiculo_id} | Pagamento: {codigo}")

    enviar_notificacao(
        CANAL_COMPRADOR,
        mascarar_cpf(dados.get("cpf_comprador") or ""),
        f"Compra do veículo {veiculo_id} confirmada (pagamento {codigo}).",
    )
    enviar_notificacao(
        CANAL_COMERCIAL,
        "vendas",
        f"Venda concluída: veículo {veiculo_id} por R$ {dados.get('valor_pago')}.",
    )


@shared_task(
    bind=True,
    max_retries=3,
    default_retry_delay=60,
    acks_late=True,
)
def handle_veiculo_reservado(self, event_data: Dict[str, Any]) -> None:
    """Handler para VeiculoReservadoEvent."""
    veiculo_id = event_data.get("aggregate_id")
    dados = _dados(event_data)

    acao = "Reserva renovada" if dados.get("renovacao") else "Veículo reservado"
    logger.info(f"[HANDLER] VeiculoReservado: {veiculo_id} | {acao}")

    enviar_notificacao(
        CANAL_COMERCIAL,
        "vendas",
        f"{acao}: {veiculo_id} aguardando pagamento {dados.get('codigo_pagamento')}.",
    )


@shared_task(
    bind=True,
    max_retries=3,
    default_retry_delay=60,
    acks_late=True,
)
def handle_veiculo_devolvido(self, event_data: Dict[str, Any]) -> None:
    """
    Handler para VeiculoDevolvidoAoEstoqueEvent.

    Venda cancelada: avisa o comercial que o veículo voltou ao estoque.
    """
    veiculo_id = event_data.get("aggregate_id")
    dados = _dados(event_data)

    logger.info(
        f"[HANDLER] VeiculoDevolvido: {veiculo_id} | "
        f"{dados.get('status_anterior')} -> A_VENDA ({dados.get('status_pagamento')})"
    )

    enviar_notificacao(
        CANAL_COMERCIAL,
        "vendas",
        f"Pagamento {dados.get('codigo_pagamento')} {dados.get('status_pagamento')}: "
        f"veículo {veiculo_id} voltou ao estoque.",
    )


@shared_task(bind=True, ignore_result=True)
def handle_veiculo_cadastrado(self, event_data: Dict[str, Any]) -> None:
    dados = _dados(event_data)
    logger.info(
        f"[HANDLER] VeiculoCadastrado: {event_data.get('aggregate_id')} | "
        f"{dados.get('marca')} {dados.get('modelo')} {dados.get('ano')} "
        f"R$ {dados.get('preco')}"
    )


HANDLERS = {
    "VeiculoVendidoEvent": handle_veiculo_vendido,
    "VeiculoReservadoEvent": handle_veiculo_reservado,
    "VeiculoDevolvidoAoEstoqueEvent": handle_veiculo_devolvido,
    "VeiculoCadastradoEvent": handle_veiculo_cadastrado,
}


# =============================================================================
# Event Dispatcher (Router)
# =============================================================================

@shared_task(bind=True, max_retries=5, default_retry_delay=30)
def dispatch_domain_event(self, event_type: str, event_data: Dict[str, Any]) -> None:
    """
    Dispatcher central para Domain Events.

    Roteia eventos para os handlers apropriados.

    Args:
        event_type: Tipo do evento (ex: 'VeiculoVendidoEvent')
        event_data: Evento serializado (DomainEvent.to_dict)
    """
    handler = HANDLERS.get(event_type)

    if handler:
        logger.info(f"[DISPATCHER] Roteando {event_type} para handler")
        handler.delay(event_data)
    else:
        logger.warning(f"[DISPATCHER] Handler não encontrado para {event_type}")


def registrar_handlers_locais(publisher) -> None:
    """
    Registra os handlers para execução no próprio processo.

    Usado pelo LoggingEventPublisher (modo sync): a tarefa é chamada
    diretamente, sem passar pelo broker.
    """
    for event_type, task in HANDLERS.items():
        publisher.register_handler(
            event_type,
            lambda event, task=task: task(event.to_dict()),
        )
