"""
Testes para publishers e handlers de Domain Events.

Verifica:
- Seleção do publisher por EVENT_PUBLISHER_MODE
- Entrega best-effort (falhas logadas, nunca propagadas)
- Notificações sem CPF completo nos logs
"""

import logging
from unittest.mock import patch

import pytest

from src.adapters.django_app.events import handlers
from src.adapters.django_app.events.publishers import (
    CeleryEventPublisher,
    InMemoryEventPublisher,
    LoggingEventPublisher,
    get_event_publisher,
)
from src.core.veiculos.events import VeiculoReservadoEvent, VeiculoVendidoEvent

CPF = "111.444.777-35"


@pytest.fixture
def evento_vendido():
    return VeiculoVendidoEvent(
        aggregate_id="veiculo-1",
        codigo_pagamento="PAY_1",
        cpf_comprador=CPF,
        valor_pago="85000.00",
        data_venda="2024-01-15T10:30:00",
    )


class TestGetEventPublisher:

    def test_modo_sync(self):
        assert isinstance(get_event_publisher("sync"), LoggingEventPublisher)

    def test_modo_celery(self):
        assert isinstance(get_event_publisher("celery"), CeleryEventPublisher)

    def test_modo_invalido(self):
        with pytest.raises(ValueError):
            get_event_publisher("kafka")


class TestLoggingEventPublisher:

    def test_log_mascara_cpf(self, evento_vendido, caplog):
        publisher = LoggingEventPublisher()

        with caplog.at_level(logging.INFO):
            publisher.publish(evento_vendido)

        assert "VeiculoVendidoEvent" in caplog.text
        assert "***.444.777-**" in caplog.text
        assert CPF not in caplog.text

    def test_modo_sync_executa_notificacoes(self, evento_vendido, caplog):
        publisher = get_event_publisher("sync")

        with caplog.at_level(logging.INFO):
            publisher.publish(evento_vendido)

        assert "[NOTIFICATION] COMPRADOR" in caplog.text
        assert "[NOTIFICATION] COMERCIAL" in caplog.text
        assert CPF not in caplog.text

    def test_handler_com_erro_nao_propaga(self, evento_vendido):
        publisher = LoggingEventPublisher()
        chamados = []

        def handler_quebrado(event):
            raise RuntimeError("smtp fora do ar")

        publisher.register_handler("VeiculoVendidoEvent", handler_quebrado)
        publisher.register_handler("VeiculoVendidoEvent", chamados.append)

        publisher.publish(evento_vendido)

        assert chamados == [evento_vendido]


class TestCeleryEventPublisher:

    def test_envia_para_dispatcher(self, evento_vendido):
        with patch.object(handlers.dispatch_domain_event, "delay") as delay:
            CeleryEventPublisher().publish(evento_vendido)

        delay.assert_called_once_with("VeiculoVendidoEvent", evento_vendido.to_dict())

    def test_broker_indisponivel_nao_propaga(self, evento_vendido):
        with patch.object(handlers.dispatch_domain_event, "delay",
                          side_effect=ConnectionError("amqp")):
            CeleryEventPublisher().publish(evento_vendido)

    def test_dispatch_eager_chega_ao_handler(self, evento_vendido, caplog):
        with caplog.at_level(logging.INFO):
            CeleryEventPublisher().publish(evento_vendido)

        assert "[HANDLER] VeiculoVendido: veiculo-1" in caplog.text


class TestInMemoryEventPublisher:

    def test_armazena_e_filtra(self, evento_vendido):
        publisher = InMemoryEventPublisher()
        reservado = VeiculoReservadoEvent(aggregate_id="veiculo-2", codigo_pagamento="PAY_2")

        publisher.publish_batch([evento_vendido, reservado])

        assert len(publisher.published_events) == 2
        assert publisher.get_events_by_type("VeiculoReservadoEvent") == [reservado]

        publisher.clear()
        assert publisher.published_events == []


class TestHandlers:

    def test_dispatcher_ignora_evento_desconhecido(self, caplog):
        with caplog.at_level(logging.WARNING):
            handlers.dispatch_domain_event("EventoInexistente", {})

        assert "Handler não encontrado" in caplog.text

    def test_handler_reservado_renovacao(self, caplog):
        evento = VeiculoReservadoEvent(
            aggregate_id="veiculo-2", codigo_pagamento="PAY_2", renovacao=True,
        )

        with caplog.at_level(logging.INFO):
            handlers.handle_veiculo_reservado(evento.to_dict())

        assert "Reserva renovada" in caplog.text
