"""
Testes para o Unit of Work Django.

Verifica:
- Commit grava e publica eventos
- Rollback desfaz escrita e descarta eventos
- Falha do publisher não desfaz escrita confirmada
"""

from unittest.mock import Mock

import pytest

from src.adapters.django_app.events.publishers import InMemoryEventPublisher
from src.adapters.django_app.shared.unit_of_work import DjangoUnitOfWork, InMemoryUnitOfWork
from src.adapters.django_app.veiculos.models import VeiculoModel
from src.core.veiculos.events import VeiculoCadastradoEvent


def _evento(veiculo):
    return VeiculoCadastradoEvent(
        aggregate_id=veiculo.id,
        marca=veiculo.marca,
        modelo=veiculo.modelo,
        ano=veiculo.ano,
        preco=f"{veiculo.preco:.2f}",
    )


@pytest.mark.django_db
class TestDjangoUnitOfWork:

    def test_commit_grava_e_publica(self, django_veiculo_repo, sample_veiculo_entity):
        publisher = InMemoryEventPublisher()
        uow = DjangoUnitOfWork(event_publisher=publisher)

        with uow:
            django_veiculo_repo.save(sample_veiculo_entity)
            uow.publish_event(_evento(sample_veiculo_entity))
            assert publisher.published_events == []

        assert uow.is_committed
        assert VeiculoModel.objects.filter(id=sample_veiculo_entity.id).exists()
        assert len(publisher.get_events_by_type("VeiculoCadastradoEvent")) == 1

    def test_rollback_em_excecao(self, django_veiculo_repo, sample_veiculo_entity):
        publisher = InMemoryEventPublisher()
        uow = DjangoUnitOfWork(event_publisher=publisher)

        with pytest.raises(RuntimeError):
            with uow:
                django_veiculo_repo.save(sample_veiculo_entity)
                uow.publish_event(_evento(sample_veiculo_entity))
                raise RuntimeError("falha no meio da transação")

        assert uow.is_rolled_back
        assert not VeiculoModel.objects.filter(id=sample_veiculo_entity.id).exists()
        assert publisher.published_events == []

    def test_falha_no_publisher_nao_desfaz_commit(self, django_veiculo_repo,
                                                  sample_veiculo_entity):
        publisher = Mock()
        publisher.publish.side_effect = ConnectionError("broker fora do ar")
        uow = DjangoUnitOfWork(event_publisher=publisher)

        with uow:
            django_veiculo_repo.save(sample_veiculo_entity)
            uow.publish_event(_evento(sample_veiculo_entity))

        assert uow.is_committed
        assert VeiculoModel.objects.filter(id=sample_veiculo_entity.id).exists()
        publisher.publish.assert_called_once()

    def test_reutilizavel_entre_operacoes(self, django_veiculo_repo, sample_veiculo_entity):
        uow = DjangoUnitOfWork()

        with uow:
            django_veiculo_repo.save(sample_veiculo_entity)
        with uow:
            pass

        assert uow.is_committed


class TestInMemoryUnitOfWork:

    def test_eventos_publicados_apos_commit(self, inmemory_uow, sample_veiculo_entity):
        with inmemory_uow:
            inmemory_uow.publish_event(_evento(sample_veiculo_entity))
            assert inmemory_uow.published_events == []

        assert inmemory_uow.committed
        assert len(inmemory_uow.published_events) == 1

    def test_eventos_descartados_em_rollback(self, inmemory_uow, sample_veiculo_entity):
        with pytest.raises(ValueError):
            with inmemory_uow:
                inmemory_uow.publish_event(_evento(sample_veiculo_entity))
                raise ValueError("erro")

        assert inmemory_uow.rolled_back
        assert inmemory_uow.published_events == []

    def test_repassa_para_publisher(self, sample_veiculo_entity):
        publisher = InMemoryEventPublisher()
        uow = InMemoryUnitOfWork(event_publisher=publisher)

        with uow:
            uow.publish_event(_evento(sample_veiculo_entity))

        assert len(publisher.published_events) == 1
