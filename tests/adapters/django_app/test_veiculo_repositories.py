"""
Testes de Integração para o Repositório Django de Veículos.

Testa a integração entre:
- Django Models ↔ Core Entities (via Mappers)
- Repository ↔ Database (SQLite em memória)
- Escrita parcial com compare-and-swap
"""

from datetime import timedelta
from decimal import Decimal

import pytest
from django.utils import timezone

from src.adapters.django_app.veiculos.mappers import VeiculoMapper
from src.adapters.django_app.veiculos.models import VeiculoModel
from src.core.shared.exceptions import ConcurrencyError
from src.core.veiculos.dtos import ListarVeiculosQueryDTO
from src.core.veiculos.entities import VeiculoEntity, VeiculoStatus
from src.core.veiculos.exceptions import VeiculoNaoEncontradoError

CPF = "111.444.777-35"


# =============================================================================
# Mapper
# =============================================================================

class TestVeiculoMapper:

    def test_to_model_converte_entity(self, sample_veiculo_entity):
        model = VeiculoMapper.to_model(sample_veiculo_entity)

        assert model.id == sample_veiculo_entity.id
        assert model.status == "A_VENDA"
        assert model.preco == Decimal("85000.00")
        assert timezone.is_aware(model.criado_em)

    def test_to_entity_converte_model(self, veiculo_model_factory):
        model = veiculo_model_factory(status="VENDIDO", cpf_comprador=CPF,
                                      data_venda=timezone.now(), codigo_pagamento="PAY_1")

        entity = VeiculoMapper.to_entity(model)

        assert entity.id == model.id
        assert entity.status == VeiculoStatus.VENDIDO
        assert entity.cpf_comprador == CPF

    def test_to_columns(self):
        agora = timezone.now().replace(tzinfo=None)

        colunas = VeiculoMapper.to_columns({
            "status": VeiculoStatus.RESERVADO,
            "atualizado_em": agora,
            "cor": "Azul",
        })

        assert colunas["status"] == "RESERVADO"
        assert timezone.is_aware(colunas["atualizado_em"])
        assert colunas["cor"] == "Azul"


# =============================================================================
# Repository
# =============================================================================

@pytest.mark.django_db
class TestDjangoVeiculoRepository:

    def test_save_e_get_by_id(self, django_veiculo_repo, sample_veiculo_entity):
        django_veiculo_repo.save(sample_veiculo_entity)

        encontrado = django_veiculo_repo.get_by_id(sample_veiculo_entity.id)

        assert encontrado == sample_veiculo_entity
        assert encontrado.marca == "Toyota"
        assert encontrado.preco == Decimal("85000.00")
        assert encontrado.status == VeiculoStatus.A_VENDA

    def test_save_atualiza_existente(self, django_veiculo_repo, sample_veiculo_entity):
        django_veiculo_repo.save(sample_veiculo_entity)
        sample_veiculo_entity.atualizar_dados(cor="Azul")

        django_veiculo_repo.save(sample_veiculo_entity)

        assert VeiculoModel.objects.count() == 1
        assert VeiculoModel.objects.get().cor == "Azul"

    def test_get_by_id_inexistente(self, django_veiculo_repo):
        assert django_veiculo_repo.get_by_id("nao-existe") is None

    def test_atualizar_escrita_parcial(self, django_veiculo_repo, veiculo_model_factory):
        model = veiculo_model_factory()
        veiculo = django_veiculo_repo.get_by_id(model.id)
        observado = veiculo.atualizado_em

        veiculo.marcar_como_vendido(CPF, "PAY_1")
        atualizado = django_veiculo_repo.atualizar(
            veiculo.id, veiculo.dados_de_venda(), atualizado_em_esperado=observado,
        )

        assert atualizado.status == VeiculoStatus.VENDIDO
        assert atualizado.data_venda is not None
        model.refresh_from_db()
        assert model.status == "VENDIDO"
        assert model.cpf_comprador == CPF
        assert model.codigo_pagamento == "PAY_1"
        assert model.atualizado_em > observado

    def test_atualizar_conflito(self, django_veiculo_repo, veiculo_model_factory):
        model = veiculo_model_factory()
        veiculo = django_veiculo_repo.get_by_id(model.id)
        observado = veiculo.atualizado_em

        # Outro processo grava entre a leitura e a escrita
        VeiculoModel.objects.filter(id=model.id).update(
            cor="Azul", atualizado_em=observado + timedelta(seconds=1),
        )

        veiculo.voltar_para_venda()
        with pytest.raises(ConcurrencyError):
            django_veiculo_repo.atualizar(
                veiculo.id, veiculo.dados_de_venda(), atualizado_em_esperado=observado,
            )

        model.refresh_from_db()
        assert model.cor == "Azul"

    def test_atualizar_sem_cas(self, django_veiculo_repo, veiculo_model_factory):
        model = veiculo_model_factory()

        atualizado = django_veiculo_repo.atualizar(model.id, {"cor": "Verde"})

        assert atualizado.cor == "Verde"

    def test_atualizar_inexistente(self, django_veiculo_repo):
        with pytest.raises(VeiculoNaoEncontradoError):
            django_veiculo_repo.atualizar("nao-existe", {"cor": "Azul"})

    def test_delete(self, django_veiculo_repo, veiculo_model_factory):
        model = veiculo_model_factory()

        django_veiculo_repo.delete(model.id)

        assert not django_veiculo_repo.exists(model.id)

    def test_delete_inexistente(self, django_veiculo_repo):
        with pytest.raises(VeiculoNaoEncontradoError):
            django_veiculo_repo.delete("nao-existe")

    def test_list_all_ordenado_por_preco(self, django_veiculo_repo, veiculo_model_factory):
        veiculo_model_factory(modelo="Civic", preco=Decimal("92000"))
        veiculo_model_factory(modelo="Uno", preco=Decimal("25000"))

        modelos = [v.modelo for v in django_veiculo_repo.list_all()]

        assert modelos == ["Uno", "Civic"]

    def test_list_by_status(self, django_veiculo_repo, veiculo_model_factory):
        veiculo_model_factory()
        reservado = veiculo_model_factory(status="RESERVADO", codigo_pagamento="PAY_1")

        resultado = django_veiculo_repo.list_by_status(VeiculoStatus.RESERVADO)

        assert [v.id for v in resultado] == [reservado.id]

    def test_list_with_filters(self, django_veiculo_repo, veiculo_model_factory):
        veiculo_model_factory(marca="Toyota", modelo="Corolla", ano=2023, preco=Decimal("85000"))
        veiculo_model_factory(marca="Toyota", modelo="Yaris", ano=2020, preco=Decimal("60000"))
        veiculo_model_factory(marca="Honda", modelo="Civic", ano=2022, preco=Decimal("92000"))

        resultado = django_veiculo_repo.list_with_filters(
            ListarVeiculosQueryDTO(marca="TOY", ano_min=2020, preco_max=Decimal("85000"),
                                   ordem="DESC")
        )

        assert [v.modelo for v in resultado] == ["Corolla", "Yaris"]

    def test_reconstituir_sem_validacao(self, django_veiculo_repo, veiculo_model_factory):
        """Registros legados inválidos ainda são lidos."""
        model = veiculo_model_factory(cor="", ano=1850)

        veiculo = django_veiculo_repo.get_by_id(model.id)

        assert isinstance(veiculo, VeiculoEntity)
        assert veiculo.ano == 1850
