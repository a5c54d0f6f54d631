"""
Testes Unitários para Use Cases do Domínio de Veículos.

Estratégia de Teste:
- Usa InMemoryVeiculoRepository (fake) para isolamento
- Usa FakeUnitOfWork para testar transações
- Verifica eventos publicados
- Testa cenários de sucesso e erro

Coverage:
- ProcessarWebhookPagamentoService (reconciliação de pagamentos)
- ConsultarStatusPagamentoService
- CadastrarVeiculoService / EditarVeiculoService / ExcluirVeiculoService
- ObterVeiculoService / ListarVeiculosService
"""

import pytest
from datetime import timedelta
from decimal import Decimal
from typing import List

from src.core.veiculos.use_cases import (
    ProcessarWebhookPagamentoService,
    ConsultarStatusPagamentoService,
    CadastrarVeiculoService,
    EditarVeiculoService,
    ExcluirVeiculoService,
    ObterVeiculoService,
    ListarVeiculosService,
    MENSAGEM_APROVADO,
    MENSAGEM_DEVOLVIDO,
    MENSAGEM_PENDENTE,
)
from src.core.veiculos.dtos import (
    CadastrarVeiculoInputDTO,
    EditarVeiculoInputDTO,
    ListarVeiculosQueryDTO,
    ProcessarWebhookPagamentoInputDTO,
)
from src.core.veiculos.entities import VeiculoEntity, VeiculoStatus
from src.core.veiculos.events import (
    VeiculoCadastradoEvent,
    VeiculoDevolvidoAoEstoqueEvent,
    VeiculoReservadoEvent,
    VeiculoVendidoEvent,
)
from src.core.veiculos.exceptions import (
    StatusPagamentoInvalidoError,
    ValorPagoAusenteError,
    ValorPagoDivergenteError,
    VeiculoIndisponivelParaReservaError,
    VeiculoJaVendidoError,
    VeiculoNaoEncontradoError,
)
from src.core.veiculos.ports import InMemoryVeiculoRepository
from src.core.shared.exceptions import ConcurrencyError, ValidationError
from src.core.shared.events import DomainEvent

CPF = "111.444.777-35"
PRECO = Decimal("85000.00")


class FakeUnitOfWork:
    """
    Fake Unit of Work para testes.

    Permite testar:
    - Comportamento de commit/rollback
    - Eventos publicados (apenas após commit)
    """

    def __init__(self):
        self._events: List[DomainEvent] = []
        self.published: List[DomainEvent] = []
        self._committed = False
        self._rolled_back = False

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        if exc_type is not None:
            self.rollback()
        else:
            self.commit()
        return False

    def commit(self):
        self._committed = True
        self.published.extend(self._events)
        self._events.clear()

    def rollback(self):
        self._rolled_back = True
        self._events.clear()

    def publish_event(self, event: DomainEvent):
        self._events.append(event)

    @property
    def committed(self) -> bool:
        return self._committed

    @property
    def rolled_back(self) -> bool:
        return self._rolled_back


class RepositorioComEscritaConcorrente(InMemoryVeiculoRepository):
    """Outro processo altera o veículo logo após a leitura."""

    def get_by_id(self, veiculo_id):
        veiculo = super().get_by_id(veiculo_id)
        if veiculo:
            outro = super().get_by_id(veiculo_id)
            outro.atualizar_dados(cor="Azul")
            outro.atualizado_em = veiculo.atualizado_em + timedelta(seconds=1)
            self.save(outro)
        return veiculo


class RepositorioComExclusaoConcorrente(InMemoryVeiculoRepository):
    """Outro processo remove o veículo logo após a leitura."""

    def get_by_id(self, veiculo_id):
        veiculo = super().get_by_id(veiculo_id)
        if veiculo:
            self.delete(veiculo_id)
        return veiculo


@pytest.fixture
def veiculo_repo():
    """Fixture para repositório em memória."""
    return InMemoryVeiculoRepository()


@pytest.fixture
def uow():
    """Fixture para Unit of Work fake."""
    return FakeUnitOfWork()


@pytest.fixture
def service(veiculo_repo, uow):
    return ProcessarWebhookPagamentoService(veiculo_repo, uow)


def _novo_veiculo() -> VeiculoEntity:
    return VeiculoEntity.criar(
        marca="Toyota", modelo="Corolla", ano=2023, cor="Prata", preco=PRECO,
    )


@pytest.fixture
def veiculo_a_venda(veiculo_repo):
    veiculo = _novo_veiculo()
    veiculo_repo.save(veiculo)
    return veiculo


@pytest.fixture
def veiculo_reservado(veiculo_repo):
    veiculo = _novo_veiculo()
    veiculo.marcar_como_reservado(CPF, "PAY_0")
    veiculo_repo.save(veiculo)
    return veiculo


@pytest.fixture
def veiculo_vendido(veiculo_repo):
    veiculo = _novo_veiculo()
    veiculo.marcar_como_vendido(CPF, "PAY_0")
    veiculo_repo.save(veiculo)
    return veiculo


def _webhook(veiculo_id, status, **kwargs):
    return ProcessarWebhookPagamentoInputDTO(
        codigo_pagamento=kwargs.pop("codigo_pagamento", "PAY_1"),
        status=status,
        veiculo_id=veiculo_id,
        **kwargs,
    )


# =============================================================================
# Reconciliação: aprovado
# =============================================================================

class TestWebhookAprovado:

    def test_aprovado_vende_veiculo(self, service, veiculo_repo, uow, veiculo_a_venda):
        resultado = service.execute(
            _webhook(veiculo_a_venda.id, "aprovado", cpf_comprador=CPF, valor_pago=PRECO)
        )

        assert resultado.sucesso is True
        assert resultado.mensagem == MENSAGEM_APROVADO
        assert resultado.novo_status == "VENDIDO"
        assert resultado.data_venda is not None

        salvo = veiculo_repo.get_by_id(veiculo_a_venda.id)
        assert salvo.status == VeiculoStatus.VENDIDO
        assert salvo.cpf_comprador == CPF
        assert salvo.codigo_pagamento == "PAY_1"
        assert salvo.data_venda == resultado.data_venda

        assert uow.committed
        assert len(uow.published) == 1
        evento = uow.published[0]
        assert isinstance(evento, VeiculoVendidoEvent)
        assert evento.valor_pago == "85000.00"
        assert evento.aggregate_id == veiculo_a_venda.id

    def test_aprovado_a_partir_de_reservado(self, service, veiculo_repo, veiculo_reservado):
        resultado = service.execute(
            _webhook(veiculo_reservado.id, "aprovado", cpf_comprador=CPF, valor_pago=PRECO)
        )
        assert resultado.novo_status == "VENDIDO"

    def test_valor_com_outra_escala_e_igual(self, service, veiculo_a_venda):
        resultado = service.execute(
            _webhook(veiculo_a_venda.id, "aprovado", cpf_comprador=CPF,
                     valor_pago=Decimal("85000"))
        )
        assert resultado.novo_status == "VENDIDO"

    def test_status_sem_diferenciar_maiusculas(self, service, veiculo_a_venda):
        resultado = service.execute(
            _webhook(veiculo_a_venda.id, "APROVADO", cpf_comprador=CPF, valor_pago=PRECO)
        )
        assert resultado.novo_status == "VENDIDO"

    def test_valor_divergente(self, service, veiculo_repo, uow, veiculo_a_venda):
        escritas = veiculo_repo.escritas

        with pytest.raises(ValorPagoDivergenteError) as exc_info:
            service.execute(
                _webhook(veiculo_a_venda.id, "aprovado", cpf_comprador=CPF,
                         valor_pago=Decimal("80000"))
            )

        assert exc_info.value.message == (
            "Valor pago (R$ 80000.00) não confere com o preço do veículo (R$ 85000.00)"
        )
        assert veiculo_repo.get_by_id(veiculo_a_venda.id).status == VeiculoStatus.A_VENDA
        assert veiculo_repo.escritas == escritas
        assert uow.rolled_back
        assert uow.published == []

    def test_valor_ausente(self, service, veiculo_repo, veiculo_a_venda):
        with pytest.raises(ValorPagoAusenteError):
            service.execute(_webhook(veiculo_a_venda.id, "aprovado", cpf_comprador=CPF))

        assert veiculo_repo.get_by_id(veiculo_a_venda.id).status == VeiculoStatus.A_VENDA

    def test_cpf_ausente(self, service, veiculo_a_venda):
        with pytest.raises(ValidationError) as exc_info:
            service.execute(_webhook(veiculo_a_venda.id, "aprovado", valor_pago=PRECO))

        assert exc_info.value.message == "CPF do comprador é obrigatório para venda"

    def test_cpf_invalido(self, service, veiculo_repo, veiculo_a_venda):
        with pytest.raises(ValidationError) as exc_info:
            service.execute(
                _webhook(veiculo_a_venda.id, "aprovado", cpf_comprador="123.456.789-00",
                         valor_pago=PRECO)
            )

        assert exc_info.value.message == "CPF inválido"
        assert veiculo_repo.get_by_id(veiculo_a_venda.id).cpf_comprador is None

    def test_veiculo_ja_vendido(self, service, veiculo_repo, uow, veiculo_vendido):
        escritas = veiculo_repo.escritas

        with pytest.raises(VeiculoJaVendidoError) as exc_info:
            service.execute(
                _webhook(veiculo_vendido.id, "aprovado", cpf_comprador=CPF, valor_pago=PRECO)
            )

        assert exc_info.value.message == "Veículo já foi vendido"
        assert veiculo_repo.escritas == escritas
        assert uow.published == []

    def test_reenvio_da_mesma_aprovacao_e_recusado(self, service, veiculo_a_venda):
        """Aprovação duplicada não vende de novo."""
        webhook = _webhook(veiculo_a_venda.id, "aprovado", cpf_comprador=CPF, valor_pago=PRECO)
        service.execute(webhook)

        with pytest.raises(VeiculoJaVendidoError):
            service.execute(webhook)


# =============================================================================
# Reconciliação: rejeitado / cancelado
# =============================================================================

class TestWebhookRejeitadoCancelado:

    @pytest.mark.parametrize("status", ["rejeitado", "cancelado"])
    def test_reservado_volta_para_estoque(self, service, veiculo_repo, uow,
                                          veiculo_reservado, status):
        resultado = service.execute(_webhook(veiculo_reservado.id, status))

        assert resultado.mensagem == MENSAGEM_DEVOLVIDO
        assert resultado.novo_status == "A_VENDA"
        assert resultado.data_venda is None

        salvo = veiculo_repo.get_by_id(veiculo_reservado.id)
        assert salvo.status == VeiculoStatus.A_VENDA
        assert salvo.cpf_comprador is None
        assert salvo.codigo_pagamento is None

        evento = uow.published[0]
        assert isinstance(evento, VeiculoDevolvidoAoEstoqueEvent)
        assert evento.status_pagamento == status
        assert evento.status_anterior == "RESERVADO"

    def test_cancelamento_estorna_venda(self, service, veiculo_repo, veiculo_vendido):
        resultado = service.execute(_webhook(veiculo_vendido.id, "cancelado"))

        assert resultado.novo_status == "A_VENDA"
        salvo = veiculo_repo.get_by_id(veiculo_vendido.id)
        assert salvo.data_venda is None
        assert salvo.esta_disponivel

    def test_rejeitado_em_veiculo_a_venda_e_idempotente(self, service, veiculo_repo,
                                                       veiculo_a_venda):
        escritas = veiculo_repo.escritas

        resultado = service.execute(_webhook(veiculo_a_venda.id, "rejeitado"))

        assert resultado.novo_status == "A_VENDA"
        assert veiculo_repo.escritas == escritas + 1


# =============================================================================
# Reconciliação: pendente
# =============================================================================

class TestWebhookPendente:

    def test_pendente_reserva(self, service, veiculo_repo, uow, veiculo_a_venda):
        resultado = service.execute(
            _webhook(veiculo_a_venda.id, "pendente", cpf_comprador=CPF)
        )

        assert resultado.mensagem == MENSAGEM_PENDENTE
        assert resultado.novo_status == "RESERVADO"
        assert resultado.data_venda is None

        salvo = veiculo_repo.get_by_id(veiculo_a_venda.id)
        assert salvo.status == VeiculoStatus.RESERVADO
        assert salvo.cpf_comprador == CPF
        assert salvo.data_venda is None

        evento = uow.published[0]
        assert isinstance(evento, VeiculoReservadoEvent)
        assert evento.renovacao is False

    def test_pendente_sem_cpf(self, service, veiculo_a_venda):
        resultado = service.execute(_webhook(veiculo_a_venda.id, "pendente"))
        assert resultado.novo_status == "RESERVADO"

    def test_nova_pendencia_renova_reserva(self, service, veiculo_repo, uow,
                                           veiculo_reservado):
        resultado = service.execute(
            _webhook(veiculo_reservado.id, "pendente", codigo_pagamento="PAY_9")
        )

        assert resultado.novo_status == "RESERVADO"
        salvo = veiculo_repo.get_by_id(veiculo_reservado.id)
        assert salvo.codigo_pagamento == "PAY_9"
        assert salvo.cpf_comprador == CPF
        assert uow.published[0].renovacao is True

    def test_pendente_em_veiculo_vendido(self, service, veiculo_vendido):
        with pytest.raises(VeiculoIndisponivelParaReservaError):
            service.execute(_webhook(veiculo_vendido.id, "pendente"))


# =============================================================================
# Reconciliação: erros gerais
# =============================================================================

class TestWebhookErros:

    def test_veiculo_inexistente(self, service, uow):
        with pytest.raises(VeiculoNaoEncontradoError) as exc_info:
            service.execute(_webhook("nao-existe", "aprovado", cpf_comprador=CPF,
                                     valor_pago=PRECO))

        assert exc_info.value.message == "Veículo não encontrado"
        assert uow.rolled_back

    def test_inexistente_tem_prioridade_sobre_status_invalido(self, service):
        with pytest.raises(VeiculoNaoEncontradoError):
            service.execute(_webhook("nao-existe", "estornado"))

    def test_status_invalido(self, service, veiculo_repo, veiculo_a_venda):
        escritas = veiculo_repo.escritas

        with pytest.raises(StatusPagamentoInvalidoError) as exc_info:
            service.execute(_webhook(veiculo_a_venda.id, "estornado"))

        assert exc_info.value.message == "Status de pagamento inválido: estornado"
        assert veiculo_repo.escritas == escritas

    def test_alteracao_concorrente(self, uow):
        repo = RepositorioComEscritaConcorrente()
        veiculo = _novo_veiculo()
        repo.save(veiculo)

        service = ProcessarWebhookPagamentoService(repo, uow)

        with pytest.raises(ConcurrencyError):
            service.execute(_webhook(veiculo.id, "aprovado", cpf_comprador=CPF,
                                     valor_pago=PRECO))

        assert repo.get_by_id(veiculo.id).status == VeiculoStatus.A_VENDA
        assert uow.published == []

    def test_exclusao_concorrente(self, uow):
        repo = RepositorioComExclusaoConcorrente()
        veiculo = _novo_veiculo()
        repo.save(veiculo)

        service = ProcessarWebhookPagamentoService(repo, uow)

        with pytest.raises(VeiculoNaoEncontradoError):
            service.execute(_webhook(veiculo.id, "pendente"))


# =============================================================================
# Demais use cases
# =============================================================================

class TestConsultarStatusPagamentoService:

    def test_consulta(self, veiculo_repo, veiculo_vendido):
        resultado = ConsultarStatusPagamentoService(veiculo_repo).execute(veiculo_vendido.id)

        assert resultado.status == "VENDIDO"
        assert resultado.disponivel is False
        assert resultado.codigo_pagamento == "PAY_0"
        assert resultado.to_dict()["veiculoId"] == veiculo_vendido.id

    def test_inexistente(self, veiculo_repo):
        with pytest.raises(VeiculoNaoEncontradoError):
            ConsultarStatusPagamentoService(veiculo_repo).execute("nao-existe")


class TestCadastrarVeiculoService:

    def test_cadastrar(self, veiculo_repo, uow):
        output = CadastrarVeiculoService(veiculo_repo, uow).execute(
            CadastrarVeiculoInputDTO(
                marca="Honda", modelo="Civic", ano=2022, cor="Preto",
                preco=Decimal("92000.00"),
            )
        )

        assert output.status == "A_VENDA"
        assert output.disponivel is True
        assert veiculo_repo.exists(output.id)
        assert uow.committed

        evento = uow.published[0]
        assert isinstance(evento, VeiculoCadastradoEvent)
        assert evento.preco == "92000.00"

    def test_dados_invalidos(self, veiculo_repo, uow):
        with pytest.raises(ValidationError):
            CadastrarVeiculoService(veiculo_repo, uow).execute(
                CadastrarVeiculoInputDTO(
                    marca="", modelo="Civic", ano=2022, cor="Preto",
                    preco=Decimal("92000.00"),
                )
            )

        assert veiculo_repo.list_all() == []
        assert uow.published == []


class TestEditarVeiculoService:

    def test_editar(self, veiculo_repo, uow, veiculo_a_venda):
        output = EditarVeiculoService(veiculo_repo, uow).execute(
            EditarVeiculoInputDTO(veiculo_id=veiculo_a_venda.id, preco=Decimal("79900"))
        )

        assert output.preco == Decimal("79900")
        assert output.marca == "Toyota"
        assert veiculo_repo.get_by_id(veiculo_a_venda.id).preco == Decimal("79900")

    def test_editar_preserva_venda(self, veiculo_repo, uow, veiculo_vendido):
        output = EditarVeiculoService(veiculo_repo, uow).execute(
            EditarVeiculoInputDTO(veiculo_id=veiculo_vendido.id, cor="Branco")
        )

        assert output.status == "VENDIDO"
        assert output.cpf_comprador == CPF

    def test_editar_inexistente(self, veiculo_repo, uow):
        with pytest.raises(VeiculoNaoEncontradoError):
            EditarVeiculoService(veiculo_repo, uow).execute(
                EditarVeiculoInputDTO(veiculo_id="nao-existe", cor="Azul")
            )

    def test_editar_invalido(self, veiculo_repo, uow, veiculo_a_venda):
        with pytest.raises(ValidationError):
            EditarVeiculoService(veiculo_repo, uow).execute(
                EditarVeiculoInputDTO(veiculo_id=veiculo_a_venda.id, ano=1800)
            )

        assert veiculo_repo.get_by_id(veiculo_a_venda.id).ano == 2023


class TestExcluirVeiculoService:

    def test_excluir(self, veiculo_repo, uow, veiculo_a_venda):
        ExcluirVeiculoService(veiculo_repo, uow).execute(veiculo_a_venda.id)
        assert not veiculo_repo.exists(veiculo_a_venda.id)

    def test_excluir_inexistente(self, veiculo_repo, uow):
        with pytest.raises(VeiculoNaoEncontradoError):
            ExcluirVeiculoService(veiculo_repo, uow).execute("nao-existe")


class TestObterVeiculoService:

    def test_obter(self, veiculo_repo, veiculo_a_venda):
        output = ObterVeiculoService(veiculo_repo).execute(veiculo_a_venda.id)
        assert output.id == veiculo_a_venda.id
        assert output.to_dict()["preco"] == "85000.00"

    def test_obter_inexistente(self, veiculo_repo):
        with pytest.raises(VeiculoNaoEncontradoError):
            ObterVeiculoService(veiculo_repo).execute("nao-existe")


class TestListarVeiculosService:

    @pytest.fixture
    def estoque(self, veiculo_repo):
        dados = [
            ("Toyota", "Corolla", 2023, Decimal("85000")),
            ("Toyota", "Yaris", 2020, Decimal("60000")),
            ("Honda", "Civic", 2022, Decimal("92000")),
            ("Fiat", "Uno", 2015, Decimal("25000")),
        ]
        veiculos = []
        for marca, modelo, ano, preco in dados:
            veiculo = VeiculoEntity.criar(
                marca=marca, modelo=modelo, ano=ano, cor="Prata", preco=preco,
            )
            veiculo_repo.save(veiculo)
            veiculos.append(veiculo)
        return veiculos

    def _listar(self, veiculo_repo, **filtros):
        return ListarVeiculosService(veiculo_repo).execute(ListarVeiculosQueryDTO(**filtros))

    def test_ordena_por_preco(self, veiculo_repo, estoque):
        resultado = self._listar(veiculo_repo)

        assert resultado.total == 4
        assert [v.modelo for v in resultado.veiculos] == ["Uno", "Yaris", "Corolla", "Civic"]

    def test_ordem_decrescente(self, veiculo_repo, estoque):
        resultado = self._listar(veiculo_repo, ordem="DESC")
        assert resultado.veiculos[0].modelo == "Civic"

    def test_filtro_marca_substring(self, veiculo_repo, estoque):
        resultado = self._listar(veiculo_repo, marca="toy")
        assert {v.modelo for v in resultado.veiculos} == {"Corolla", "Yaris"}

    def test_faixas_inclusivas(self, veiculo_repo, estoque):
        resultado = self._listar(
            veiculo_repo, ano_min=2020, ano_max=2022,
            preco_min=Decimal("60000"), preco_max=Decimal("92000"),
        )
        assert [v.modelo for v in resultado.veiculos] == ["Yaris", "Civic"]

    def test_filtro_status(self, veiculo_repo, estoque):
        vendido = veiculo_repo.get_by_id(estoque[0].id)
        vendido.marcar_como_vendido(CPF, "PAY_1")
        veiculo_repo.save(vendido)

        resultado = self._listar(veiculo_repo, status="VENDIDO")

        assert [v.id for v in resultado.veiculos] == [estoque[0].id]

    def test_status_invalido(self, veiculo_repo):
        with pytest.raises(ValidationError) as exc_info:
            self._listar(veiculo_repo, status="DISPONIVEL")
        assert exc_info.value.field == "status"

    def test_ordem_invalida(self, veiculo_repo):
        with pytest.raises(ValidationError) as exc_info:
            self._listar(veiculo_repo, ordem="PRECO")
        assert exc_info.value.field == "ordem"
