"""
Use Cases (Application Services) do Domínio de Veículos.

Use Cases implementados:
- ProcessarWebhookPagamentoService: Reconcilia notificação do provedor de pagamento
- ConsultarStatusPagamentoService: Situação de venda atual de um veículo
- CadastrarVeiculoService: Cadastra veículo no estoque
- EditarVeiculoService: Edita dados descritivos
- ExcluirVeiculoService: Remove veículo
- ObterVeiculoService: Obtém veículo específico
- ListarVeiculosService: Lista veículos com filtros

Princípios:
- Um Use Case = Uma operação de negócio
- Dependências injetadas (DI)
- Erros de domínio propagados sem recuperação local
"""

import logging
from typing import List

from src.core.shared.exceptions import ValidationError
from src.core.shared.interfaces import UnitOfWork

from .cpf import mascarar_cpf
from .dtos import (
    ORDEM_ASC,
    ORDEM_DESC,
    CadastrarVeiculoInputDTO,
    EditarVeiculoInputDTO,
    ListaVeiculosOutputDTO,
    ListarVeiculosQueryDTO,
    ProcessarWebhookPagamentoInputDTO,
    ResultadoWebhookOutputDTO,
    StatusPagamento,
    StatusPagamentoVeiculoOutputDTO,
    VeiculoOutputDTO,
)
from .entities import VeiculoEntity, VeiculoStatus
from .events import (
    VeiculoCadastradoEvent,
    VeiculoDevolvidoAoEstoqueEvent,
    VeiculoReservadoEvent,
    VeiculoVendidoEvent,
)
from .exceptions import (
    StatusPagamentoInvalidoError,
    ValorPagoAusenteError,
    ValorPagoDivergenteError,
    VeiculoJaVendidoError,
    VeiculoNaoEncontradoError,
)
from .ports import VeiculoRepository

logger = logging.getLogger(__name__)


MENSAGEM_APROVADO = "Pagamento aprovado. Veículo vendido com sucesso!"
MENSAGEM_DEVOLVIDO = "Pagamento rejeitado/cancelado. Veículo voltou ao estoque."
MENSAGEM_PENDENTE = "Pagamento pendente. Veículo reservado temporariamente."


class ProcessarWebhookPagamentoService:
    """
    Use Case: Reconciliar notificação assíncrona do provedor de pagamento.

    As notificações podem chegar duplicadas ou fora de ordem. Cada
    chamada faz exatamente uma leitura e, nos caminhos sem erro,
    exatamente uma escrita.

    Fluxo:
    1. Carregar veículo (não encontrado → VeiculoNaoEncontradoError)
    2. Interpretar status (desconhecido → StatusPagamentoInvalidoError)
    3. Aprovado sobre VENDIDO → VeiculoJaVendidoError
    4. Aplicar a transição:
       - aprovado: valor obrigatório e igual ao preço → VENDIDO
       - rejeitado / cancelado: → A_VENDA (sempre aceito)
       - pendente: A_VENDA → RESERVADO; RESERVADO renova a reserva
    5. Gravar com compare-and-swap em `atualizado_em`
    6. Enfileirar evento (publicado após commit)

    Example:
        service = ProcessarWebhookPagamentoService(veiculo_repo, uow)
        resultado = service.execute(ProcessarWebhookPagamentoInputDTO(
            codigo_pagamento="PAY_1",
            status="aprovado",
            veiculo_id=veiculo.id,
            cpf_comprador="11144477735",
            valor_pago=Decimal("85000"),
        ))
        resultado.novo_status  # "VENDIDO"
    """

    def __init__(self, veiculo_repo: VeiculoRepository, uow: UnitOfWork):
        self.veiculo_repo = veiculo_repo
        self.uow = uow

    def execute(
        self, input_dto: ProcessarWebhookPagamentoInputDTO
    ) -> ResultadoWebhookOutputDTO:
        """
        Executa a reconciliação em transação atômica.

        Args:
            input_dto: Evento de pagamento desserializado

        Returns:
            Resultado com novo status e data de venda (se vendido)

        Raises:
            VeiculoNaoEncontradoError: Veículo inexistente (leitura ou escrita)
            StatusPagamentoInvalidoError: Literal de status desconhecido
            VeiculoJaVendidoError: Aprovação para veículo já vendido
            ValorPagoAusenteError: Aprovação sem valor pago
            ValorPagoDivergenteError: Valor pago diferente do preço
            VeiculoIndisponivelParaReservaError: Pendência para veículo vendido
            ValidationError: CPF inválido ou ausente na venda
            ConcurrencyError: Veículo alterado entre leitura e escrita
        """
        logger.info(
            f"Webhook recebido: pagamento={input_dto.codigo_pagamento} "
            f"status={input_dto.status} veiculo={input_dto.veiculo_id} "
            f"cpf={mascarar_cpf(input_dto.cpf_comprador or '')}"
        )

        with self.uow:
            veiculo = self.veiculo_repo.get_by_id(input_dto.veiculo_id)
            if not veiculo:
                raise VeiculoNaoEncontradoError(input_dto.veiculo_id)

            try:
                status_pagamento = StatusPagamento.from_string(input_dto.status)
            except ValueError:
                raise StatusPagamentoInvalidoError(input_dto.status)

            if (
                veiculo.status == VeiculoStatus.VENDIDO
                and status_pagamento == StatusPagamento.APROVADO
            ):
                raise VeiculoJaVendidoError()

            atualizado_em_observado = veiculo.atualizado_em
            status_anterior = veiculo.status

            if status_pagamento == StatusPagamento.APROVADO:
                mensagem = self._aprovar(veiculo, input_dto)
            elif status_pagamento in (StatusPagamento.REJEITADO, StatusPagamento.CANCELADO):
                veiculo.voltar_para_venda()
                mensagem = MENSAGEM_DEVOLVIDO
            else:
                self._reservar(veiculo, input_dto)
                mensagem = MENSAGEM_PENDENTE

            atualizado = self.veiculo_repo.atualizar(
                veiculo.id,
                veiculo.dados_de_venda(),
                atualizado_em_esperado=atualizado_em_observado,
            )

            self.uow.publish_event(
                self._criar_evento(
                    atualizado, status_pagamento, status_anterior, input_dto
                )
            )

        logger.info(
            f"Webhook processado: veiculo={atualizado.id} "
            f"{status_anterior.value} -> {atualizado.status.value}"
        )

        return ResultadoWebhookOutputDTO(
            sucesso=True,
            mensagem=mensagem,
            veiculo_id=atualizado.id,
            novo_status=atualizado.status.value,
            data_venda=atualizado.data_venda,
        )

    def _aprovar(
        self, veiculo: VeiculoEntity, input_dto: ProcessarWebhookPagamentoInputDTO
    ) -> str:
        if input_dto.valor_pago is None:
            raise ValorPagoAusenteError()

        if input_dto.valor_pago != veiculo.preco:
            raise ValorPagoDivergenteError(input_dto.valor_pago, veiculo.preco)

        veiculo.marcar_como_vendido(
            input_dto.cpf_comprador, input_dto.codigo_pagamento
        )
        return MENSAGEM_APROVADO

    def _reservar(
        self, veiculo: VeiculoEntity, input_dto: ProcessarWebhookPagamentoInputDTO
    ) -> None:
        # Nova pendência para reserva existente não é erro
        if veiculo.status == VeiculoStatus.RESERVADO:
            veiculo.atualizar_reserva(
                input_dto.codigo_pagamento, input_dto.cpf_comprador
            )
        else:
            veiculo.marcar_como_reservado(
                input_dto.cpf_comprador, input_dto.codigo_pagamento
            )

    def _criar_evento(self, veiculo, status_pagamento, status_anterior, input_dto):
        if status_pagamento == StatusPagamento.APROVADO:
            return VeiculoVendidoEvent(
                aggregate_id=veiculo.id,
                codigo_pagamento=input_dto.codigo_pagamento,
                cpf_comprador=veiculo.cpf_comprador,
                valor_pago=f"{input_dto.valor_pago:.2f}",
                data_venda=veiculo.data_venda.isoformat(),
            )

        if status_pagamento == StatusPagamento.PENDENTE:
            return VeiculoReservadoEvent(
                aggregate_id=veiculo.id,
                codigo_pagamento=input_dto.codigo_pagamento,
                cpf_comprador=veiculo.cpf_comprador,
                renovacao=status_anterior == VeiculoStatus.RESERVADO,
            )

        return VeiculoDevolvidoAoEstoqueEvent(
            aggregate_id=veiculo.id,
            codigo_pagamento=input_dto.codigo_pagamento,
            status_pagamento=status_pagamento.value,
            status_anterior=status_anterior.value,
        )


class ConsultarStatusPagamentoService:
    """Use Case: Consultar a situação de venda de um veículo."""

    def __init__(self, veiculo_repo: VeiculoRepository):
        self.veiculo_repo = veiculo_repo

    def execute(self, veiculo_id: str) -> StatusPagamentoVeiculoOutputDTO:
        veiculo = self.veiculo_repo.get_by_id(veiculo_id)
        if not veiculo:
            raise VeiculoNaoEncontradoError(veiculo_id)
        return StatusPagamentoVeiculoOutputDTO.from_entity(veiculo)


class CadastrarVeiculoService:
    """
    Use Case: Cadastrar veículo no estoque.

    Todo veículo cadastrado nasce A_VENDA.

    Example:
        service = CadastrarVeiculoService(veiculo_repo, uow)
        output = service.execute(CadastrarVeiculoInputDTO(
            marca="Toyota", modelo="Corolla", ano=2023,
            cor="Prata", preco=Decimal("85000.00"),
        ))
    """

    def __init__(self, veiculo_repo: VeiculoRepository, uow: UnitOfWork):
        self.veiculo_repo = veiculo_repo
        self.uow = uow

    def execute(self, input_dto: CadastrarVeiculoInputDTO) -> VeiculoOutputDTO:
        """
        Raises:
            ValidationError: Se dados inválidos
        """
        with self.uow:
            veiculo = VeiculoEntity.criar(
                marca=input_dto.marca,
                modelo=input_dto.modelo,
                ano=input_dto.ano,
                cor=input_dto.cor,
                preco=input_dto.preco,
            )

            self.veiculo_repo.save(veiculo)

            self.uow.publish_event(
                VeiculoCadastradoEvent(
                    aggregate_id=veiculo.id,
                    marca=veiculo.marca,
                    modelo=veiculo.modelo,
                    ano=veiculo.ano,
                    preco=f"{veiculo.preco:.2f}",
                )
            )

        logger.info(f"Veículo cadastrado: {veiculo!r}")
        return VeiculoOutputDTO.from_entity(veiculo)


class EditarVeiculoService:
    """
    Use Case: Editar dados descritivos de um veículo.

    Não altera status nem metadados de venda.
    """

    def __init__(self, veiculo_repo: VeiculoRepository, uow: UnitOfWork):
        self.veiculo_repo = veiculo_repo
        self.uow = uow

    def execute(self, input_dto: EditarVeiculoInputDTO) -> VeiculoOutputDTO:
        """
        Raises:
            VeiculoNaoEncontradoError: Se veículo não existe
            ValidationError: Se algum invariante for violado
            ConcurrencyError: Se alterado por outro processo durante a edição
        """
        with self.uow:
            veiculo = self.veiculo_repo.get_by_id(input_dto.veiculo_id)
            if not veiculo:
                raise VeiculoNaoEncontradoError(input_dto.veiculo_id)

            atualizado_em_observado = veiculo.atualizado_em
            veiculo.atualizar_dados(**input_dto.campos())

            atualizado = self.veiculo_repo.atualizar(
                veiculo.id,
                veiculo.dados_descritivos(),
                atualizado_em_esperado=atualizado_em_observado,
            )

        return VeiculoOutputDTO.from_entity(atualizado)


class ExcluirVeiculoService:
    """Use Case: Remover veículo do cadastro."""

    def __init__(self, veiculo_repo: VeiculoRepository, uow: UnitOfWork):
        self.veiculo_repo = veiculo_repo
        self.uow = uow

    def execute(self, veiculo_id: str) -> None:
        with self.uow:
            if not self.veiculo_repo.exists(veiculo_id):
                raise VeiculoNaoEncontradoError(veiculo_id)
            self.veiculo_repo.delete(veiculo_id)

        logger.info(f"Veículo excluído: {veiculo_id}")


class ObterVeiculoService:
    """
    Use Case: Obter detalhes de um veículo.

    Leitura simples, sem transação.
    """

    def __init__(self, veiculo_repo: VeiculoRepository):
        self.veiculo_repo = veiculo_repo

    def execute(self, veiculo_id: str) -> VeiculoOutputDTO:
        """
        Raises:
            VeiculoNaoEncontradoError: Se veículo não existe
        """
        veiculo = self.veiculo_repo.get_by_id(veiculo_id)
        if not veiculo:
            raise VeiculoNaoEncontradoError(veiculo_id)
        return VeiculoOutputDTO.from_entity(veiculo)


class ListarVeiculosService:
    """
    Use Case: Listar veículos com filtros.

    Filtros:
    - marca / modelo: substring, sem diferenciar maiúsculas
    - ano_min / ano_max, preco_min / preco_max: faixas inclusivas
    - status: A_VENDA, RESERVADO ou VENDIDO
    - ordem: por preço, ASC (padrão) ou DESC
    """

    def __init__(self, veiculo_repo: VeiculoRepository):
        self.veiculo_repo = veiculo_repo

    def execute(self, query: ListarVeiculosQueryDTO) -> ListaVeiculosOutputDTO:
        """
        Raises:
            ValidationError: Se status ou ordem inválidos
        """
        if query.status:
            try:
                VeiculoStatus.from_string(query.status)
            except ValueError as exc:
                raise ValidationError(str(exc), field="status")

        if query.ordem not in (ORDEM_ASC, ORDEM_DESC):
            raise ValidationError(
                f"Ordem inválida: {query.ordem} (use ASC ou DESC)",
                field="ordem",
            )

        veiculos: List[VeiculoEntity] = self.veiculo_repo.list_with_filters(query)
        return ListaVeiculosOutputDTO(
            veiculos=[VeiculoOutputDTO.from_entity(v) for v in veiculos],
            filtros=query,
        )
