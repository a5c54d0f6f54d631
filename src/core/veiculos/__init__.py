"""
Domínio de Veículos - ciclo de venda e reconciliação de pagamentos.

Este módulo contém:
- Entidades (VeiculoEntity, VeiculoStatus)
- Validação de CPF do comprador
- Use Cases (ProcessarWebhookPagamento, Cadastrar, Editar, Listar...)
- Domain Events (VeiculoVendido, VeiculoReservado, VeiculoDevolvidoAoEstoque)
- DTOs (Input/Output Data Transfer Objects)
- Ports (VeiculoRepository)

Características do Domínio:
- Máquina de estados A_VENDA / RESERVADO / VENDIDO com transições guardadas
- Notificações do provedor podem chegar duplicadas ou fora de ordem
- Valor pago conferido exatamente com o preço
"""

from .cpf import validar_cpf, mascarar_cpf
from .entities import VeiculoEntity, VeiculoStatus
from .exceptions import (
    VeiculoNaoEncontradoError,
    VeiculoJaVendidoError,
    VeiculoIndisponivelParaReservaError,
    ValorPagoAusenteError,
    ValorPagoDivergenteError,
    StatusPagamentoInvalidoError,
)
from .events import (
    VeiculoCadastradoEvent,
    VeiculoReservadoEvent,
    VeiculoVendidoEvent,
    VeiculoDevolvidoAoEstoqueEvent,
)
from .dtos import (
    StatusPagamento,
    ProcessarWebhookPagamentoInputDTO,
    ResultadoWebhookOutputDTO,
    CadastrarVeiculoInputDTO,
    EditarVeiculoInputDTO,
    ListarVeiculosQueryDTO,
    VeiculoOutputDTO,
)
from .ports import VeiculoRepository, InMemoryVeiculoRepository
from .use_cases import (
    ProcessarWebhookPagamentoService,
    ConsultarStatusPagamentoService,
    CadastrarVeiculoService,
    EditarVeiculoService,
    ExcluirVeiculoService,
    ObterVeiculoService,
    ListarVeiculosService,
)

__all__ = [
    # CPF
    "validar_cpf",
    "mascarar_cpf",
    # Entities
    "VeiculoEntity",
    "VeiculoStatus",
    # Exceptions
    "VeiculoNaoEncontradoError",
    "VeiculoJaVendidoError",
    "VeiculoIndisponivelParaReservaError",
    "ValorPagoAusenteError",
    "ValorPagoDivergenteError",
    "StatusPagamentoInvalidoError",
    # Events
    "VeiculoCadastradoEvent",
    "VeiculoReservadoEvent",
    "VeiculoVendidoEvent",
    "VeiculoDevolvidoAoEstoqueEvent",
    # DTOs
    "StatusPagamento",
    "ProcessarWebhookPagamentoInputDTO",
    "ResultadoWebhookOutputDTO",
    "CadastrarVeiculoInputDTO",
    "EditarVeiculoInputDTO",
    "ListarVeiculosQueryDTO",
    "VeiculoOutputDTO",
    # Ports
    "VeiculoRepository",
    "InMemoryVeiculoRepository",
    # Use Cases
    "ProcessarWebhookPagamentoService",
    "ConsultarStatusPagamentoService",
    "CadastrarVeiculoService",
    "EditarVeiculoService",
    "ExcluirVeiculoService",
    "ObterVeiculoService",
    "ListarVeiculosService",
]
