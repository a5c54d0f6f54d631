"""
Exceções do Domínio de Veículos.

Cada erro herda da hierarquia compartilhada, de modo que o adapter HTTP
mapeia pelo tipo base (404 para não encontrado, 400 para o restante).
As mensagens fazem parte do contrato observável.
"""

from decimal import Decimal
from typing import Optional

from src.core.shared.exceptions import (
    BusinessRuleViolationError,
    EntityNotFoundError,
    ValidationError,
)


class VeiculoNaoEncontradoError(EntityNotFoundError):
    """Veículo alvo não existe (na leitura ou no momento da escrita)."""

    def __init__(self, veiculo_id: Optional[str] = None):
        super().__init__(
            "Veículo não encontrado",
            entity_type="Veiculo",
            entity_id=veiculo_id,
        )


class VeiculoJaVendidoError(BusinessRuleViolationError):
    """Tentativa de vender um veículo que já está VENDIDO."""

    def __init__(self):
        super().__init__("Veículo já foi vendido", rule="veiculo_ja_vendido")


class VeiculoIndisponivelParaReservaError(BusinessRuleViolationError):
    """Reserva só é permitida a partir de A_VENDA."""

    def __init__(self):
        super().__init__(
            "Veículo não está disponível para reserva",
            rule="reserva_apenas_a_venda",
        )


class ValorPagoAusenteError(ValidationError):
    def __init__(self):
        super().__init__(
            "Valor pago é obrigatório para pagamentos aprovados",
            field="valor_pago",
        )


class ValorPagoDivergenteError(BusinessRuleViolationError):
    """
    Valor pago difere do preço do veículo.

    Comparação exata, sem margem de tolerância. A mensagem carrega
    os dois valores com duas casas decimais.
    """

    def __init__(self, valor_pago: Decimal, preco: Decimal):
        self.valor_pago = valor_pago
        self.preco = preco
        super().__init__(
            f"Valor pago (R$ {valor_pago:.2f}) não confere com o preço "
            f"do veículo (R$ {preco:.2f})",
            rule="valor_pago_divergente",
        )


class StatusPagamentoInvalidoError(ValidationError):
    def __init__(self, status: str):
        self.status = status
        super().__init__(f"Status de pagamento inválido: {status}", field="status")
