"""
Data Transfer Objects (DTOs) do Domínio de Veículos.

Tipos de DTOs:
- Input DTOs: dados de entrada já desserializados pelo adapter HTTP
- Output DTOs: formatam a resposta (chaves camelCase, contrato da API)
- Query DTOs: filtros de listagem
"""

from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal
from enum import Enum
from typing import Any, Dict, List, Optional

from .entities import VeiculoEntity


def _iso(valor: Optional[datetime]) -> Optional[str]:
    return valor.isoformat() if valor else None


# =============================================================================
# PAGAMENTO
# =============================================================================

class StatusPagamento(Enum):
    """
    Status informado pelo provedor de pagamento no webhook.

    Os valores são os literais recebidos no corpo da requisição.
    """

    APROVADO = "aprovado"
    REJEITADO = "rejeitado"
    PENDENTE = "pendente"
    CANCELADO = "cancelado"

    @classmethod
    def from_string(cls, value: str) -> "StatusPagamento":
        """
        Converte o literal do webhook para enum.

        Aceita o valor ("aprovado") ou o nome ("APROVADO").

        Raises:
            ValueError: Se valor inválido
        """
        if isinstance(value, cls):
            return value

        texto = str(value).strip()
        for status in cls:
            if status.value == texto.lower():
                return status

        raise ValueError(f"Status de pagamento inválido: {value}")


@dataclass(frozen=True)
class ProcessarWebhookPagamentoInputDTO:
    """
    Evento de pagamento recebido do provedor (transiente, não persistido).

    Attributes:
        codigo_pagamento: Identificador de correlação no provedor
        status: Literal do status ("aprovado", "rejeitado", ...)
        veiculo_id: Veículo alvo
        cpf_comprador: Obrigatório quando aprovado
        valor_pago: Obrigatório quando aprovado
        metodo_pagamento: Informativo (auditoria)
        data_transacao: Informativo (auditoria)
    """

    codigo_pagamento: str
    status: str
    veiculo_id: str
    cpf_comprador: Optional[str] = None
    valor_pago: Optional[Decimal] = None
    metodo_pagamento: Optional[str] = None
    data_transacao: Optional[str] = None

    def to_dict(self) -> dict:
        return {
            "codigo_pagamento": self.codigo_pagamento,
            "status": self.status,
            "veiculo_id": self.veiculo_id,
            "cpf_comprador": self.cpf_comprador,
            "valor_pago": str(self.valor_pago) if self.valor_pago is not None else None,
            "metodo_pagamento": self.metodo_pagamento,
            "data_transacao": self.data_transacao,
        }


@dataclass
class ResultadoWebhookOutputDTO:
    """
    Resultado de uma reconciliação bem-sucedida.

    Não existe ramo de falha aqui: recusas de negócio são exceções.
    """

    sucesso: bool
    mensagem: str
    veiculo_id: str
    novo_status: str
    data_venda: Optional[datetime] = None

    def to_dict(self) -> dict:
        """Formato JSON de resposta do webhook."""
        resultado = {
            "sucesso": self.sucesso,
            "mensagem": self.mensagem,
            "veiculoId": self.veiculo_id,
            "novoStatus": self.novo_status,
        }
        if self.data_venda is not None:
            resultado["dataVenda"] = self.data_venda.isoformat()
        return resultado


@dataclass
class StatusPagamentoVeiculoOutputDTO:
    """Situação de venda atual de um veículo (consulta pelo provedor)."""

    veiculo_id: str
    status: str
    disponivel: bool
    codigo_pagamento: Optional[str] = None
    data_venda: Optional[datetime] = None

    @classmethod
    def from_entity(cls, veiculo: VeiculoEntity) -> "StatusPagamentoVeiculoOutputDTO":
        return cls(
            veiculo_id=veiculo.id,
            status=veiculo.status.value,
            disponivel=veiculo.esta_disponivel,
            codigo_pagamento=veiculo.codigo_pagamento,
            data_venda=veiculo.data_venda,
        )

    def to_dict(self) -> dict:
        return {
            "veiculoId": self.veiculo_id,
            "status": self.status,
            "disponivel": self.disponivel,
            "codigoPagamento": self.codigo_pagamento,
            "dataVenda": _iso(self.data_venda),
        }


# =============================================================================
# CADASTRO / EDIÇÃO
# =============================================================================

@dataclass(frozen=True)
class CadastrarVeiculoInputDTO:
    """
    DTO de entrada para cadastrar veículo.

    Imutável (frozen=True) para garantir que dados
    validados não sejam alterados acidentalmente.
    """

    marca: str
    modelo: str
    ano: int
    cor: str
    preco: Decimal

    def to_dict(self) -> dict:
        return {
            "marca": self.marca,
            "modelo": self.modelo,
            "ano": self.ano,
            "cor": self.cor,
            "preco": str(self.preco),
        }


@dataclass(frozen=True)
class EditarVeiculoInputDTO:
    """
    DTO de entrada para edição parcial.

    Campos None não são alterados.
    """

    veiculo_id: str
    marca: Optional[str] = None
    modelo: Optional[str] = None
    ano: Optional[int] = None
    cor: Optional[str] = None
    preco: Optional[Decimal] = None

    def campos(self) -> Dict[str, Any]:
        """Apenas os campos informados."""
        valores = {
            "marca": self.marca,
            "modelo": self.modelo,
            "ano": self.ano,
            "cor": self.cor,
            "preco": self.preco,
        }
        return {nome: valor for nome, valor in valores.items() if valor is not None}


@dataclass
class VeiculoOutputDTO:
    """
    DTO de saída completo com dados do veículo.

    Attributes:
        disponivel: True se A_VENDA
    """

    id: str
    marca: str
    modelo: str
    ano: int
    cor: str
    preco: Decimal
    status: str
    disponivel: bool
    cpf_comprador: Optional[str]
    data_venda: Optional[datetime]
    codigo_pagamento: Optional[str]
    criado_em: datetime
    atualizado_em: datetime

    @classmethod
    def from_entity(cls, veiculo: VeiculoEntity) -> "VeiculoOutputDTO":
        """
        Cria DTO a partir de entidade.

        Args:
            veiculo: Entidade de domínio

        Returns:
            DTO com dados formatados
        """
        return cls(
            id=veiculo.id,
            marca=veiculo.marca,
            modelo=veiculo.modelo,
            ano=veiculo.ano,
            cor=veiculo.cor,
            preco=veiculo.preco,
            status=veiculo.status.value,
            disponivel=veiculo.esta_disponivel,
            cpf_comprador=veiculo.cpf_comprador,
            data_venda=veiculo.data_venda,
            codigo_pagamento=veiculo.codigo_pagamento,
            criado_em=veiculo.criado_em,
            atualizado_em=veiculo.atualizado_em,
        )

    def to_dict(self) -> dict:
        """Converte para dicionário (para JSON)."""
        return {
            "id": self.id,
            "marca": self.marca,
            "modelo": self.modelo,
            "ano": self.ano,
            "cor": self.cor,
            "preco": f"{self.preco:.2f}",
            "status": self.status,
            "disponivel": self.disponivel,
            "cpfComprador": self.cpf_comprador,
            "dataVenda": _iso(self.data_venda),
            "codigoPagamento": self.codigo_pagamento,
            "criadoEm": _iso(self.criado_em),
            "atualizadoEm": _iso(self.atualizado_em),
        }


# =============================================================================
# QUERY DTOs (Listagem)
# =============================================================================

ORDEM_ASC = "ASC"
ORDEM_DESC = "DESC"


@dataclass(frozen=True)
class ListarVeiculosQueryDTO:
    """
    Filtros para listagem de veículos.

    Attributes:
        marca: Substring, sem diferenciar maiúsculas
        modelo: Substring, sem diferenciar maiúsculas
        ano_min, ano_max: Faixa de ano (inclusiva)
        preco_min, preco_max: Faixa de preço (inclusiva)
        status: Nome do status (A_VENDA, RESERVADO, VENDIDO)
        ordem: Ordenação por preço, ASC (padrão) ou DESC
    """

    marca: Optional[str] = None
    modelo: Optional[str] = None
    ano_min: Optional[int] = None
    ano_max: Optional[int] = None
    preco_min: Optional[Decimal] = None
    preco_max: Optional[Decimal] = None
    status: Optional[str] = None
    ordem: str = ORDEM_ASC

    def to_dict(self) -> dict:
        return {
            "marca": self.marca,
            "modelo": self.modelo,
            "anoMin": self.ano_min,
            "anoMax": self.ano_max,
            "precoMin": str(self.preco_min) if self.preco_min is not None else None,
            "precoMax": str(self.preco_max) if self.preco_max is not None else None,
            "status": self.status,
            "ordem": self.ordem,
        }


@dataclass
class ListaVeiculosOutputDTO:
    """Resultado da listagem com os filtros aplicados."""

    veiculos: List[VeiculoOutputDTO] = field(default_factory=list)
    filtros: Optional[ListarVeiculosQueryDTO] = None

    @property
    def total(self) -> int:
        return len(self.veiculos)

    def to_dict(self) -> dict:
        return {
            "total": self.total,
            "filtros": self.filtros.to_dict() if self.filtros else {},
            "veiculos": [v.to_dict() for v in self.veiculos],
        }
