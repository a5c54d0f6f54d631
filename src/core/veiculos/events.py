"""
Domain Events do Domínio de Veículos.

Eventos:
- VeiculoCadastradoEvent: Novo veículo entrou no estoque
- VeiculoReservadoEvent: Pagamento pendente reservou o veículo
- VeiculoVendidoEvent: Pagamento aprovado concluiu a venda
- VeiculoDevolvidoAoEstoqueEvent: Pagamento rejeitado/cancelado

Uso:
    Criados pelos use cases e publicados pelo UnitOfWork somente após
    commit. Os handlers (notificação ao comprador e à equipe comercial)
    são best-effort: falhas neles nunca desfazem a transição.

    Valores são serializados como string (preço, datas) para
    transporte via Celery sem perda de precisão.
"""

from dataclasses import dataclass
from typing import Any, Dict, Optional

from src.core.shared.events import DomainEvent


@dataclass
class VeiculoCadastradoEvent(DomainEvent):
    """
    Evento: Veículo foi cadastrado.

    Attributes:
        marca: Fabricante
        modelo: Modelo
        ano: Ano de fabricação
        preco: Preço em string decimal ("85000.00")
    """

    marca: str = ""
    modelo: str = ""
    ano: int = 0
    preco: str = ""

    @property
    def aggregate_type(self) -> str:
        return "Veiculo"


@dataclass
class VeiculoReservadoEvent(DomainEvent):
    """
    Evento: Veículo reservado por pagamento pendente.

    Disparado tanto na reserva inicial quanto na renovação
    (nova notificação de pendência para veículo já reservado).

    Attributes:
        codigo_pagamento: Identificador do pagamento no provedor
        cpf_comprador: CPF informado na notificação (pode faltar)
        renovacao: True se o veículo já estava reservado
    """

    codigo_pagamento: str = ""
    cpf_comprador: Optional[str] = None
    renovacao: bool = False

    @property
    def aggregate_type(self) -> str:
        return "Veiculo"


@dataclass
class VeiculoVendidoEvent(DomainEvent):
    """
    Evento: Venda concluída por pagamento aprovado.

    Handlers típicos:
    - Notificar comprador (confirmação da compra)
    - Notificar equipe comercial

    Attributes:
        codigo_pagamento: Identificador do pagamento no provedor
        cpf_comprador: CPF do comprador
        valor_pago: Valor pago em string decimal
        data_venda: Momento da venda (ISO 8601)
    """

    codigo_pagamento: str = ""
    cpf_comprador: str = ""
    valor_pago: str = ""
    data_venda: str = ""

    @property
    def aggregate_type(self) -> str:
        return "Veiculo"


@dataclass
class VeiculoDevolvidoAoEstoqueEvent(DomainEvent):
    """
    Evento: Pagamento rejeitado ou cancelado, veículo de volta A_VENDA.

    Attributes:
        codigo_pagamento: Pagamento que originou a devolução
        status_pagamento: "rejeitado" ou "cancelado"
        status_anterior: Status do veículo antes da devolução
    """

    codigo_pagamento: str = ""
    status_pagamento: str = ""
    status_anterior: str = ""

    @property
    def aggregate_type(self) -> str:
        return "Veiculo"

    def _get_event_data(self) -> Dict[str, Any]:
        return {
            "codigo_pagamento": self.codigo_pagamento,
            "status_pagamento": self.status_pagamento,
            "status_anterior": self.status_anterior,
        }
