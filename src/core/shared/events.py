"""
Domain Events - comunicação desacoplada entre o Core e os side-effects.

Eventos são criados pelos use cases, enfileirados no UnitOfWork e
publicados somente após commit bem-sucedido. Notificações ao comprador
e à equipe comercial reagem a eles de forma best-effort.

Características:
- Auto-geração de ID e timestamp
- Serializáveis (to_dict) para transporte via Celery
- Rastreáveis via aggregate_id
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict
import uuid


@dataclass
class DomainEvent(ABC):
    """
    Classe base abstrata para Domain Events.

    Nomeados no passado (VeiculoVendido, não VenderVeiculo) e
    contendo os dados necessários para os handlers agirem sem
    consultar o banco novamente.

    Attributes:
        event_id: Identificador único do evento
        aggregate_id: ID do agregado que gerou o evento
        occurred_at: Momento em que o evento ocorreu
        version: Versão do schema do evento
    """

    event_id: str = field(default_factory=lambda: str(uuid.uuid4()))
    aggregate_id: str = ""
    occurred_at: datetime = field(default_factory=datetime.now)
    version: int = 1

    def __post_init__(self):
        if not self.aggregate_id:
            raise ValueError("aggregate_id é obrigatório")

    @property
    @abstractmethod
    def aggregate_type(self) -> str:
        """Tipo do agregado que gerou o evento (ex: "Veiculo")."""
        ...

    @property
    def event_type(self) -> str:
        """Nome da classe do evento."""
        return self.__class__.__name__

    def to_dict(self) -> Dict[str, Any]:
        """
        Serializa evento para dicionário.

        Returns:
            Dicionário JSON-friendly com envelope e dados do evento
        """
        return {
            "event_id": self.event_id,
            "event_type": self.event_type,
            "aggregate_id": self.aggregate_id,
            "aggregate_type": self.aggregate_type,
            "occurred_at": self.occurred_at.isoformat(),
            "version": self.version,
            "data": self._get_event_data(),
        }

    def _get_event_data(self) -> Dict[str, Any]:
        """Dados específicos do evento; subclasses podem sobrescrever."""
        base_fields = {"event_id", "aggregate_id", "occurred_at", "version"}
        return {
            key: value
            for key, value in self.__dict__.items()
            if key not in base_fields and not key.startswith("_")
        }

    def __repr__(self) -> str:
        return (
            f"{self.event_type}("
            f"event_id={self.event_id[:8]}..., "
            f"aggregate_id={self.aggregate_id}, "
            f"occurred_at={self.occurred_at.isoformat()}"
            f")"
        )
