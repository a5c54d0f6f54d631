"""
Shared Domain Components.

Componentes compartilhados entre os domínios:
- Exceções de domínio
- Interfaces (Ports)
- Base class para Domain Events
"""

from .exceptions import (
    DomainException,
    ValidationError,
    EntityNotFoundError,
    BusinessRuleViolationError,
    ConcurrencyError,
)
from .events import DomainEvent
from .interfaces import UnitOfWork, EventPublisher

__all__ = [
    "DomainException",
    "ValidationError",
    "EntityNotFoundError",
    "BusinessRuleViolationError",
    "ConcurrencyError",
    "DomainEvent",
    "UnitOfWork",
    "EventPublisher",
]
