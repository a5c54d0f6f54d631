"""
Exceções de Domínio da Concessionária.

Este módulo define a hierarquia base de exceções que permite
comunicar erros de forma clara e tipada entre as camadas.
Exceções específicas de cada domínio (ex: veículos) herdam daqui.

Hierarquia:
    DomainException (base)
    ├── ValidationError (dados inválidos / invariantes)
    ├── EntityNotFoundError (entidade não existe)
    ├── BusinessRuleViolationError (regra de negócio violada)
    └── ConcurrencyError (entidade alterada por outro processo)

A mensagem faz parte do contrato observável: adapters e testes
comparam pelo conteúdo de `message`, não apenas pelo tipo.
"""

from typing import Optional


class DomainException(Exception):
    """
    Exceção base para todos os erros de domínio.

    Permite que adapters capturem qualquer erro de negócio de forma
    genérica, separando-os de falhas de infraestrutura.

    Example:
        try:
            veiculo.marcar_como_vendido(cpf, codigo)
        except DomainException as e:
            logger.warning(f"Erro de domínio: {e}")
    """

    def __init__(self, message: str, code: Optional[str] = None):
        self.message = message
        self.code = code or self.__class__.__name__
        super().__init__(self.message)

    def __str__(self) -> str:
        return f"[{self.code}] {self.message}"

    def to_dict(self) -> dict:
        """Serializa exceção para dicionário (útil para APIs)."""
        return {
            "error": self.code,
            "message": self.message,
        }


class ValidationError(DomainException):
    """
    Erro de validação de dados ou de invariante da entidade.

    Example:
        if preco <= 0:
            raise ValidationError("Preço deve ser maior que zero", field="preco")
    """

    def __init__(self, message: str, field: Optional[str] = None):
        self.field = field
        code = f"VALIDATION_ERROR_{field.upper()}" if field else "VALIDATION_ERROR"
        super().__init__(message, code)

    def to_dict(self) -> dict:
        result = super().to_dict()
        if self.field:
            result["field"] = self.field
        return result


class EntityNotFoundError(DomainException):
    """
    Entidade não encontrada no repositório.

    Lançada quando uma busca por ID não retorna resultado,
    tanto na leitura quanto na escrita (a entidade pode ter sido
    removida entre as duas operações).
    """

    def __init__(
        self,
        message: str,
        entity_type: Optional[str] = None,
        entity_id: Optional[str] = None,
    ):
        self.entity_type = entity_type
        self.entity_id = entity_id
        super().__init__(message, "ENTITY_NOT_FOUND")

    def to_dict(self) -> dict:
        result = super().to_dict()
        if self.entity_type:
            result["entity_type"] = self.entity_type
        if self.entity_id:
            result["entity_id"] = self.entity_id
        return result


class BusinessRuleViolationError(DomainException):
    """
    Violação de regra de negócio (transição de estado ilegal, etc).

    Example:
        if self.status == VeiculoStatus.VENDIDO:
            raise BusinessRuleViolationError(
                "Veículo já foi vendido",
                rule="veiculo_ja_vendido",
            )
    """

    def __init__(self, message: str, rule: Optional[str] = None):
        self.rule = rule
        super().__init__(message, "BUSINESS_RULE_VIOLATION")

    def to_dict(self) -> dict:
        result = super().to_dict()
        if self.rule:
            result["rule"] = self.rule
        return result


class ConcurrencyError(DomainException):
    """
    Entidade modificada por outro processo entre a leitura e a escrita.

    Lançada pelo repositório quando a escrita condicional
    (compare-and-swap em `atualizado_em`) não encontra o estado
    observado na leitura.
    """

    def __init__(self, message: str, entity_id: Optional[str] = None):
        self.entity_id = entity_id
        super().__init__(message, "CONCURRENCY_ERROR")
