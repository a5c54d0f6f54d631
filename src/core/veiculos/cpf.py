"""
Validação estrutural de CPF.

Função pura e determinística, sem chamada a serviços externos.
Invocada pela entidade Veiculo sempre que um CPF de comprador é definido.
"""

import re

CPF_LENGTH = 11

_NAO_DIGITOS = re.compile(r"\D")


def limpar_cpf(raw: str) -> str:
    """Remove tudo que não é dígito ("111.444.777-35" -> "11144477735").

    Entrada que não é texto resulta em string vazia.
    """
    if not isinstance(raw, str):
        return ""
    return _NAO_DIGITOS.sub("", raw)


def _digito_verificador(digitos: str, peso_inicial: int) -> int:
    soma = sum(int(d) * peso for d, peso in zip(digitos, range(peso_inicial, 1, -1)))
    resultado = 11 - (soma % 11)
    return 0 if resultado >= 10 else resultado


def validar_cpf(raw: str) -> bool:
    """
    Valida CPF pelos dígitos verificadores.

    Regras:
    1. Considera apenas os dígitos (pontuação é ignorada)
    2. Exige exatamente 11 dígitos, não todos iguais ("00000000000" é inválido)
    3. 1º dígito: soma dos dígitos 1..9 com pesos 10..2
    4. 2º dígito: soma dos dígitos 1..10 com pesos 11..2
       (em ambos, 11 - soma % 11, e 10/11 viram 0)

    Args:
        raw: CPF com ou sem formatação

    Returns:
        True se estruturalmente válido
    """
    digitos = limpar_cpf(raw)

    if len(digitos) != CPF_LENGTH or len(set(digitos)) == 1:
        return False

    if _digito_verificador(digitos[:9], 10) != int(digitos[9]):
        return False

    return _digito_verificador(digitos[:10], 11) == int(digitos[10])


def mascarar_cpf(raw: str) -> str:
    """
    Formato seguro para logs: ***.444.777-**

    Nunca loga o CPF completo do comprador.
    """
    digitos = limpar_cpf(raw)
    if len(digitos) != CPF_LENGTH:
        return "***"
    return f"***.{digitos[3:6]}.{digitos[6:9]}-**"
