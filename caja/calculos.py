# caja/calculos.py
"""
Cálculos del arqueo: diferencia entre lo contado y lo esperado, y si esa
diferencia obliga a dejar un comentario.
"""
from dataclasses import dataclass
from decimal import Decimal, InvalidOperation, ROUND_HALF_UP
from typing import Optional

CENTAVOS = Decimal('0.01')


def a_decimal(valor) -> Optional[Decimal]:
    """Convierte lo que escribió el usuario a Decimal. Vacío o inválido -> None."""
    if valor is None or isinstance(valor, bool):
        return None
    if isinstance(valor, Decimal):
        numero = valor
    else:
        texto = str(valor).strip().replace(",", ".")
        if not texto:
            return None
        try:
            numero = Decimal(texto)
        except (InvalidOperation, ValueError, TypeError):
            return None
    if not numero.is_finite():
        return None
    return numero


def a_monto(valor) -> Optional[Decimal]:
    """Como a_decimal, pero redondeado a centavos."""
    numero = a_decimal(valor)
    if numero is None:
        return None
    return numero.quantize(CENTAVOS, rounding=ROUND_HALF_UP)


def calcular_diferencia(contado, esperado) -> Optional[Decimal]:
    """Devuelve contado - esperado a dos decimales, o None si 'contado' no es un monto."""
    contado = a_decimal(contado)
    esperado = a_decimal(esperado)
    if contado is None or esperado is None:
        return None
    return (contado - esperado).quantize(CENTAVOS, rounding=ROUND_HALF_UP)


def requiere_justificacion(diferencia, umbral) -> bool:
    if diferencia is None:
        return False
    return abs(diferencia) > umbral


@dataclass(frozen=True)
class ResultadoArqueo:
    diferencia: Optional[Decimal]
    requiere_comentario: bool


def evaluar_arqueo(contado, esperado, umbral) -> ResultadoArqueo:
    diferencia = calcular_diferencia(contado, esperado)
    return ResultadoArqueo(diferencia, requiere_justificacion(diferencia, umbral))
