# caja/historial.py
"""
Historial de operaciones.

Cada tipo de operación tiene su propia etapa de carga que lee las últimas
filas y las convierte en una Operacion común. Las etapas son independientes:
si una falla, las demás se cargan igual y el resultado se marca como
incompleto (HistorialIncompleto) en vez de parecer un historial vacío.
"""
import logging
import unicodedata
from dataclasses import dataclass
from datetime import date, datetime
from decimal import Decimal
from typing import Optional

from django.utils import timezone

from .consultas import traducir_errores
from .errores import ErrorAlmacen, HistorialIncompleto
from .models import Apertura, Arqueo, Traslado, Recepcion

logger = logging.getLogger(__name__)

LIMITE_POR_TIPO = 50

TIPOS = ('aperturas', 'arqueos', 'traslados', 'recepciones')

ESTADO_TRASLADO = {
    Traslado.EN_TRANSITO: "En tránsito",
    Traslado.RECIBIDO: "Recibido",
}


@dataclass(frozen=True)
class Operacion:
    id: int
    tipo: str
    fecha: datetime
    monto: Decimal
    diferencia: Optional[Decimal]
    estado: str
    caja: str
    usuario: str


@dataclass
class FiltrosHistorial:
    tipo: str = 'todas'
    desde: Optional[date] = None
    hasta: Optional[date] = None
    estado: str = 'todos'

    def tipos_habilitados(self):
        if self.tipo == 'todas':
            return TIPOS
        return tuple(t for t in TIPOS if t == self.tipo)


def _estado_por_diferencia(diferencia):
    return "Sin diferencia" if diferencia == 0 else "Con diferencia"


def _nombre(perfil):
    return perfil.nombre_completo or perfil.user.username


# ==============================================================================
# ETAPAS DE CARGA (una por tipo de operación)
# ==============================================================================

@traducir_errores
def cargar_aperturas(limite=LIMITE_POR_TIPO):
    filas = (
        Apertura.objects.select_related('turno__caja', 'turno__usuario__user')
        .order_by('-fecha_hora')[:limite]
    )
    return [
        Operacion(
            id=a.id,
            tipo="Apertura",
            fecha=a.fecha_hora,
            monto=a.monto_inicial,
            diferencia=None,
            estado="Cerrada" if a.cerrada else "Activa",
            caja=a.turno.caja.nombre,
            usuario=_nombre(a.turno.usuario),
        )
        for a in filas
    ]


@traducir_errores
def cargar_arqueos(limite=LIMITE_POR_TIPO):
    filas = (
        Arqueo.objects.select_related('apertura__turno__caja', 'apertura__turno__usuario__user')
        .order_by('-fecha_hora')[:limite]
    )
    return [
        Operacion(
            id=a.id,
            tipo="Arqueo",
            fecha=a.fecha_hora,
            monto=a.monto_contado,
            diferencia=a.diferencia,
            estado=_estado_por_diferencia(a.diferencia),
            caja=a.apertura.turno.caja.nombre,
            usuario=_nombre(a.apertura.turno.usuario),
        )
        for a in filas
    ]


@traducir_errores
def cargar_traslados(limite=LIMITE_POR_TIPO):
    filas = (
        Traslado.objects.select_related('caja_origen', 'caja_destino', 'arqueo__apertura__turno__usuario__user')
        .order_by('-fecha_hora_envio')[:limite]
    )
    return [
        Operacion(
            id=t.id,
            tipo="Traslado",
            fecha=t.fecha_hora_envio,
            monto=t.monto,
            diferencia=None,
            estado=ESTADO_TRASLADO.get(t.estado, "Observado"),
            caja=f"{t.caja_origen.nombre} → {t.caja_destino.nombre}",
            usuario=_nombre(t.arqueo.apertura.turno.usuario),
        )
        for t in filas
    ]


@traducir_errores
def cargar_recepciones(limite=LIMITE_POR_TIPO):
    filas = (
        Recepcion.objects.select_related('usuario_receptor__user', 'traslado__caja_destino')
        .order_by('-fecha_hora')[:limite]
    )
    return [
        Operacion(
            id=r.id,
            tipo="Recepción",
            fecha=r.fecha_hora,
            monto=r.monto_recibido,
            diferencia=r.diferencia,
            estado=_estado_por_diferencia(r.diferencia),
            caja=r.traslado.caja_destino.nombre,
            usuario=_nombre(r.usuario_receptor),
        )
        for r in filas
    ]


FUENTES = {
    'aperturas': cargar_aperturas,
    'arqueos': cargar_arqueos,
    'traslados': cargar_traslados,
    'recepciones': cargar_recepciones,
}


# ==============================================================================
# ORDEN Y FILTROS
# ==============================================================================

def _sin_acentos(texto):
    normalizado = unicodedata.normalize('NFKD', texto)
    return ''.join(c for c in normalizado if not unicodedata.combining(c)).lower()


def filtrar_operaciones(operaciones, filtros):
    """Ordena de la más reciente a la más antigua y aplica fechas y estado."""
    resultado = sorted(operaciones, key=lambda op: op.fecha, reverse=True)

    if filtros.desde:
        resultado = [op for op in resultado if timezone.localtime(op.fecha).date() >= filtros.desde]
    if filtros.hasta:
        # 'hasta' incluye el día completo
        resultado = [op for op in resultado if timezone.localtime(op.fecha).date() <= filtros.hasta]

    estado = (filtros.estado or '').strip()
    if estado and estado != 'todos':
        buscado = _sin_acentos(estado)
        resultado = [op for op in resultado if buscado in _sin_acentos(op.estado)]

    return resultado


def cargar_historial(filtros):
    operaciones = []
    fallidos = []
    for tipo in filtros.tipos_habilitados():
        try:
            operaciones.extend(FUENTES[tipo]())
        except ErrorAlmacen:
            logger.error("No se pudo cargar el historial de %s", tipo)
            fallidos.append(tipo)

    resultado = filtrar_operaciones(operaciones, filtros)
    if fallidos:
        raise HistorialIncompleto(fallidos, resultado)
    return resultado
