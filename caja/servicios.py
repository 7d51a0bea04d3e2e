# caja/servicios.py
"""
Operaciones que cambian el estado de la caja.

Cada función recibe el ContextoSesion del usuario actual, valida todo antes
de escribir y agrupa sus escrituras en una sola transacción.
"""
import logging

from django.db import transaction
from django.utils import timezone

from . import consultas
from .calculos import a_monto, calcular_diferencia, requiere_justificacion
from .errores import ErrorValidacion, AperturaNoEncontrada
from .models import Traslado

logger = logging.getLogger(__name__)


def hora_actual():
    return timezone.localtime().time().replace(second=0, microsecond=0)


def _validar_comentario(diferencia, umbral, comentario):
    comentario = (comentario or '').strip()
    if requiere_justificacion(diferencia, umbral) and not comentario:
        raise ErrorValidacion(
            f"Comentario requerido: la diferencia de ${diferencia} supera el umbral de ${umbral}."
        )
    return comentario or None


# ==============================================================================
# APERTURA Y CIERRE DE TURNO
# ==============================================================================

def abrir_turno(contexto, caja_id, monto_inicial):
    monto = a_monto(monto_inicial)
    if monto is None or monto < 0:
        raise ErrorValidacion("El monto inicial debe ser un número mayor o igual a cero.")

    if consultas.buscar_apertura_activa(contexto.perfil) is not None:
        raise ErrorValidacion("Ya tienes una apertura activa. Realiza el arqueo antes de abrir otra caja.")

    caja = consultas.obtener_caja(caja_id)
    if caja is None or not caja.activa:
        raise ErrorValidacion("La caja seleccionada no existe o está inactiva.")
    if consultas.caja_tiene_turno_abierto(caja):
        raise ErrorValidacion(f"La caja {caja.nombre} ya tiene un turno abierto.")

    with transaction.atomic():
        turno = consultas.crear_turno_con_apertura(contexto.perfil, caja, monto, hora_actual())

    logger.info("Turno %s abierto en %s por %s con $%s", turno.id, caja.nombre, contexto.usuario.username, monto)
    return consultas.buscar_apertura_activa(contexto.perfil)


def cerrar_turno(contexto, apertura_id, turno_id, contado, esperado, comentario):
    """
    Registra el arqueo y cierra apertura y turno.

    Las tres escrituras (arqueo, apertura cerrada, turno cerrado) van en una
    única transacción: si falla cualquiera, no queda ninguna.
    """
    try:
        apertura_id, turno_id = int(apertura_id), int(turno_id)
    except (TypeError, ValueError):
        raise AperturaNoEncontrada("No hay apertura activa para realizar arqueo.")

    activa = consultas.buscar_apertura_activa(contexto.perfil)
    if activa is None or activa.apertura_id != apertura_id or activa.turno_id != turno_id:
        raise AperturaNoEncontrada("No hay apertura activa para realizar arqueo.")

    monto_contado = a_monto(contado)
    if monto_contado is None or monto_contado < 0:
        raise ErrorValidacion("El monto contado no es válido.")

    monto_esperado = a_monto(esperado)
    if monto_esperado != activa.monto_inicial:
        raise ErrorValidacion("El monto esperado no coincide con el monto inicial de la apertura.")

    umbral = consultas.obtener_umbral_diferencia()
    diferencia = calcular_diferencia(monto_contado, monto_esperado)
    comentario = _validar_comentario(diferencia, umbral, comentario)

    with transaction.atomic():
        arqueo = consultas.insertar_arqueo(activa.apertura_id, monto_contado, monto_esperado, diferencia, comentario)
        if not consultas.marcar_apertura_cerrada(activa.apertura_id):
            raise AperturaNoEncontrada("La apertura ya fue cerrada.")
        if not consultas.marcar_turno_cerrado(activa.turno_id, hora_actual()):
            raise AperturaNoEncontrada("El turno ya fue cerrado.")

    logger.info(
        "Arqueo %s: turno %s cerrado por %s (contado $%s, diferencia $%s)",
        arqueo.id, activa.turno_id, contexto.usuario.username, monto_contado, diferencia,
    )
    return arqueo


# ==============================================================================
# TRASLADOS DE EFECTIVO
# ==============================================================================

def registrar_traslado(contexto, arqueo_id, caja_destino_id, monto, comentario=''):
    monto = a_monto(monto)
    if monto is None or monto <= 0:
        raise ErrorValidacion("El monto a trasladar debe ser mayor a cero.")

    arqueo = consultas.obtener_arqueo_de_usuario(arqueo_id, contexto.perfil)
    if arqueo is None:
        raise AperturaNoEncontrada("El arqueo no existe o no pertenece a tu usuario.")
    if consultas.arqueo_tiene_traslado(arqueo):
        raise ErrorValidacion("Este arqueo ya tiene un traslado registrado.")

    origen = arqueo.apertura.turno.caja
    destino = consultas.obtener_caja(caja_destino_id)
    if destino is None or not destino.activa:
        raise ErrorValidacion("La caja destino no existe o está inactiva.")
    if destino.id == origen.id:
        raise ErrorValidacion("La caja destino debe ser distinta de la caja origen.")
    if monto > arqueo.monto_contado:
        raise ErrorValidacion(f"No puedes trasladar más de lo contado en el arqueo (${arqueo.monto_contado}).")

    traslado = consultas.insertar_traslado(arqueo, destino, monto, (comentario or '').strip() or None)
    logger.info("Traslado %s: $%s de %s a %s", traslado.id, monto, origen.nombre, destino.nombre)
    return traslado


def registrar_recepcion(contexto, traslado_id, monto_recibido, comentario=''):
    recibido = a_monto(monto_recibido)
    if recibido is None or recibido < 0:
        raise ErrorValidacion("El monto recibido no es válido.")

    traslado = consultas.obtener_traslado(traslado_id)
    if traslado is None:
        raise ErrorValidacion("El traslado no existe.")
    if traslado.estado != Traslado.EN_TRANSITO:
        raise ErrorValidacion("El traslado ya fue recibido.")

    umbral = consultas.obtener_umbral_diferencia()
    diferencia = calcular_diferencia(recibido, traslado.monto)
    comentario = _validar_comentario(diferencia, umbral, comentario)
    estado = Traslado.RECIBIDO if diferencia == 0 else Traslado.OBSERVADO

    with transaction.atomic():
        recepcion = consultas.insertar_recepcion(traslado, contexto.perfil, recibido, diferencia, comentario)
        if not consultas.marcar_traslado_recibido(traslado.id, estado, timezone.now()):
            raise ErrorValidacion("El traslado ya fue recibido.")

    logger.info("Recepción %s del traslado %s: recibido $%s (%s)", recepcion.id, traslado.id, recibido, estado)
    return recepcion
