# caja/consultas.py
"""
Consultas tipadas sobre la base de datos.

Aquí vive todo el conocimiento de la forma relacional (tablas, joins,
select_related). Los servicios y el historial reciben registros ya
normalizados. Cualquier DatabaseError se traduce a ErrorAlmacen.
"""
import logging
from dataclasses import dataclass
from datetime import date, time
from decimal import Decimal
from functools import wraps

from django.conf import settings
from django.db import DatabaseError, IntegrityError, transaction

from .calculos import a_decimal
from .errores import ErrorAlmacen, ErrorValidacion
from .models import Perfil, Caja, Turno, Apertura, Arqueo, Traslado, Recepcion, Parametro

logger = logging.getLogger(__name__)


def traducir_errores(func):
    @wraps(func)
    def envoltura(*args, **kwargs):
        try:
            return func(*args, **kwargs)
        except DatabaseError as e:
            logger.exception("Error de base de datos en %s", func.__name__)
            raise ErrorAlmacen(str(e)) from e
    return envoltura


@dataclass(frozen=True)
class AperturaActiva:
    turno_id: int
    apertura_id: int
    monto_inicial: Decimal
    caja_nombre: str
    caja_ubicacion: str
    fecha: date
    hora_inicio: time


# ==============================================================================
# PARÁMETROS Y PERFILES
# ==============================================================================

@traducir_errores
def obtener_umbral_diferencia():
    defecto = settings.UMBRAL_DIFERENCIA_DEFECTO
    valor = Parametro.objects.filter(clave=Parametro.UMBRAL_DIFERENCIA).values_list('valor', flat=True).first()
    if valor is None:
        return defecto
    umbral = a_decimal(valor)
    if umbral is None or umbral < 0:
        logger.warning("Parámetro %s inválido (%r), se usa %s", Parametro.UMBRAL_DIFERENCIA, valor, defecto)
        return defecto
    return umbral


@traducir_errores
def obtener_perfil(user):
    perfil, creado = Perfil.objects.get_or_create(
        user=user,
        defaults={'nombre_completo': user.get_full_name() or user.username, 'email': user.email},
    )
    if creado:
        logger.info("Perfil creado para el usuario %s", user.username)
    return perfil


# ==============================================================================
# CAJAS Y TURNOS
# ==============================================================================

@traducir_errores
def obtener_caja(caja_id):
    return Caja.objects.filter(pk=caja_id).first()


@traducir_errores
def caja_tiene_turno_abierto(caja):
    return Turno.objects.filter(caja=caja, estado=Turno.ABIERTO).exists()


@traducir_errores
def buscar_apertura_activa(perfil):
    """
    Recorre los turnos abiertos del usuario, del más reciente al más antiguo,
    y devuelve el primero cuya apertura sigue sin cerrar. None si no hay.
    """
    turnos = (
        Turno.objects.filter(usuario=perfil, estado=Turno.ABIERTO)
        .select_related('caja', 'apertura')
        .order_by('-created_at', '-id')
    )
    for turno in turnos:
        apertura = getattr(turno, 'apertura', None)
        if apertura is None or apertura.cerrada:
            continue
        return AperturaActiva(
            turno_id=turno.id,
            apertura_id=apertura.id,
            monto_inicial=apertura.monto_inicial,
            caja_nombre=turno.caja.nombre,
            caja_ubicacion=turno.caja.ubicacion,
            fecha=turno.fecha,
            hora_inicio=turno.hora_inicio,
        )
    return None


@traducir_errores
def crear_turno_con_apertura(perfil, caja, monto_inicial, hora_inicio):
    turno = Turno.objects.create(usuario=perfil, caja=caja, hora_inicio=hora_inicio, estado=Turno.ABIERTO)
    Apertura.objects.create(turno=turno, monto_inicial=monto_inicial)
    return turno


# --- Pasos del cierre de turno (se ejecutan en este orden) ---

@traducir_errores
def insertar_arqueo(apertura_id, monto_contado, monto_esperado, diferencia, comentario):
    return Arqueo.objects.create(
        apertura_id=apertura_id,
        monto_contado=monto_contado,
        monto_esperado=monto_esperado,
        diferencia=diferencia,
        comentario=comentario,
    )


@traducir_errores
def marcar_apertura_cerrada(apertura_id):
    return Apertura.objects.filter(pk=apertura_id, cerrada=False).update(cerrada=True) == 1


@traducir_errores
def marcar_turno_cerrado(turno_id, hora_fin):
    actualizados = Turno.objects.filter(pk=turno_id, estado=Turno.ABIERTO).update(
        estado=Turno.CERRADO, hora_fin=hora_fin
    )
    return actualizados == 1


# ==============================================================================
# TRASLADOS Y RECEPCIONES
# ==============================================================================

@traducir_errores
def obtener_arqueo_de_usuario(arqueo_id, perfil):
    return (
        Arqueo.objects.filter(pk=arqueo_id, apertura__turno__usuario=perfil)
        .select_related('apertura__turno__caja')
        .first()
    )


@traducir_errores
def arqueo_tiene_traslado(arqueo):
    return Traslado.objects.filter(arqueo=arqueo).exists()


@traducir_errores
def insertar_traslado(arqueo, caja_destino, monto, comentario):
    try:
        with transaction.atomic():
            return Traslado.objects.create(
                arqueo=arqueo,
                caja_origen=arqueo.apertura.turno.caja,
                caja_destino=caja_destino,
                monto=monto,
                comentario=comentario,
                estado=Traslado.EN_TRANSITO,
            )
    except IntegrityError:
        # 'traslados.arqueo_id' es único
        raise ErrorValidacion("Este arqueo ya tiene un traslado registrado.")


@traducir_errores
def obtener_traslado(traslado_id):
    return Traslado.objects.filter(pk=traslado_id).select_related('caja_origen', 'caja_destino').first()


@traducir_errores
def insertar_recepcion(traslado, perfil, monto_recibido, diferencia, comentario):
    return Recepcion.objects.create(
        traslado=traslado,
        usuario_receptor=perfil,
        monto_recibido=monto_recibido,
        diferencia=diferencia,
        comentario=comentario,
    )


@traducir_errores
def marcar_traslado_recibido(traslado_id, estado, fecha_hora):
    actualizados = Traslado.objects.filter(pk=traslado_id, estado=Traslado.EN_TRANSITO).update(
        estado=estado, fecha_hora_recepcion=fecha_hora
    )
    return actualizados == 1
