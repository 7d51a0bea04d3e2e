from datetime import time
from decimal import Decimal

import pytest
from django.db import DatabaseError

from caja import consultas
from caja.errores import ErrorAlmacen, ErrorValidacion
from caja.models import Parametro, Perfil, Traslado, Turno


# --- Apertura activa ---

def test_sin_turnos_no_hay_apertura_activa(perfil):
    assert consultas.buscar_apertura_activa(perfil) is None


def test_turno_abierto_con_apertura_cerrada_no_cuenta(perfil, crear_apertura):
    crear_apertura(cerrada=True)
    assert consultas.buscar_apertura_activa(perfil) is None


def test_turno_cerrado_no_cuenta(perfil, crear_apertura):
    crear_apertura(estado=Turno.CERRADO)
    assert consultas.buscar_apertura_activa(perfil) is None


def test_turno_abierto_sin_apertura_se_ignora(perfil, caja):
    Turno.objects.create(usuario=perfil, caja=caja, hora_inicio=time(9, 0))
    assert consultas.buscar_apertura_activa(perfil) is None


def test_devuelve_la_apertura_activa(perfil, apertura, caja):
    activa = consultas.buscar_apertura_activa(perfil)
    assert activa.apertura_id == apertura.id
    assert activa.turno_id == apertura.turno_id
    assert activa.monto_inicial == Decimal('100.00')
    assert activa.caja_nombre == caja.nombre
    assert activa.caja_ubicacion == 'Mostrador'


def test_con_varios_turnos_abiertos_gana_el_mas_reciente(perfil, crear_apertura):
    crear_apertura(monto='50.00')
    reciente = crear_apertura(monto='80.00')
    assert consultas.buscar_apertura_activa(perfil).apertura_id == reciente.id


def test_salta_turnos_recientes_ya_arqueados(perfil, crear_apertura):
    vigente = crear_apertura(monto='50.00')
    crear_apertura(monto='80.00', cerrada=True)
    assert consultas.buscar_apertura_activa(perfil).apertura_id == vigente.id


def test_no_ve_aperturas_de_otro_usuario(perfil, otro_contexto, crear_apertura):
    crear_apertura(usuario=otro_contexto.perfil)
    assert consultas.buscar_apertura_activa(perfil) is None


# --- Parámetros ---

def test_umbral_cargado_por_migracion(db):
    assert consultas.obtener_umbral_diferencia() == Decimal('2.00')


def test_umbral_configurado(db):
    Parametro.objects.filter(clave='umbral_diferencia').update(valor='5.50')
    assert consultas.obtener_umbral_diferencia() == Decimal('5.50')


def test_umbral_ausente_usa_valor_por_defecto(db, settings):
    settings.UMBRAL_DIFERENCIA_DEFECTO = Decimal('3.00')
    Parametro.objects.filter(clave='umbral_diferencia').delete()
    assert consultas.obtener_umbral_diferencia() == Decimal('3.00')


@pytest.mark.parametrize("valor", ['abc', '-1', ''])
def test_umbral_invalido_usa_valor_por_defecto(db, valor):
    Parametro.objects.filter(clave='umbral_diferencia').update(valor=valor)
    assert consultas.obtener_umbral_diferencia() == Decimal('2.00')


def test_error_de_base_de_datos_se_traduce(db, monkeypatch):
    def fallo(*args, **kwargs):
        raise DatabaseError("conexión perdida")

    monkeypatch.setattr(Parametro.objects, 'filter', fallo)
    with pytest.raises(ErrorAlmacen, match="conexión perdida"):
        consultas.obtener_umbral_diferencia()


# --- Perfiles ---

def test_perfil_se_crea_con_el_usuario(usuario):
    perfil = Perfil.objects.get(user=usuario)
    assert perfil.nombre_completo == 'Ana Pérez'
    assert perfil.email == 'ana@catu.test'
    assert perfil.pk == usuario.pk


def test_obtener_perfil_recrea_perfil_faltante(usuario):
    Perfil.objects.filter(user=usuario).delete()
    perfil = consultas.obtener_perfil(usuario)
    assert perfil.user_id == usuario.id


# --- Traslados ---

def test_un_arqueo_admite_un_solo_traslado(arqueo, caja_principal):
    consultas.insertar_traslado(arqueo, caja_principal, Decimal('10.00'), None)
    with pytest.raises(ErrorValidacion, match="ya tiene un traslado"):
        consultas.insertar_traslado(arqueo, caja_principal, Decimal('10.00'), None)

    assert Traslado.objects.filter(arqueo=arqueo).count() == 1
    assert consultas.arqueo_tiene_traslado(arqueo) is True
