"""
Fixtures compartidas: usuario con perfil, cajas y aperturas listas para arquear.

La migración 0002 deja cargado el parámetro 'umbral_diferencia' = 2.00.
"""
from datetime import time
from decimal import Decimal

import pytest
from django.contrib.auth.models import User

from caja import servicios
from caja.models import Caja, Turno, Apertura
from caja.sesion import ContextoSesion


@pytest.fixture
def usuario(db):
    return User.objects.create_user(
        username='cajero', password='clave-segura-123',
        first_name='Ana', last_name='Pérez', email='ana@catu.test',
    )


@pytest.fixture
def perfil(usuario):
    return usuario.perfil


@pytest.fixture
def contexto(usuario, perfil):
    return ContextoSesion(usuario=usuario, perfil=perfil)


@pytest.fixture
def otro_contexto(db):
    user = User.objects.create_user(username='supervisor', password='clave-segura-456', first_name='Luis')
    return ContextoSesion(usuario=user, perfil=user.perfil)


@pytest.fixture
def caja(db):
    return Caja.objects.create(nombre='Caja 1', ubicacion='Mostrador')


@pytest.fixture
def caja_principal(db):
    return Caja.objects.create(nombre='Caja Principal', ubicacion='Oficina', es_principal=True)


@pytest.fixture
def crear_apertura(perfil, caja):
    def _crear(monto='100.00', usuario=None, en_caja=None, cerrada=False, estado=Turno.ABIERTO):
        turno = Turno.objects.create(
            usuario=usuario or perfil, caja=en_caja or caja, hora_inicio=time(8, 0), estado=estado,
        )
        return Apertura.objects.create(turno=turno, monto_inicial=Decimal(monto), cerrada=cerrada)
    return _crear


@pytest.fixture
def apertura(crear_apertura):
    return crear_apertura()


@pytest.fixture
def arqueo(contexto, apertura):
    return servicios.cerrar_turno(contexto, apertura.id, apertura.turno_id, '100.00', '100.00', '')


@pytest.fixture
def traslado(contexto, arqueo, caja_principal):
    return servicios.registrar_traslado(contexto, arqueo.id, caja_principal.id, '100.00')


@pytest.fixture
def cliente(client, usuario):
    client.force_login(usuario)
    return client
