from decimal import Decimal
from io import BytesIO

import openpyxl
import pytest
from django.contrib.auth.models import User
from django.urls import reverse

from caja import consultas, historial, servicios
from caja.errores import ErrorAlmacen, ErrorValidacion
from caja.models import Arqueo, Traslado, Turno


def test_usuario_anonimo_va_al_login(client, db):
    response = client.get(reverse('caja:dashboard'))
    assert response.status_code == 302
    assert reverse('caja:login') in response.url


def test_portal_redirige_al_dashboard_con_sesion(cliente):
    response = cliente.get(reverse('caja:portal'))
    assert response.status_code == 302
    assert response.url == reverse('caja:dashboard')


def test_dashboard_muestra_perfil(cliente):
    response = cliente.get(reverse('caja:dashboard'))
    assert response.status_code == 200
    assert "Ana Pérez" in response.content.decode()


def test_dashboard_muestra_turno_activo(cliente, apertura, caja):
    response = cliente.get(reverse('caja:dashboard'))
    assert response.context['apertura_activa'].apertura_id == apertura.id
    assert caja.nombre in response.content.decode()


def test_logout_cierra_la_sesion(cliente):
    response = cliente.get(reverse('caja:logout'))
    assert response.status_code == 302
    assert 'logout=true' in response.url
    assert cliente.get(reverse('caja:dashboard')).status_code == 302


def test_logout_codifica_el_nombre(client, db):
    user = User.objects.create_user(username='socio', password='x', first_name='Tom & Jerry #1')
    client.force_login(user)
    response = client.get(reverse('caja:logout'))
    assert response.url == reverse('caja:portal') + '?logout=true&nombre=Tom+%26+Jerry+%231'


@pytest.mark.parametrize("url", ['caja:apertura_caja', 'caja:arqueo_caja', 'caja:recepcion_traslado'])
def test_error_de_almacen_en_vista_responde_503(cliente, apertura, monkeypatch, url):
    def fallo(*args, **kwargs):
        raise ErrorAlmacen("timeout")

    monkeypatch.setattr(consultas, 'obtener_umbral_diferencia', fallo)
    monkeypatch.setattr(consultas, 'buscar_apertura_activa', fallo)
    response = cliente.get(reverse(url))
    assert response.status_code == 503
    assert "timeout" in response.content.decode()


# --- Apertura ---

def test_apertura_crea_turno(cliente, caja):
    response = cliente.post(reverse('caja:apertura_caja'), {'caja': caja.pk, 'monto_inicial': '120.00'})
    assert response.status_code == 302
    assert response.url == reverse('caja:dashboard')
    turno = Turno.objects.get()
    assert turno.caja == caja
    assert turno.apertura.monto_inicial == 120


def test_apertura_con_turno_activo_redirige_al_arqueo(cliente, apertura):
    response = cliente.get(reverse('caja:apertura_caja'))
    assert response.status_code == 302
    assert response.url == reverse('caja:arqueo_caja')


# --- Arqueo ---

def test_arqueo_sin_apertura(cliente):
    response = cliente.get(reverse('caja:arqueo_caja'))
    assert response.status_code == 200
    assert "No tienes ninguna apertura activa" in response.content.decode()


def test_arqueo_con_diferencia_sin_comentario_no_cierra(cliente, apertura):
    response = cliente.post(reverse('caja:arqueo_caja'), {'monto_contado': '102.50', 'comentario': ''})
    assert response.status_code == 200
    assert "Debes agregar un comentario" in response.content.decode()
    assert not Arqueo.objects.exists()


def test_arqueo_con_comentario_cierra_turno(cliente, apertura):
    response = cliente.post(
        reverse('caja:arqueo_caja'), {'monto_contado': '102.50', 'comentario': 'sobrante de propinas'}
    )
    assert response.status_code == 302
    assert response.url == reverse('caja:dashboard')
    arqueo = Arqueo.objects.get()
    assert str(arqueo.diferencia) == '2.50'

    seguimiento = cliente.get(response.url)
    assert "¡Arqueo completado!" in seguimiento.content.decode()


def test_arqueo_sobre_umbral_muestra_aviso(cliente, apertura):
    response = cliente.post(reverse('caja:arqueo_caja'), {'monto_contado': '102.50', 'comentario': ''})
    contenido = response.content.decode()
    assert response.context['requiere_comentario'] is True
    assert 'alert alert-danger' in contenido
    assert 'small" id="aviso-umbral"' in contenido


def test_arqueo_bajo_umbral_oculta_aviso_al_volver_a_mostrar(cliente, apertura, monkeypatch):
    def rechazo(*args, **kwargs):
        raise ErrorValidacion("El monto contado no es válido.")

    monkeypatch.setattr(servicios, 'cerrar_turno', rechazo)
    response = cliente.post(reverse('caja:arqueo_caja'), {'monto_contado': '99.00', 'comentario': ''})
    contenido = response.content.decode()
    assert response.status_code == 200
    assert response.context['diferencia'] == Decimal('-1.00')
    assert response.context['requiere_comentario'] is False
    assert 'alert alert-secondary' in contenido
    assert 'small d-none" id="aviso-umbral"' in contenido


@pytest.mark.parametrize("contado, diferencia, requiere", [
    ('102.50', '2.50', True),
    ('99', '-1.00', False),
    ('', None, False),
    ('abc', None, False),
])
def test_diferencia_en_vivo(cliente, apertura, contado, diferencia, requiere):
    response = cliente.get(reverse('caja:diferencia_arqueo'), {'monto_contado': contado})
    datos = response.json()
    assert datos['diferencia'] == diferencia
    assert datos['requiere_comentario'] is requiere
    assert datos['umbral'] == '2.00'


def test_diferencia_en_vivo_sin_apertura(cliente):
    response = cliente.get(reverse('caja:diferencia_arqueo'), {'monto_contado': '10'})
    assert response.status_code == 404


# --- Traslados y recepciones ---

def test_traslado_desde_formulario(cliente, arqueo, caja_principal):
    response = cliente.post(reverse('caja:traslado_efectivo'), {
        'arqueo': arqueo.pk, 'caja_destino': caja_principal.pk, 'monto': '60.00', 'comentario': '',
    })
    assert response.status_code == 302
    arqueo.refresh_from_db()
    assert arqueo.traslado.monto == 60


def test_traslado_a_la_misma_caja_muestra_error(cliente, arqueo, caja):
    response = cliente.post(reverse('caja:traslado_efectivo'), {
        'arqueo': arqueo.pk, 'caja_destino': caja.pk, 'monto': '60.00',
    })
    assert response.status_code == 200
    assert "distinta de la caja origen" in response.content.decode()


def test_recepcion_desde_formulario(client, otro_contexto, traslado):
    client.force_login(otro_contexto.usuario)
    response = client.post(reverse('caja:recepcion_traslado'), {
        'traslado': traslado.pk, 'monto_recibido': '100.00', 'comentario': '',
    })
    assert response.status_code == 302
    traslado.refresh_from_db()
    assert traslado.estado == Traslado.RECIBIDO


# --- Historial ---

def test_historial_lista_operaciones(cliente, traslado):
    response = cliente.get(reverse('caja:historial'), {'tipo': 'traslados'})
    assert response.status_code == 200
    assert [op.tipo for op in response.context['operaciones']] == ["Traslado"]
    assert "En tránsito" in response.content.decode()


def test_historial_vacio(cliente):
    response = cliente.get(reverse('caja:historial'))
    assert "No se encontraron operaciones" in response.content.decode()


def test_historial_con_rango_invertido_usa_filtros_por_defecto(cliente, apertura):
    response = cliente.get(reverse('caja:historial'), {'desde': '2024-03-05', 'hasta': '2024-03-01'})
    assert response.status_code == 200
    assert len(response.context['operaciones']) == 1
    assert "no puede ser posterior" in response.content.decode()


def test_historial_incompleto_se_avisa(cliente, apertura, monkeypatch):
    def fallo(*args, **kwargs):
        raise ErrorAlmacen("timeout")

    monkeypatch.setitem(historial.FUENTES, 'traslados', fallo)
    response = cliente.get(reverse('caja:historial'))
    contenido = response.content.decode()
    assert response.status_code == 200
    assert "Historial incompleto" in contenido
    assert response.context['incompleto'] == ['traslados']
    assert len(response.context['operaciones']) == 1


# --- Secciones pendientes y plantillas ---

def test_proximamente_redirige_con_aviso(cliente):
    response = cliente.get(reverse('caja:proximamente', args=['reportes']), follow=True)
    assert response.redirect_chain[-1][0] == reverse('caja:dashboard')
    assert "Próximamente" in response.content.decode()


def test_proximamente_seccion_desconocida(cliente):
    response = cliente.get(reverse('caja:proximamente', args=['nomina']))
    assert response.status_code == 404


def test_plantilla_para_staff(client, db):
    admin = User.objects.create_user(username='admin', password='x', is_staff=True)
    client.force_login(admin)
    response = client.get(reverse('caja:descargar_plantilla', args=['cajas']))

    assert response.status_code == 200
    assert 'plantilla_cajas.xlsx' in response['Content-Disposition']
    hoja = openpyxl.load_workbook(BytesIO(response.content)).active
    assert [c.value for c in hoja[1]] == ['id', 'nombre', 'ubicacion', 'es_principal', 'activa']


def test_plantilla_sin_permisos(cliente):
    response = cliente.get(reverse('caja:descargar_plantilla', args=['cajas']))
    assert response.status_code == 302
    assert response.url == reverse('caja:dashboard')
