# caja/views.py
import logging
from functools import wraps

from django.shortcuts import render, redirect
from django.http import HttpResponse, JsonResponse, Http404
from django.contrib import messages
from django.contrib.auth import logout as auth_logout
from django.contrib.auth.decorators import login_required
from django.urls import reverse
from django.utils.html import format_html
from django.utils.http import urlencode
import openpyxl

from . import consultas, servicios
from .calculos import evaluar_arqueo
from .errores import ErrorCaja, ErrorAlmacen, ErrorAutenticacion, AperturaNoEncontrada, HistorialIncompleto
from .forms import (
    AperturaCajaForm, ArqueoCajaForm, TrasladoEfectivoForm, RecepcionTrasladoForm, HistorialFiltrosForm
)
from .historial import FiltrosHistorial, cargar_historial
from .sesion import obtener_contexto

logger = logging.getLogger(__name__)

PLANTILLAS = {
    'cajas': {'template_headers': ['id', 'nombre', 'ubicacion', 'es_principal', 'activa']},
    'parametros': {'template_headers': ['id', 'clave', 'valor', 'descripcion']},
}

SECCIONES_PROXIMAMENTE = {
    'reportes': "Reportes en desarrollo",
    'configuracion': "Configuración en desarrollo",
}


# ==============================================================================
# HELPER: CONTEXTO DE SESIÓN EXPLÍCITO
# ==============================================================================
def _error_del_sistema(motivo, error):
    return HttpResponse(
        format_html(
            "<div style='padding:20px; color:red;'><h1>Error del Sistema</h1><p>{}</p><pre>{}</pre></div>",
            motivo, error,
        ),
        status=503,
    )


def con_contexto(vista):
    """Exige sesión y pasa el ContextoSesion como segundo argumento de la vista."""
    @wraps(vista)
    def envoltura(request, *args, **kwargs):
        try:
            contexto = obtener_contexto(request)
        except ErrorAutenticacion:
            auth_logout(request)
            return redirect('caja:login')
        except ErrorAlmacen as e:
            return _error_del_sistema("No se pudo cargar el perfil:", e)
        try:
            return vista(request, contexto, *args, **kwargs)
        except ErrorAlmacen as e:
            logger.error("Error de almacenamiento en %s: %s", request.path, e)
            return _error_del_sistema("No se pudo consultar la base de datos:", e)
    return login_required(envoltura)


# ==============================================================================
# PORTAL, SESIÓN Y DASHBOARD
# ==============================================================================

def portal_view(request):
    if request.user.is_authenticated and not request.GET.get('force'):
        return redirect('caja:dashboard')
    return render(request, 'caja/portal.html')


def logout_view(request):
    nombre = "Usuario"
    if request.user.is_authenticated:
        nombre = request.user.first_name or request.user.username
    auth_logout(request)
    return redirect(reverse('caja:portal') + '?' + urlencode({'logout': 'true', 'nombre': nombre}))


@con_contexto
def dashboard_view(request, contexto):
    try:
        apertura_activa = consultas.buscar_apertura_activa(contexto.perfil)
    except ErrorAlmacen as e:
        messages.error(request, f"No se pudo consultar la apertura activa: {e}")
        apertura_activa = None

    operaciones = [
        {'titulo': "Apertura de Caja", 'descripcion': "Iniciar turno con fondo inicial", 'url': 'caja:apertura_caja'},
        {'titulo': "Arqueo de Caja", 'descripcion': "Contar efectivo y cerrar turno", 'url': 'caja:arqueo_caja'},
        {'titulo': "Traslado de Efectivo", 'descripcion': "Enviar efectivo a Caja Principal", 'url': 'caja:traslado_efectivo'},
        {'titulo': "Recepción de Traslado", 'descripcion': "Recibir efectivo en Caja Principal", 'url': 'caja:recepcion_traslado'},
    ]
    return render(request, 'caja/dashboard.html', {
        'perfil': contexto.perfil,
        'apertura_activa': apertura_activa,
        'operaciones': operaciones,
    })


@login_required
def proximamente_view(request, seccion):
    if seccion not in SECCIONES_PROXIMAMENTE:
        raise Http404("Sección desconocida")
    messages.info(request, f"Próximamente: {SECCIONES_PROXIMAMENTE[seccion]}")
    return redirect('caja:dashboard')


# ==============================================================================
# APERTURA Y ARQUEO DE CAJA
# ==============================================================================

@con_contexto
def apertura_caja_view(request, contexto):
    if consultas.buscar_apertura_activa(contexto.perfil) is not None:
        messages.info(request, "Ya tienes una apertura activa. Realiza el arqueo para cerrar el turno.")
        return redirect('caja:arqueo_caja')

    form = AperturaCajaForm(request.POST or None)
    if request.method == 'POST' and form.is_valid():
        try:
            servicios.abrir_turno(contexto, form.cleaned_data['caja'].pk, form.cleaned_data['monto_inicial'])
            messages.success(request, f"Caja {form.cleaned_data['caja'].nombre} abierta. ¡Buen turno!")
            return redirect('caja:dashboard')
        except ErrorCaja as e:
            messages.error(request, str(e))
    return render(request, 'caja/apertura_caja.html', {'form': form})


@con_contexto
def arqueo_caja_view(request, contexto):
    apertura_activa = consultas.buscar_apertura_activa(contexto.perfil)
    if apertura_activa is None:
        return render(request, 'caja/arqueo_sin_apertura.html')

    umbral = consultas.obtener_umbral_diferencia()
    form = ArqueoCajaForm(request.POST or None, esperado=apertura_activa.monto_inicial, umbral=umbral)
    if request.method == 'POST' and form.is_valid():
        try:
            servicios.cerrar_turno(
                contexto,
                apertura_activa.apertura_id,
                apertura_activa.turno_id,
                form.cleaned_data['monto_contado'],
                apertura_activa.monto_inicial,
                form.cleaned_data['comentario'],
            )
            messages.success(request, "¡Arqueo completado! El turno ha sido cerrado correctamente.")
            return redirect('caja:dashboard')
        except AperturaNoEncontrada as e:
            messages.error(request, str(e))
            return redirect('caja:arqueo_caja')
        except ErrorCaja as e:
            messages.error(request, str(e))

    datos = getattr(form, 'cleaned_data', {})
    return render(request, 'caja/arqueo_caja.html', {
        'form': form,
        'apertura': apertura_activa,
        'umbral': umbral,
        'diferencia': datos.get('diferencia'),
        'requiere_comentario': datos.get('requiere_comentario', False),
    })


@con_contexto
def diferencia_arqueo_ajax_view(request, contexto):
    """Diferencia en vivo mientras el cajero escribe el monto contado."""
    apertura_activa = consultas.buscar_apertura_activa(contexto.perfil)
    if apertura_activa is None:
        return JsonResponse({'error': 'No hay apertura activa'}, status=404)
    umbral = consultas.obtener_umbral_diferencia()
    resultado = evaluar_arqueo(request.GET.get('monto_contado'), apertura_activa.monto_inicial, umbral)
    return JsonResponse({
        'diferencia': str(resultado.diferencia) if resultado.diferencia is not None else None,
        'requiere_comentario': resultado.requiere_comentario,
        'umbral': str(umbral),
    })


# ==============================================================================
# TRASLADOS Y RECEPCIONES
# ==============================================================================

@con_contexto
def traslado_efectivo_view(request, contexto):
    form = TrasladoEfectivoForm(request.POST or None, perfil=contexto.perfil)
    if request.method == 'POST' and form.is_valid():
        datos = form.cleaned_data
        try:
            traslado = servicios.registrar_traslado(
                contexto, datos['arqueo'].pk, datos['caja_destino'].pk, datos['monto'], datos['comentario']
            )
            messages.success(request, f"Traslado de ${traslado.monto} enviado a {traslado.caja_destino.nombre}.")
            return redirect('caja:dashboard')
        except ErrorCaja as e:
            messages.error(request, str(e))
    return render(request, 'caja/traslado_efectivo.html', {'form': form})


@con_contexto
def recepcion_traslado_view(request, contexto):
    form = RecepcionTrasladoForm(request.POST or None)
    if request.method == 'POST' and form.is_valid():
        datos = form.cleaned_data
        try:
            recepcion = servicios.registrar_recepcion(
                contexto, datos['traslado'].pk, datos['monto_recibido'], datos['comentario']
            )
            if recepcion.diferencia == 0:
                messages.success(request, "Traslado recibido sin diferencias.")
            else:
                messages.warning(request, f"Traslado recibido con diferencia de ${recepcion.diferencia}.")
            return redirect('caja:dashboard')
        except ErrorCaja as e:
            messages.error(request, str(e))
    return render(request, 'caja/recepcion_traslado.html', {
        'form': form,
        'umbral': consultas.obtener_umbral_diferencia(),
    })


# ==============================================================================
# HISTORIAL
# ==============================================================================

@con_contexto
def historial_view(request, contexto):
    form = HistorialFiltrosForm(request.GET or None)
    filtros = form.filtros() if form.is_bound and form.is_valid() else FiltrosHistorial()

    incompleto = []
    try:
        operaciones = cargar_historial(filtros)
    except HistorialIncompleto as e:
        operaciones = e.operaciones
        incompleto = e.fallidos
        logger.warning("Historial parcial para %s: faltan %s", contexto.usuario.username, e.fallidos)
        messages.error(request, f"Historial incompleto. No se pudieron cargar: {', '.join(e.fallidos)}.")

    return render(request, 'caja/historial.html', {
        'form': form,
        'operaciones': operaciones,
        'incompleto': incompleto,
    })


# ==============================================================================
# PLANTILLAS DE IMPORTACIÓN (ADMIN)
# ==============================================================================

@login_required
def descargar_plantilla_view(request, model_name):
    if not request.user.is_staff:
        return redirect('caja:dashboard')
    if model_name not in PLANTILLAS:
        raise Http404("Plantilla desconocida")
    headers = PLANTILLAS[model_name]['template_headers']
    logger.info("Descarga de plantilla %s por %s", model_name, request.user.username)
    wb = openpyxl.Workbook()
    wb.active.append(headers)
    response = HttpResponse(content_type='application/vnd.openxmlformats-officedocument.spreadsheetml.sheet')
    response['Content-Disposition'] = f'attachment; filename="plantilla_{model_name}.xlsx"'
    wb.save(response)
    return response
