# caja/urls.py
from django.urls import path
from . import views
from django.contrib.auth import views as auth_views

app_name = 'caja'

urlpatterns = [
    # --- RUTAS PÚBLICAS Y DE AUTENTICACIÓN ---
    path('', views.portal_view, name='portal'),
    path('login/', auth_views.LoginView.as_view(template_name='caja/login.html'), name='login'),
    path('logout/', views.logout_view, name='logout'),

    # --- OPERACIONES DE CAJA ---
    path('dashboard/', views.dashboard_view, name='dashboard'),
    path('apertura-caja/', views.apertura_caja_view, name='apertura_caja'),
    path('arqueo-caja/', views.arqueo_caja_view, name='arqueo_caja'),
    path('arqueo-caja/diferencia/', views.diferencia_arqueo_ajax_view, name='diferencia_arqueo'),
    path('traslado-efectivo/', views.traslado_efectivo_view, name='traslado_efectivo'),
    path('recepcion-traslado/', views.recepcion_traslado_view, name='recepcion_traslado'),

    # --- CONSULTAS ---
    path('historial/', views.historial_view, name='historial'),
    path('proximamente/<str:seccion>/', views.proximamente_view, name='proximamente'),

    # --- PLANTILLAS DE IMPORTACIÓN ---
    path('descargar-plantilla/<str:model_name>/', views.descargar_plantilla_view, name='descargar_plantilla'),
]
