# caja/admin.py

from django.contrib import admin
from django.urls import path
from import_export.admin import ImportExportModelAdmin

from .models import Perfil, Caja, Turno, Apertura, Arqueo, Traslado, Recepcion, Parametro
from .resources import CajaResource, ParametroResource
from .views import descargar_plantilla_view


# === CLASE BASE DE ADMIN CON DESCARGA DE PLANTILLA ===
class PlantillaImportExportAdmin(ImportExportModelAdmin):
    plantilla = None

    def get_urls(self):
        urls = super().get_urls()
        custom_urls = [
            path(
                'descargar-plantilla/',
                self.admin_site.admin_view(descargar_plantilla_view),
                {'model_name': self.plantilla},
                name=f'caja_{self.plantilla}_descargar_plantilla',
            )
        ]
        return custom_urls + urls


# === REGISTRO DE MODELOS EN EL ADMIN ===

@admin.register(Caja)
class CajaAdmin(PlantillaImportExportAdmin):
    resource_class = CajaResource
    plantilla = 'cajas'
    list_display = ('nombre', 'ubicacion', 'es_principal', 'activa')
    list_filter = ('activa', 'es_principal')
    search_fields = ('nombre', 'ubicacion')

@admin.register(Parametro)
class ParametroAdmin(PlantillaImportExportAdmin):
    resource_class = ParametroResource
    plantilla = 'parametros'
    list_display = ('clave', 'valor', 'descripcion')
    search_fields = ('clave',)

@admin.register(Perfil)
class PerfilAdmin(admin.ModelAdmin):
    list_display = ('user', 'nombre_completo', 'email')
    search_fields = ('nombre_completo', 'email', 'user__username')

@admin.register(Turno)
class TurnoAdmin(admin.ModelAdmin):
    list_display = ('id', 'caja', 'usuario', 'fecha', 'hora_inicio', 'hora_fin', 'estado')
    list_filter = ('estado', 'fecha', 'caja')

@admin.register(Apertura)
class AperturaAdmin(admin.ModelAdmin):
    list_display = ('id', 'turno', 'monto_inicial', 'cerrada', 'fecha_hora')
    list_filter = ('cerrada', 'fecha_hora')

@admin.register(Arqueo)
class ArqueoAdmin(admin.ModelAdmin):
    list_display = ('id', 'apertura', 'monto_contado', 'monto_esperado', 'diferencia', 'fecha_hora')
    list_filter = ('fecha_hora',)
    readonly_fields = ('apertura', 'monto_contado', 'monto_esperado', 'diferencia', 'comentario', 'fecha_hora')

    # Un arqueo no se modifica ni se borra una vez registrado
    def has_add_permission(self, request):
        return False

    def has_delete_permission(self, request, obj=None):
        return False

@admin.register(Traslado)
class TrasladoAdmin(admin.ModelAdmin):
    list_display = ('id', 'caja_origen', 'caja_destino', 'monto', 'estado', 'fecha_hora_envio')
    list_filter = ('estado', 'caja_destino')

@admin.register(Recepcion)
class RecepcionAdmin(admin.ModelAdmin):
    list_display = ('id', 'traslado', 'usuario_receptor', 'monto_recibido', 'diferencia', 'fecha_hora')
    list_filter = ('fecha_hora',)
