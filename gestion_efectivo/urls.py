from django.contrib import admin
from django.urls import path, include

# Configuración del Admin (Título)
admin.site.site_header = "Administración | Gestión de Efectivo"
admin.site.site_title = "Gestión de Efectivo"
admin.site.index_title = "Panel de Control"

urlpatterns = [
    path('admin/', admin.site.urls),
    # La app de caja carga en la página principal.
    path('', include('caja.urls')),
]
