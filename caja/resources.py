from import_export import resources, fields
from import_export.widgets import BooleanWidget
from .models import Caja, Parametro


class CajaResource(resources.ModelResource):
    es_principal = fields.Field(attribute='es_principal', column_name='es_principal', widget=BooleanWidget())
    activa = fields.Field(attribute='activa', column_name='activa', widget=BooleanWidget())

    class Meta:
        model = Caja
        fields = ('id', 'nombre', 'ubicacion', 'es_principal', 'activa')
        export_order = fields
        skip_unchanged = True
        report_skipped = False
        import_id_fields = ('nombre',)

    def before_import_row(self, row, **kwargs):
        # Los nombres de caja llegan del Excel con espacios sobrantes
        if row.get('nombre'):
            row['nombre'] = str(row['nombre']).strip()


class ParametroResource(resources.ModelResource):
    class Meta:
        model = Parametro
        fields = ('id', 'clave', 'valor', 'descripcion')
        export_order = fields
        skip_unchanged = True
        report_skipped = False
        import_id_fields = ('clave',)
