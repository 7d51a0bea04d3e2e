from django.db import migrations


def crear_umbral_diferencia(apps, schema_editor):
    Parametro = apps.get_model('caja', 'Parametro')
    Parametro.objects.get_or_create(
        clave='umbral_diferencia',
        defaults={'valor': '2.00', 'descripcion': 'Diferencia máxima sin comentario obligatorio (USD)'},
    )


class Migration(migrations.Migration):

    dependencies = [
        ('caja', '0001_initial'),
    ]

    operations = [
        migrations.RunPython(crear_umbral_diferencia, migrations.RunPython.noop),
    ]
