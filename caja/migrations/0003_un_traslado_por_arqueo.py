import django.db.models.deletion
from django.db import migrations, models


class Migration(migrations.Migration):

    dependencies = [
        ('caja', '0002_parametros_iniciales'),
    ]

    operations = [
        migrations.AlterField(
            model_name='traslado',
            name='arqueo',
            field=models.OneToOneField(on_delete=django.db.models.deletion.PROTECT, related_name='traslado', to='caja.arqueo'),
        ),
    ]
