from django.db import migrations, models
import django.db.models.deletion
import django.utils.timezone
from django.conf import settings

class Migration(migrations.Migration):

    initial = True

    dependencies = [
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name='Perfil',
            fields=[
                ('user', models.OneToOneField(on_delete=django.db.models.deletion.CASCADE, primary_key=True, related_name='perfil', serialize=False, to=settings.AUTH_USER_MODEL)),
                ('nombre_completo', models.CharField(blank=True, max_length=200)),
                ('email', models.EmailField(blank=True, max_length=254)),
            ],
            options={
                'verbose_name': 'Perfil',
                'verbose_name_plural': 'Perfiles',
                'db_table': 'profiles',
            },
        ),
        migrations.CreateModel(
            name='Caja',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('nombre', models.CharField(max_length=100, unique=True)),
                ('ubicacion', models.CharField(blank=True, max_length=255)),
                ('es_principal', models.BooleanField(default=False, help_text='Caja que recibe los traslados de efectivo')),
                ('activa', models.BooleanField(default=True)),
            ],
            options={
                'verbose_name': 'Caja',
                'verbose_name_plural': 'Cajas',
                'db_table': 'cajas',
                'ordering': ['nombre'],
            },
        ),
        migrations.CreateModel(
            name='Parametro',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('clave', models.CharField(max_length=100, unique=True)),
                ('valor', models.CharField(max_length=255)),
                ('descripcion', models.CharField(blank=True, max_length=255)),
            ],
            options={
                'verbose_name': 'Parámetro',
                'verbose_name_plural': 'Parámetros',
                'db_table': 'parametros',
            },
        ),
        migrations.CreateModel(
            name='Turno',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('fecha', models.DateField(default=django.utils.timezone.localdate)),
                ('hora_inicio', models.TimeField()),
                ('hora_fin', models.TimeField(blank=True, null=True)),
                ('estado', models.CharField(choices=[('abierto', 'Abierto'), ('cerrado', 'Cerrado')], default='abierto', max_length=10)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('caja', models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name='turnos', to='caja.caja')),
                ('usuario', models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name='turnos', to='caja.perfil')),
            ],
            options={
                'verbose_name': 'Turno',
                'verbose_name_plural': 'Turnos',
                'db_table': 'turnos',
                'ordering': ['-created_at', '-id'],
            },
        ),
        migrations.CreateModel(
            name='Apertura',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('monto_inicial', models.DecimalField(decimal_places=2, max_digits=12)),
                ('cerrada', models.BooleanField(default=False)),
                ('fecha_hora', models.DateTimeField(default=django.utils.timezone.now)),
                ('turno', models.OneToOneField(on_delete=django.db.models.deletion.CASCADE, related_name='apertura', to='caja.turno')),
            ],
            options={
                'verbose_name': 'Apertura',
                'verbose_name_plural': 'Aperturas',
                'db_table': 'aperturas',
                'ordering': ['-fecha_hora'],
            },
        ),
        migrations.CreateModel(
            name='Arqueo',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('monto_contado', models.DecimalField(decimal_places=2, max_digits=12)),
                ('monto_esperado', models.DecimalField(decimal_places=2, max_digits=12)),
                ('diferencia', models.DecimalField(decimal_places=2, help_text='Positivo sobra, Negativo falta', max_digits=12)),
                ('comentario', models.TextField(blank=True, null=True)),
                ('fecha_hora', models.DateTimeField(default=django.utils.timezone.now)),
                ('apertura', models.OneToOneField(on_delete=django.db.models.deletion.PROTECT, related_name='arqueo', to='caja.apertura')),
            ],
            options={
                'verbose_name': 'Arqueo',
                'verbose_name_plural': 'Arqueos',
                'db_table': 'arqueos',
                'ordering': ['-fecha_hora'],
            },
        ),
        migrations.CreateModel(
            name='Traslado',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('monto', models.DecimalField(decimal_places=2, max_digits=12)),
                ('estado', models.CharField(choices=[('en_transito', 'En tránsito'), ('recibido', 'Recibido'), ('observado', 'Observado')], default='en_transito', max_length=15)),
                ('comentario', models.TextField(blank=True, null=True)),
                ('fecha_hora_envio', models.DateTimeField(default=django.utils.timezone.now)),
                ('fecha_hora_recepcion', models.DateTimeField(blank=True, null=True)),
                ('arqueo', models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name='traslados', to='caja.arqueo')),
                ('caja_destino', models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name='traslados_recibidos', to='caja.caja')),
                ('caja_origen', models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name='traslados_enviados', to='caja.caja')),
            ],
            options={
                'verbose_name': 'Traslado',
                'verbose_name_plural': 'Traslados',
                'db_table': 'traslados',
                'ordering': ['-fecha_hora_envio'],
            },
        ),
        migrations.CreateModel(
            name='Recepcion',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('monto_recibido', models.DecimalField(decimal_places=2, max_digits=12)),
                ('diferencia', models.DecimalField(decimal_places=2, help_text='Recibido menos trasladado', max_digits=12)),
                ('comentario', models.TextField(blank=True, null=True)),
                ('fecha_hora', models.DateTimeField(default=django.utils.timezone.now)),
                ('traslado', models.OneToOneField(on_delete=django.db.models.deletion.PROTECT, related_name='recepcion', to='caja.traslado')),
                ('usuario_receptor', models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name='recepciones', to='caja.perfil')),
            ],
            options={
                'verbose_name': 'Recepción',
                'verbose_name_plural': 'Recepciones',
                'db_table': 'recepciones',
                'ordering': ['-fecha_hora'],
            },
        ),
    ]
