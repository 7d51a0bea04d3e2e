from django.db import models
from django.contrib.auth.models import User
from django.utils import timezone


# === PERFIL DE USUARIO (tabla 'profiles') ===
class Perfil(models.Model):
    # La PK es el id del usuario de autenticación
    user = models.OneToOneField(User, on_delete=models.CASCADE, primary_key=True, related_name='perfil')
    nombre_completo = models.CharField(max_length=200, blank=True)
    email = models.EmailField(blank=True)

    class Meta:
        db_table = 'profiles'
        verbose_name = "Perfil"
        verbose_name_plural = "Perfiles"

    def __str__(self):
        return self.nombre_completo or self.user.username


class Caja(models.Model):
    nombre = models.CharField(max_length=100, unique=True)
    ubicacion = models.CharField(max_length=255, blank=True)
    es_principal = models.BooleanField(default=False, help_text="Caja que recibe los traslados de efectivo")
    activa = models.BooleanField(default=True)

    class Meta:
        db_table = 'cajas'
        ordering = ['nombre']
        verbose_name = "Caja"
        verbose_name_plural = "Cajas"

    def __str__(self):
        return self.nombre


# --- Ciclo de vida del turno: Turno -> Apertura -> Arqueo ---

class Turno(models.Model):
    ABIERTO = 'abierto'
    CERRADO = 'cerrado'
    ESTADOS = [(ABIERTO, 'Abierto'), (CERRADO, 'Cerrado')]

    usuario = models.ForeignKey(Perfil, on_delete=models.PROTECT, related_name='turnos')
    caja = models.ForeignKey(Caja, on_delete=models.PROTECT, related_name='turnos')
    fecha = models.DateField(default=timezone.localdate)
    hora_inicio = models.TimeField()
    hora_fin = models.TimeField(null=True, blank=True)
    estado = models.CharField(max_length=10, choices=ESTADOS, default=ABIERTO)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        db_table = 'turnos'
        ordering = ['-created_at', '-id']
        verbose_name = "Turno"
        verbose_name_plural = "Turnos"

    def __str__(self):
        return f"Turno {self.id} - {self.caja.nombre} ({self.estado})"


class Apertura(models.Model):
    turno = models.OneToOneField(Turno, on_delete=models.CASCADE, related_name='apertura')
    monto_inicial = models.DecimalField(max_digits=12, decimal_places=2)
    cerrada = models.BooleanField(default=False)
    fecha_hora = models.DateTimeField(default=timezone.now)

    class Meta:
        db_table = 'aperturas'
        ordering = ['-fecha_hora']
        verbose_name = "Apertura"
        verbose_name_plural = "Aperturas"

    def __str__(self):
        return f"Apertura {self.id} - ${self.monto_inicial} ({'Cerrada' if self.cerrada else 'Activa'})"


class Arqueo(models.Model):
    apertura = models.OneToOneField(Apertura, on_delete=models.PROTECT, related_name='arqueo')
    monto_contado = models.DecimalField(max_digits=12, decimal_places=2)
    monto_esperado = models.DecimalField(max_digits=12, decimal_places=2)
    diferencia = models.DecimalField(max_digits=12, decimal_places=2, help_text="Positivo sobra, Negativo falta")
    comentario = models.TextField(null=True, blank=True)
    fecha_hora = models.DateTimeField(default=timezone.now)

    class Meta:
        db_table = 'arqueos'
        ordering = ['-fecha_hora']
        verbose_name = "Arqueo"
        verbose_name_plural = "Arqueos"

    def __str__(self):
        return f"Arqueo {self.id} - Contado ${self.monto_contado} (Dif. {self.diferencia})"


# --- Movimiento de efectivo entre cajas ---

class Traslado(models.Model):
    EN_TRANSITO = 'en_transito'
    RECIBIDO = 'recibido'
    OBSERVADO = 'observado'
    ESTADOS = [(EN_TRANSITO, 'En tránsito'), (RECIBIDO, 'Recibido'), (OBSERVADO, 'Observado')]

    arqueo = models.OneToOneField(Arqueo, on_delete=models.PROTECT, related_name='traslado')
    caja_origen = models.ForeignKey(Caja, on_delete=models.PROTECT, related_name='traslados_enviados')
    caja_destino = models.ForeignKey(Caja, on_delete=models.PROTECT, related_name='traslados_recibidos')
    monto = models.DecimalField(max_digits=12, decimal_places=2)
    estado = models.CharField(max_length=15, choices=ESTADOS, default=EN_TRANSITO)
    comentario = models.TextField(null=True, blank=True)
    fecha_hora_envio = models.DateTimeField(default=timezone.now)
    fecha_hora_recepcion = models.DateTimeField(null=True, blank=True)

    class Meta:
        db_table = 'traslados'
        ordering = ['-fecha_hora_envio']
        verbose_name = "Traslado"
        verbose_name_plural = "Traslados"

    def __str__(self):
        return f"Traslado {self.id}: {self.caja_origen.nombre} → {self.caja_destino.nombre} (${self.monto})"


class Recepcion(models.Model):
    traslado = models.OneToOneField(Traslado, on_delete=models.PROTECT, related_name='recepcion')
    usuario_receptor = models.ForeignKey(Perfil, on_delete=models.PROTECT, related_name='recepciones')
    monto_recibido = models.DecimalField(max_digits=12, decimal_places=2)
    diferencia = models.DecimalField(max_digits=12, decimal_places=2, help_text="Recibido menos trasladado")
    comentario = models.TextField(null=True, blank=True)
    fecha_hora = models.DateTimeField(default=timezone.now)

    class Meta:
        db_table = 'recepciones'
        ordering = ['-fecha_hora']
        verbose_name = "Recepción"
        verbose_name_plural = "Recepciones"

    def __str__(self):
        return f"Recepción {self.id} del traslado {self.traslado_id} (${self.monto_recibido})"


class Parametro(models.Model):
    UMBRAL_DIFERENCIA = 'umbral_diferencia'

    clave = models.CharField(max_length=100, unique=True)
    valor = models.CharField(max_length=255)
    descripcion = models.CharField(max_length=255, blank=True)

    class Meta:
        db_table = 'parametros'
        verbose_name = "Parámetro"
        verbose_name_plural = "Parámetros"

    def __str__(self):
        return f"{self.clave} = {self.valor}"
