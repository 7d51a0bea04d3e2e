# caja/signals.py
import logging

from django.contrib.auth.models import User
from django.contrib.auth.signals import user_logged_in, user_logged_out, user_login_failed
from django.db.models.signals import post_save
from django.dispatch import receiver

from .models import Perfil

logger = logging.getLogger(__name__)


# ==============================================================================
# PERFIL: cada usuario nuevo recibe su fila en 'profiles'
# ==============================================================================

@receiver(post_save, sender=User)
def crear_perfil_usuario(sender, instance, created, **kwargs):
    if created:
        Perfil.objects.get_or_create(
            user=instance,
            defaults={'nombre_completo': instance.get_full_name() or instance.username, 'email': instance.email},
        )


# ==============================================================================
# EVENTOS DE SESIÓN
# ==============================================================================

@receiver(user_logged_in)
def log_user_login(sender, request, user, **kwargs):
    """Registra un log cuando un usuario inicia sesión exitosamente."""
    ip = request.META.get('REMOTE_ADDR') if request is not None else None
    logger.info("Inicio de sesión: %s desde %s", user.username, ip)


@receiver(user_logged_out)
def log_user_logout(sender, request, user, **kwargs):
    logger.info("Cierre de sesión: %s", user.username if user else "anónimo")


@receiver(user_login_failed)
def log_user_login_failed(sender, credentials, request=None, **kwargs):
    """Registra un log cuando un intento de inicio de sesión falla."""
    username = credentials.get('username', 'N/A')
    ip = request.META.get('REMOTE_ADDR') if request is not None else None
    logger.warning("Intento de inicio de sesión fallido: %s desde %s", username, ip)
