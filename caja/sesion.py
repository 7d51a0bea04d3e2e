# caja/sesion.py
from dataclasses import dataclass

from django.contrib.auth.models import User

from .errores import ErrorAutenticacion
from .models import Perfil
from . import consultas


@dataclass(frozen=True)
class ContextoSesion:
    """Identidad del usuario actual, leída una vez por request y pasada explícitamente."""
    usuario: User
    perfil: Perfil


def obtener_contexto(request):
    user = getattr(request, 'user', None)
    if user is None or not user.is_authenticated:
        raise ErrorAutenticacion("No hay una sesión iniciada.")
    return ContextoSesion(usuario=user, perfil=consultas.obtener_perfil(user))
