# caja/errores.py
"""Errores del dominio de caja. Las vistas solo capturan subclases de ErrorCaja."""


class ErrorCaja(Exception):
    pass


class ErrorValidacion(ErrorCaja):
    """Dato faltante o inválido; se detecta antes de cualquier escritura."""


class AperturaNoEncontrada(ErrorCaja):
    """El usuario no tiene una apertura activa (o ya fue cerrada)."""


class ErrorAlmacen(ErrorCaja):
    """Fallo de la base de datos (restricción violada, conexión caída, etc.)."""


class ErrorAutenticacion(ErrorCaja):
    """No hay sesión iniciada o el usuario no tiene perfil."""


class HistorialIncompleto(ErrorAlmacen):
    """
    Una o más fuentes del historial fallaron. Lleva las operaciones que sí
    se pudieron cargar para que la vista las muestre marcadas como parciales.
    """

    def __init__(self, fallidos, operaciones):
        self.fallidos = list(fallidos)
        self.operaciones = operaciones
        super().__init__(f"No se pudo cargar: {', '.join(self.fallidos)}")
