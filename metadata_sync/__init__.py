"""
Sincronizacion de metadata de certificados entre Sectigo y Keyfactor.

Se ejecuta como job batch (una corrida por invocacion), no como servicio.
"""

__version__ = "1.0.0"
