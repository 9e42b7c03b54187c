"""
Adapters layer - External data sources.
"""

from .json_appointments import JsonAppointmentSource

__all__ = ["JsonAppointmentSource"]
