"""
Appointment source backed by a JSON file.
"""

import json
import logging
from pathlib import Path
from typing import Any, List

from ..domain.exceptions import AppointmentSourceError

logger = logging.getLogger(__name__)


class JsonAppointmentSource:
    """
    Loads raw appointment entries from a JSON file.

    The file holds either a list of ``{"start": ..., "end": ...}`` objects or
    an object with an ``appointments`` list. Entries are returned as they are;
    checking them is the validator's job.
    """

    def __init__(self, path: Path):
        self.path = Path(path)

    def load(self) -> List[Any]:
        """
        Read the appointment entries.

        Returns:
            The raw entries, in file order

        Raises:
            AppointmentSourceError: If the file is missing, not JSON, or has
                no appointment list
        """
        if not self.path.exists():
            raise AppointmentSourceError(f"Appointments file not found: {self.path}")

        try:
            with open(self.path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except json.JSONDecodeError as exc:
            raise AppointmentSourceError(f"Invalid JSON in {self.path}: {exc}") from exc

        if isinstance(data, dict):
            data = data.get("appointments", data.get("currentAppointments"))

        if not isinstance(data, list):
            raise AppointmentSourceError(
                f"{self.path} must contain a list of appointments "
                "or an object with an 'appointments' list."
            )

        logger.debug("Loaded %d appointment entries from %s", len(data), self.path)
        return data
