from typing import Callable

from loguru import logger

from clinicportal.clinic.adapters.json_file import JsonFileClinicStore
from clinicportal.clinic.adapters.memory import InMemoryClinicStore
from clinicportal.clinic.service import ClinicService
from clinicportal.config import AppConfig, StoreBackend


def _build_memory(config: AppConfig) -> ClinicService:
    return ClinicService(InMemoryClinicStore(), window_days=config.booking_window_days)


def _build_json_file(config: AppConfig) -> ClinicService:
    store = JsonFileClinicStore(config.store.path)
    return ClinicService(store, window_days=config.booking_window_days)


_BUILDERS: dict[StoreBackend, Callable[[AppConfig], ClinicService]] = {
    StoreBackend.MEMORY: _build_memory,
    StoreBackend.JSON_FILE: _build_json_file,
}


def build_clinic_service(config: AppConfig) -> ClinicService:
    """Build the clinic service with the store selected in config."""
    backend = config.store.backend
    logger.info("Building clinic service with store: {}", backend.value)
    return _BUILDERS[backend](config)
