"""Storage module - key-value persistence for health records."""

from .interface import StorageInterface
from .local_storage import LocalStorage
from .record_repository import RecordRepository, export_symptoms_csv

__all__ = ['StorageInterface', 'LocalStorage', 'RecordRepository', 'export_symptoms_csv']
