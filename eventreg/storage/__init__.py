"""
Módulo de persistência.
Suporta tabela SQL (ParticipantRepository/FeatureImageRepository)
e documentos JSON (JsonParticipantStore/JsonFeatureImageStore).
"""

from .base import RecordStore, FeatureImageStore
from .repository import ParticipantRepository, FeatureImageRepository
from .json_store import JsonParticipantStore, JsonFeatureImageStore

__all__ = [
    "RecordStore",
    "FeatureImageStore",
    "ParticipantRepository",
    "FeatureImageRepository",
    "JsonParticipantStore",
    "JsonFeatureImageStore",
]
