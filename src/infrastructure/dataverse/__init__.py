"""Dataverse Web API adapters."""

from src.infrastructure.dataverse.record_store import DataverseRecordStore

__all__ = ["DataverseRecordStore"]
