"""
Dataset Registry
================

Read-only catalog of DatasetDefinitions keyed by dataset id.

WHY THIS FILE EXISTS
--------------------
Every request needs to resolve its ``datasetId`` to a definition before it
can be validated or translated. The registry is built once by the
composition root (``reporting.main.create_app``) and handed to consumers
through FastAPI dependencies; it is never mutated afterwards, so any number
of concurrent requests can read it without locking.

FAILURE MODE
------------
``get`` returns None for an unknown id. Turning that into a user-facing
error is the caller's job (see ErrorCode.DATASET_NOT_FOUND).
"""

import logging
from types import MappingProxyType
from typing import Callable, Iterable, Mapping, Optional, Tuple

from reporting.semantic.builders import DEFAULT_BUILDERS
from reporting.semantic.model import DatasetDefinition

logger = logging.getLogger(__name__)


class DatasetRegistry:
    """
    Immutable lookup table of datasets.

    USAGE:
        registry = build_default_registry()
        dataset = registry.get("events")
        if dataset is None:
            ...  # caller decides how to report "not found"
    """

    __slots__ = ("_datasets",)

    def __init__(self, datasets: Iterable[DatasetDefinition]):
        catalog = {}
        for dataset in datasets:
            if dataset.id in catalog:
                raise ValueError(f"Duplicate dataset id: '{dataset.id}'")
            catalog[dataset.id] = dataset
        self._datasets: Mapping[str, DatasetDefinition] = MappingProxyType(catalog)

    def get(self, dataset_id: str) -> Optional[DatasetDefinition]:
        """Return the dataset registered under ``dataset_id``, or None."""
        if dataset_id is None:
            return None
        return self._datasets.get(dataset_id)

    def list_all(self) -> Tuple[DatasetDefinition, ...]:
        """Every registered dataset. Order is not significant."""
        return tuple(self._datasets.values())

    def ids(self) -> Tuple[str, ...]:
        return tuple(self._datasets.keys())

    def __contains__(self, dataset_id: object) -> bool:
        return dataset_id in self._datasets

    def __len__(self) -> int:
        return len(self._datasets)


def build_registry(builders: Iterable[Callable[[], DatasetDefinition]]) -> DatasetRegistry:
    """Run each builder once and freeze the results into a registry."""
    registry = DatasetRegistry(builder() for builder in builders)
    logger.info("[REGISTRY] Built dataset registry: %s", ", ".join(registry.ids()))
    return registry


def build_default_registry() -> DatasetRegistry:
    """Registry with the events, supplier and item datasets."""
    return build_registry(DEFAULT_BUILDERS)
