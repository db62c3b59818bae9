"""Feature records and an in-memory feature store."""

from __future__ import annotations

import itertools
import logging
from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List, Optional, Protocol

from shapely import STRtree
from shapely.geometry import box
from shapely.geometry.base import BaseGeometry

from .types import Extent

logger = logging.getLogger(__name__)

_FEATURE_IDS = itertools.count(1)


@dataclass(eq=False)
class Feature:
    """A geometry plus free-form properties."""

    geometry: Optional[BaseGeometry]
    properties: Dict[str, Any] = field(default_factory=dict)
    id: int = field(default_factory=lambda: next(_FEATURE_IDS))

    def get(self, key: str, default: Any = None) -> Any:
        return self.properties.get(key, default)

    def set(self, key: str, value: Any) -> None:
        self.properties[key] = value


class FeatureStore(Protocol):
    """Collaborator contract for reference and destination stores."""

    @property
    def revision(self) -> int:
        ...

    def features_in_extent(self, extent: Extent) -> List[Feature]:
        ...

    def add_feature(self, feature: Feature) -> None:
        ...

    def remove_feature(self, feature: Feature) -> None:
        ...


class MemoryFeatureStore:
    """Feature store backed by a list and a lazily rebuilt STR-tree.

    ``revision`` increases on every mutation. Extent queries match on
    bounding boxes, the way a tile-less vector source does.
    """

    def __init__(self, features: Optional[Iterable[Feature]] = None) -> None:
        self._features: List[Feature] = []
        self._revision = 0
        self._index: Optional[STRtree] = None
        self._indexed: List[Feature] = []
        self.add_features(features or ())

    @property
    def revision(self) -> int:
        return self._revision

    def __len__(self) -> int:
        return len(self._features)

    def __iter__(self):
        return iter(list(self._features))

    @property
    def features(self) -> List[Feature]:
        return list(self._features)

    def changed(self) -> None:
        self._revision += 1
        self._index = None

    def add_feature(self, feature: Feature) -> None:
        self._features.append(feature)
        self.changed()
        logger.debug("Feature %s added (revision %d)", feature.id, self._revision)

    def add_features(self, features: Iterable[Feature]) -> None:
        for feature in features:
            self.add_feature(feature)

    def remove_feature(self, feature: Feature) -> None:
        try:
            self._features.remove(feature)
        except ValueError:
            logger.debug("Feature %s not in store; nothing removed", feature.id)
            return
        self.changed()

    def clear(self) -> None:
        self._features.clear()
        self.changed()

    def _ensure_index(self) -> STRtree:
        if self._index is None:
            self._indexed = [
                feature
                for feature in self._features
                if feature.geometry is not None and not feature.geometry.is_empty
            ]
            self._index = STRtree([feature.geometry for feature in self._indexed])
        return self._index

    def features_in_extent(self, extent: Extent) -> List[Feature]:
        index = self._ensure_index()
        if not self._indexed:
            return []
        hits = sorted(int(i) for i in index.query(box(*extent)))
        return [self._indexed[i] for i in hits]


__all__ = ["Feature", "FeatureStore", "MemoryFeatureStore"]
