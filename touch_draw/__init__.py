from .vector_math import (
    get_orthogonal_basis_vector,
    get_planar_distance,
    scale_vector,
    subtract_vectors,
    add_vectors,
    get_midpoint,
    is_finite_vector,
)
from .clipping import crop_line_segment_by_extent, get_line_intersection
from .events import Observable, TouchDrawEvent, TouchDrawEventType
from .features import Feature, FeatureStore, MemoryFeatureStore
from .view import MapView, PointerEvent, StaticMapView
from .handle import OrthogonalMovementHandle
from .overlays import (
    ButtonControl,
    DimensionOverlay,
    MemoryOverlayHost,
    OverlayHost,
    OverlayLayer,
    SelectControl,
)
from .config import (
    DEFAULT_UNIT_CONVERSIONS,
    CandidateSearchConfig,
    TouchDrawConfigurationError,
    TouchDrawOptions,
    get_candidate_search_config,
    set_candidate_search_config,
)
from .candidates import CandidateHandleFinder, CandidateSet
from .drafting import DraftingError, DraftingState
from .interaction import TouchDrawInteraction, TouchDrawState

__all__ = [
    'get_orthogonal_basis_vector',
    'get_planar_distance',
    'scale_vector',
    'subtract_vectors',
    'add_vectors',
    'get_midpoint',
    'is_finite_vector',
    'crop_line_segment_by_extent',
    'get_line_intersection',
    'Observable',
    'TouchDrawEvent',
    'TouchDrawEventType',
    'Feature',
    'FeatureStore',
    'MemoryFeatureStore',
    'MapView',
    'PointerEvent',
    'StaticMapView',
    'OrthogonalMovementHandle',
    'ButtonControl',
    'DimensionOverlay',
    'MemoryOverlayHost',
    'OverlayHost',
    'OverlayLayer',
    'SelectControl',
    'DEFAULT_UNIT_CONVERSIONS',
    'CandidateSearchConfig',
    'TouchDrawConfigurationError',
    'TouchDrawOptions',
    'get_candidate_search_config',
    'set_candidate_search_config',
    'CandidateHandleFinder',
    'CandidateSet',
    'DraftingError',
    'DraftingState',
    'TouchDrawInteraction',
    'TouchDrawState',
]
