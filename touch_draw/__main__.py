import argparse
import json
import logging
import math
import sys
from pathlib import Path
from typing import Dict, List, Optional, Sequence, Tuple

from shapely.geometry import mapping, shape
from shapely.ops import unary_union

from touch_draw import (
    DEFAULT_UNIT_CONVERSIONS,
    Feature,
    MemoryFeatureStore,
    MemoryOverlayHost,
    PointerEvent,
    StaticMapView,
    TouchDrawEventType,
    TouchDrawInteraction,
    TouchDrawOptions,
)

logger = logging.getLogger(__name__)


def _configure_logging(level: str) -> None:
    log_level = getattr(logging, level.upper(), logging.INFO)
    logging.basicConfig(
        level=log_level,
        format="%(levelname)s:%(name)s:%(message)s",
    )


def _parse_pair(value: Optional[str]) -> Optional[Tuple[float, float]]:
    if not value:
        return None
    parts = [part.strip() for part in value.split(",") if part.strip()]
    if len(parts) != 2:
        raise argparse.ArgumentTypeError(f"expected 'X,Y', got {value!r}")
    return float(parts[0]), float(parts[1])


def load_features(path: Path) -> List[Feature]:
    """Read a GeoJSON FeatureCollection, Feature or bare geometry into features."""

    with path.open(encoding="utf-8") as fin:
        data = json.load(fin)

    kind = data.get("type")
    if kind == "FeatureCollection":
        items = data.get("features", [])
    elif kind == "Feature":
        items = [data]
    else:
        items = [{"type": "Feature", "geometry": data, "properties": {}}]

    features = []
    for item in items:
        geometry = item.get("geometry")
        if not geometry:
            logger.warning("Skipping feature without geometry")
            continue
        features.append(Feature(shape(geometry), dict(item.get("properties") or {})))
    return features


def feature_to_geojson(feature: Feature) -> Dict[str, object]:
    return {
        "type": "Feature",
        "id": feature.id,
        "geometry": mapping(feature.geometry),
        "properties": dict(feature.properties),
    }


def main(argv: Optional[Sequence[str]] = None) -> None:
    parser = argparse.ArgumentParser(description="Draft a quadrilateral next to GeoJSON reference geometry")
    parser.add_argument("path", help="Path to a GeoJSON file with reference features")
    parser.add_argument(
        "--log-level",
        default="INFO",
        help="Logging level (default: INFO)",
    )
    parser.add_argument("--center", help="View centre as X,Y (default: centre of the data)")
    parser.add_argument("--resolution", type=float, help="Map units per pixel (default: fit the data)")
    parser.add_argument(
        "--size",
        default="1000,1000",
        help="View size in pixels as W,H (default: 1000,1000)",
    )
    parser.add_argument("--rotation", type=float, default=0.0, help="View rotation in degrees")
    parser.add_argument(
        "--handle-index",
        type=int,
        help="Index of the proposed handle to grab (default: the one nearest the view centre)",
    )
    parser.add_argument(
        "--unit",
        default="m",
        choices=sorted(DEFAULT_UNIT_CONVERSIONS),
        help="Unit used for --width, --offset-across and --offset-along (default: m)",
    )
    parser.add_argument("--width", help="Width of the drawn shape in --unit")
    parser.add_argument("--offset-across", help="Translation across the spine in --unit")
    parser.add_argument("--offset-along", help="Translation along the spine in --unit")
    parser.add_argument(
        "--drag",
        help="Drag the grabbed handle by DX,DY map units instead of typing a width",
    )
    parser.add_argument("--output-path", help="Write the resulting GeoJSON to this path")
    args = parser.parse_args(argv)

    _configure_logging(args.log_level)

    features = load_features(Path(args.path))
    if not features:
        logger.error("No reference features in %s", args.path)
        raise SystemExit(1)
    logger.info("Loaded %d reference feature(s) from %s", len(features), args.path)

    size_pair = _parse_pair(args.size)
    size = (int(size_pair[0]), int(size_pair[1]))
    bounds = unary_union([feature.geometry for feature in features]).bounds
    view = StaticMapView.fit(bounds, size=size)
    center = _parse_pair(args.center)
    if center is not None:
        view.set_center(center)
    if args.resolution:
        view.set_resolution(args.resolution)
    view.set_rotation(math.radians(args.rotation))

    reference = MemoryFeatureStore(features)
    destination = MemoryFeatureStore()
    interaction = TouchDrawInteraction(
        TouchDrawOptions(
            reference_source=reference,
            destination_source=destination,
            selected_unit=args.unit,
        )
    )
    host = MemoryOverlayHost()
    interaction.set_map(view, host)
    interaction.handle_post_render()

    handles = interaction.candidates.handles
    print(f"Proposed handles: {len(handles)}")
    for idx, handle in enumerate(handles):
        x, y = handle.geometry
        print(f"  [{idx}] at ({x:.6f}, {y:.6f}) basis=({handle.basis_vector[0]:.4f}, {handle.basis_vector[1]:.4f})")
    if not handles:
        logger.error("No handles proposed; try another --center or --resolution")
        raise SystemExit(1)

    if args.handle_index is not None:
        if not 0 <= args.handle_index < len(handles):
            logger.error("Handle index %d out of range", args.handle_index)
            raise SystemExit(1)
        handle = handles[args.handle_index]
    else:
        handle = min(
            handles,
            key=lambda h: math.dist(view.get_pixel_from_coordinate(h.geometry), (size[0] / 2, size[1] / 2)),
        )

    committed: List[Feature] = []
    interaction.on(TouchDrawEventType.DRAWEND, lambda event: committed.append(event.feature))

    down = PointerEvent.at_coordinate(view, handle.geometry)
    interaction.handle_down_event(down)
    drafting = interaction.drafting_state
    if drafting is None:
        logger.error("Could not start a draft from the selected handle")
        raise SystemExit(1)

    drag = _parse_pair(args.drag)
    if drag is not None:
        target = (down.coordinate[0] + drag[0], down.coordinate[1] + drag[1])
        interaction.handle_drag_event(PointerEvent.at_coordinate(view, target))
    interaction.handle_up_event(down)

    for text, overlay in (
        (args.width, drafting.scale_overlay),
        (args.offset_across, drafting.x_move_overlay),
        (args.offset_along, drafting.y_move_overlay),
    ):
        if text is None:
            continue
        overlay.set_text(text)
        if not overlay.valid:
            logger.warning("Ignoring invalid dimension %r for %s", text, overlay.name)

    for overlay in (drafting.scale_overlay, drafting.x_move_overlay, drafting.y_move_overlay):
        if overlay.visible:
            print(f"{overlay.name}: {overlay.text} {drafting.selected_unit}")

    drafting.confirm_button.click()

    if not committed:
        logger.error("Draft was not committed")
        raise SystemExit(1)

    collection = {
        "type": "FeatureCollection",
        "features": [feature_to_geojson(feature) for feature in destination],
    }
    rendered = json.dumps(collection, indent=2)
    print(rendered)

    if args.output_path:
        output_path = Path(args.output_path)
        output_path.parent.mkdir(parents=True, exist_ok=True)
        logger.info("Writing GeoJSON to %s", output_path)
        output_path.write_text(rendered, encoding="utf-8")


if __name__ == "__main__":
    main(sys.argv[1:])
