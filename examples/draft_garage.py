"""Example: propose handles along a house outline and draft a garage next to it."""

from shapely.geometry import Polygon

from touch_draw import (
    Feature,
    MemoryFeatureStore,
    MemoryOverlayHost,
    PointerEvent,
    StaticMapView,
    TouchDrawEventType,
    TouchDrawInteraction,
)

HOUSE = Polygon([(0.0, 0.0), (12.0, 0.0), (12.0, 9.0), (0.0, 9.0)])


def main() -> None:
    store = MemoryFeatureStore([Feature(HOUSE, {"name": "house"})])
    view = StaticMapView(center=(6.0, 4.5), resolution=0.05, size=(800, 800))

    interaction = TouchDrawInteraction(source=store)
    interaction.on(TouchDrawEventType.DRAWEND, lambda event: print("Committed:", event.feature.geometry.wkt))
    interaction.set_map(view, MemoryOverlayHost())
    interaction.handle_post_render()

    for idx, handle in enumerate(interaction.candidates.handles):
        print(f"[{idx}] handle at {handle.geometry} basis {handle.basis_vector}")

    # Grab the handle on the west wall and push a 6 m deep garage out from it.
    west = min(interaction.candidates.handles, key=lambda h: h.geometry[0])
    interaction.handle_down_event(PointerEvent.at_coordinate(view, west.geometry))
    drafting = interaction.drafting_state
    drafting.scale_overlay.set_text("6")
    drafting.y_move_overlay.set_text("1.5")
    interaction.handle_up_event(PointerEvent.at_coordinate(view, west.geometry))
    drafting.confirm_button.click()

    print("Features in store:", len(store))


if __name__ == "__main__":
    main()
