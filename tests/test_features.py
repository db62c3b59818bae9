from shapely.geometry import LineString, Point, Polygon

from touch_draw.features import Feature, MemoryFeatureStore


def test_feature_ids_are_unique_and_properties_editable():
    first = Feature(Point(0.0, 0.0))
    second = Feature(Point(1.0, 1.0), {"kind": "tree"})

    second.set("height", 3)

    assert first.id != second.id
    assert second.get("kind") == "tree"
    assert second.get("height") == 3
    assert first.get("missing", "default") == "default"


def test_mutations_bump_the_revision():
    store = MemoryFeatureStore()
    feature = Feature(Point(0.0, 0.0))

    store.add_feature(feature)
    added = store.revision
    store.remove_feature(feature)
    removed = store.revision
    store.remove_feature(feature)

    assert added > 0
    assert removed == added + 1
    assert store.revision == removed
    assert len(store) == 0


def test_extent_query_matches_bounding_boxes():
    inside = Feature(LineString([(0.0, 0.0), (5.0, 5.0)]))
    crossing = Feature(Polygon([(8.0, 8.0), (20.0, 8.0), (20.0, 20.0)]))
    outside = Feature(Point(50.0, 50.0))
    store = MemoryFeatureStore([inside, crossing, outside])

    found = store.features_in_extent((-1.0, -1.0, 10.0, 10.0))

    assert found == [inside, crossing]


def test_empty_and_missing_geometries_are_not_indexed():
    store = MemoryFeatureStore([Feature(None), Feature(LineString())])

    assert store.features_in_extent((-1e9, -1e9, 1e9, 1e9)) == []
    assert len(store) == 2


def test_index_is_rebuilt_after_changes():
    store = MemoryFeatureStore()
    assert store.features_in_extent((0.0, 0.0, 1.0, 1.0)) == []

    feature = Feature(Point(0.5, 0.5))
    store.add_feature(feature)

    assert store.features_in_extent((0.0, 0.0, 1.0, 1.0)) == [feature]

    store.clear()
    assert list(store) == []


def test_bulk_add_bumps_revision_per_feature():
    store = MemoryFeatureStore()
    features = [Feature(Point(float(i), 0.0)) for i in range(3)]

    store.add_features(features)

    assert store.features == features
    assert store.revision == 3
    assert store.features_in_extent((0.5, -1.0, 2.5, 1.0)) == features[1:]
