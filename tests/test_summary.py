import geopandas as gpd
from shapely.geometry import Point, Polygon, box

from geowalk.summary import summarize, describe, invalid_features


def _mixed():
    bowtie = Polygon([(0, 0), (1, 1), (1, 0), (0, 1)])
    return gpd.GeoDataFrame(
        {'name': ['a', 'b', 'c', 'd'], 'value': [1.5, 2.0, 3.0, 4.0]},
        geometry=[box(0, 0, 2, 2), bowtie, Point(5, 5), Polygon()],
        crs="EPSG:4326"
    )


def test_summarize_counts():
    s = summarize(_mixed())

    assert s['n_features'] == 4
    assert s['epsg'] == 4326
    assert s['is_geographic'] is True
    assert s['geometry_types'] == {'Polygon': 3, 'Point': 1}
    assert s['bounds'] == (0.0, 0.0, 5.0, 5.0)
    assert s['n_invalid'] == 1
    assert s['n_empty'] == 1
    assert ('name', 'object') in s['columns'] or ('name', 'str') in s['columns']
    assert ('value', 'float64') in s['columns']


def test_summarize_without_crs():
    gdf = gpd.GeoDataFrame(geometry=[Point(0, 0)])
    s = summarize(gdf)
    assert s['crs'] is None
    assert s['epsg'] is None
    assert s['is_geographic'] is None


def test_describe_text():
    text = describe(_mixed(), name="parcels")
    assert text.startswith("parcels: 4 features")
    assert "EPSG:4326" in text
    assert "geographic" in text
    assert "Invalid:    1" in text


def test_invalid_features_reason():
    bad = invalid_features(_mixed())
    assert list(bad['name']) == ['b']
    assert "Self-intersection" in bad['reason'].iloc[0]


def test_bounding_box_from_bounds():
    from geowalk.types import BoundingBox

    bb = BoundingBox.from_bounds([1, 2, 3, 4])
    assert bb.west == 1.0 and bb.north == 4.0
    assert bb.as_tuple() == (1.0, 2.0, 3.0, 4.0)
