import pytest
from unittest.mock import patch
import geopandas as gpd
from shapely.geometry import Point, box

from geowalk.core import GeoWalk
from geowalk.exceptions import LayerNotFoundError


@pytest.fixture
def mock_proj_crs():
    return "EPSG:3857"


@patch('geowalk.core.read_vector')
def test_load_layer_assigns_missing_crs(mock_read):
    mock_read.return_value = gpd.GeoDataFrame({'name': ['a']}, geometry=[Point(6.86, 52.22)])

    walk = GeoWalk()
    with pytest.warns(UserWarning, match="no CRS|Assuming"):
        walk.load_layer('towns', 'towns.shp')

    assert walk.layer('towns').crs.to_epsg() == 4326
    mock_read.assert_called_once_with('towns.shp')


def test_load_points(tmp_path):
    path = tmp_path / "sites.csv"
    path.write_text("name,lon,lat\nA,6.86,52.22\nB,6.87,52.23\n")

    walk = GeoWalk()
    walk.load_points('sites', path)

    assert len(walk.layer('sites')) == 2
    assert walk.summary('sites')['geometry_types'] == {'Point': 2}
    assert set(walk.summary()) == {'sites'}


def test_unknown_layer():
    walk = GeoWalk()
    with pytest.raises(LayerNotFoundError):
        walk.layer('nope')
    # Also usable as a plain KeyError
    with pytest.raises(KeyError):
        walk.layer('nope')


def test_metric_crs_is_estimated():
    walk = GeoWalk()
    walk.add_layer('site', gpd.GeoDataFrame(geometry=[Point(6.86, 52.22)], crs="EPSG:4326"))

    assert walk.metric_crs().to_epsg() == 32632
    projected = walk.to_metric('site', new_name='site_m')
    assert projected.crs.to_epsg() == 32632
    assert walk.layer('site').crs.to_epsg() == 4326


def test_metric_crs_without_layers():
    with pytest.raises(ValueError):
        GeoWalk().metric_crs()


def test_workflow(mock_proj_crs, tmp_path):
    walk = GeoWalk(crs=mock_proj_crs)
    walk.add_layer('homes', gpd.GeoDataFrame(
        {'home': [1, 2]},
        geometry=[Point(0, 0), Point(2000, 0)],
        crs=mock_proj_crs
    ))
    walk.add_layer('clinics', gpd.GeoDataFrame(
        {'clinic': ['c1']},
        geometry=[Point(100, 0)],
        crs=mock_proj_crs
    ))
    walk.add_layer('wards', gpd.GeoDataFrame(
        {'ward_id': [1, 2]},
        geometry=[box(-500, -500, 500, 500), box(1500, -500, 2500, 500)],
        crs=mock_proj_crs
    ))

    # Distance: Point(0,0) -> 100m, Point(2000,0) -> 1900m
    dist = walk.nearest('homes', 'clinics')
    assert list(dist['nearest_dist']) == [100.0, 1900.0]

    buffers = walk.buffer_layer('clinics', distance=250)
    assert 'clinics_buffer' in walk.layers
    assert buffers.geometry.iloc[0].contains(Point(0, 0))

    overlap = walk.intersect_layers('clinics_buffer', 'wards')
    assert len(overlap) == 1
    assert overlap['ward_id'].iloc[0] == 1

    counted = walk.count_points('homes', 'wards', id_col='ward_id')
    assert list(counted['n_points']) == [1, 1]

    path = walk.write_layer('wards', tmp_path / "wards.gpkg")
    assert path.exists()
