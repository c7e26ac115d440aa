import pytest
import geopandas as gpd
from shapely.geometry import Point, box

from geowalk.io.vector import read_vector, read_points_csv, write_vector
from geowalk.exceptions import VectorReadError, DataSchemaError


@pytest.fixture
def parcels():
    return gpd.GeoDataFrame(
        {'parcel': ['a', 'b'], 'value': [10, 20]},
        geometry=[box(0, 0, 1, 1), box(1, 0, 2, 1)],
        crs="EPSG:4326"
    )


def test_write_and_read_geojson(parcels, tmp_path):
    path = write_vector(parcels, tmp_path / "parcels.geojson")
    assert path.exists()

    gdf = read_vector(path)
    assert len(gdf) == 2
    assert gdf.crs.to_epsg() == 4326
    assert list(gdf['parcel']) == ['a', 'b']


def test_write_shapefile_creates_sidecar_files(parcels, tmp_path):
    path = write_vector(parcels, tmp_path / "nested" / "parcels.shp")

    # A shapefile is several files on disk
    for suffix in ('.shp', '.shx', '.dbf', '.prj'):
        assert path.with_suffix(suffix).exists()
    assert len(read_vector(path)) == 2


def test_write_geopackage_layer(parcels, tmp_path):
    path = write_vector(parcels, tmp_path / "out.gpkg")
    gdf = read_vector(path, layer="out")
    assert len(gdf) == 2


def test_read_vector_missing_file(tmp_path):
    with pytest.raises(FileNotFoundError):
        read_vector(tmp_path / "nope.shp")


def test_read_vector_unreadable_file(tmp_path):
    path = tmp_path / "broken.geojson"
    path.write_text("this is not geojson")
    with pytest.raises(VectorReadError):
        read_vector(path)


def test_read_vector_without_crs_warns(tmp_path):
    gdf = gpd.GeoDataFrame({'id': [1]}, geometry=[Point(1, 2)])
    path = tmp_path / "nocrs.shp"
    gdf.to_file(path)

    with pytest.warns(UserWarning, match="no CRS"):
        out = read_vector(path)
    assert out.crs is None


def test_write_vector_unknown_extension(parcels, tmp_path):
    with pytest.raises(ValueError, match="Cannot infer a driver"):
        write_vector(parcels, tmp_path / "parcels.xyz")


def test_write_vector_empty_layer(tmp_path):
    empty = gpd.GeoDataFrame(geometry=[], crs="EPSG:4326")
    with pytest.raises(ValueError):
        write_vector(empty, tmp_path / "empty.geojson")


def test_read_points_csv_detects_columns(tmp_path):
    path = tmp_path / "wells.csv"
    path.write_text("name,Longitude,Latitude\nw1,6.86,52.22\nw2,6.87,52.23\n")

    gdf = read_points_csv(path)

    assert len(gdf) == 2
    assert gdf.crs == "EPSG:4326"
    assert gdf.geometry.iloc[0].x == pytest.approx(6.86)
    assert gdf.geometry.iloc[0].y == pytest.approx(52.22)
    assert 'name' in gdf.columns


def test_read_points_csv_explicit_columns_and_crs(tmp_path):
    path = tmp_path / "boreholes.csv"
    path.write_text("id,east,north\n1,100.0,200.0\n")

    gdf = read_points_csv(path, x_col="east", y_col="north", crs="EPSG:28992")

    assert gdf.crs.to_epsg() == 28992
    assert gdf.geometry.iloc[0].x == 100.0


def test_read_points_csv_drops_bad_rows(tmp_path):
    path = tmp_path / "messy.csv"
    path.write_text("lon,lat\n1.0,2.0\n,3.0\nabc,4.0\n5.0,6.0\n")

    with pytest.warns(UserWarning, match="Dropped 2 rows"):
        gdf = read_points_csv(path)
    assert len(gdf) == 2


def test_read_points_csv_missing_columns(tmp_path):
    path = tmp_path / "nocoords.csv"
    path.write_text("a,b\n1,2\n")

    with pytest.raises(DataSchemaError):
        read_points_csv(path)

    with pytest.raises(DataSchemaError):
        read_points_csv(path, x_col="a", y_col="missing")


def test_read_vector_bbox_filter(parcels, tmp_path):
    from geowalk.types import BoundingBox

    path = write_vector(parcels, tmp_path / "parcels.gpkg")
    gdf = read_vector(path, bbox=BoundingBox(0.0, 0.0, 0.5, 1.0))
    assert list(gdf['parcel']) == ['a']
