import json

import pytest
import requests

from geowalk.io.sample import load_sample, sample_path, get_world_boundaries
from geowalk.exceptions import SampleDownloadError


def test_load_sample_layers():
    districts = load_sample("districts")
    sites = load_sample("sites")
    rivers = load_sample("rivers")

    assert len(districts) == 4
    assert set(districts.geom_type) == {"Polygon"}
    assert len(sites) == 12
    assert set(sites.geom_type) == {"Point"}
    assert set(rivers.geom_type) == {"LineString"}
    assert sites.crs.to_epsg() == 4326


def test_sample_path_unknown():
    with pytest.raises(KeyError, match="Available"):
        sample_path("lakes")


def test_get_world_boundaries_downloads_once(mocker, tmp_path):
    payload = {
        "type": "FeatureCollection",
        "features": [{
            "type": "Feature",
            "properties": {"ISO_A3": "NLD"},
            "geometry": {"type": "Polygon", "coordinates": [[[3, 50], [7, 50], [7, 54], [3, 54], [3, 50]]]}
        }]
    }
    mocker.patch('geowalk.io.sample.CACHE_DIR', str(tmp_path))
    mock_get = mocker.patch('geowalk.io.sample.requests.get')
    mock_get.return_value.content = json.dumps(payload).encode()

    world = get_world_boundaries()
    assert list(world['ISO_A3']) == ['NLD']

    # Second call is served from the cache
    get_world_boundaries()
    mock_get.assert_called_once()


def test_get_world_boundaries_download_failure(mocker, tmp_path):
    mocker.patch('geowalk.io.sample.CACHE_DIR', str(tmp_path))
    mocker.patch('geowalk.io.sample.requests.get', side_effect=requests.ConnectionError("offline"))

    with pytest.raises(SampleDownloadError, match="offline"):
        get_world_boundaries()
