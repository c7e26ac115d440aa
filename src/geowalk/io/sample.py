import os
from importlib import resources

import requests
import geopandas as gpd

from geowalk.config import CACHE_DIR
from geowalk.constants import SAMPLE_FILES, NATURAL_EARTH_COUNTRIES_URL
from geowalk.exceptions import SampleDownloadError
from geowalk.io.vector import read_vector, read_points_csv


def sample_path(name):
    """Path to a bundled tutorial dataset ('districts', 'sites' or 'rivers')."""
    if name not in SAMPLE_FILES:
        raise KeyError(f"Unknown sample '{name}'. Available: {sorted(SAMPLE_FILES)}")
    return resources.files("geowalk").joinpath("data").joinpath(SAMPLE_FILES[name])


def load_sample(name):
    """
    Load a bundled tutorial dataset as a GeoDataFrame in EPSG:4326.
    """
    path = sample_path(name)
    with resources.as_file(path) as local:
        if local.suffix == ".csv":
            return read_points_csv(local)
        return read_vector(local)


def get_world_boundaries():
    """
    Load or download world boundaries (Natural Earth 110m).
    """
    os.makedirs(CACHE_DIR, exist_ok=True)
    filename = os.path.join(CACHE_DIR, "ne_110m_admin_0_countries.geojson")

    if not os.path.exists(filename):
        try:
            r = requests.get(NATURAL_EARTH_COUNTRIES_URL, timeout=60)
            r.raise_for_status()
        except requests.RequestException as e:
            raise SampleDownloadError(f"Failed to download world boundaries: {e}") from e
        with open(filename, 'wb') as f:
            f.write(r.content)

    return gpd.read_file(filename)
