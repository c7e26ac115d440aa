import logging
import os
import warnings
from pathlib import Path

import pandas as pd
import geopandas as gpd

from geowalk.config import DEFAULT_CRS
from geowalk.constants import DRIVERS_BY_SUFFIX, X_COLUMN_CANDIDATES, Y_COLUMN_CANDIDATES
from geowalk.exceptions import VectorReadError, DataSchemaError
from geowalk.types import BoundingBox

logger = logging.getLogger(__name__)


def read_vector(path, layer=None, bbox=None):
    """
    Read a vector file (shapefile, GeoJSON, GeoPackage) into a GeoDataFrame.

    Args:
        path (str or Path): Path to the file. For shapefiles, the .shp file.
        layer (str, optional): Layer name for multi-layer sources such as GeoPackage.
        bbox (tuple or BoundingBox, optional): (west, south, east, north) filter in the file's CRS.

    Returns:
        geopandas.GeoDataFrame: The features with their attribute table.

    Raises:
        FileNotFoundError: If the path does not exist.
        VectorReadError: If the file cannot be parsed as vector data.
    """
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Vector file not found: {path}")

    kwargs = {}
    if layer is not None:
        kwargs['layer'] = layer
    if isinstance(bbox, BoundingBox):
        bbox = bbox.as_tuple()
    if bbox is not None:
        kwargs["bbox"] = tuple(bbox)

    try:
        gdf = gpd.read_file(path, **kwargs)
    except Exception as e:
        raise VectorReadError(f"Failed to read vector data from {path}: {e}") from e

    if gdf.crs is None:
        # A shapefile shipped without its .prj lands here
        warnings.warn(f"{path.name} has no CRS. Assign one with ensure_crs() before reprojecting.")

    logger.info("Read %d features from %s", len(gdf), path.name)
    return gdf


def _find_column(columns, candidates):
    lowered = {c.lower(): c for c in columns}
    for name in candidates:
        if name in lowered:
            return lowered[name]
    return None


def read_points_csv(path, x_col=None, y_col=None, crs=DEFAULT_CRS, **read_csv_kwargs):
    """
    Read a CSV of coordinates into a point GeoDataFrame.

    Args:
        path (str or Path): Path to the CSV file.
        x_col (str, optional): Column with x / longitude. Detected if omitted.
        y_col (str, optional): Column with y / latitude. Detected if omitted.
        crs (str): CRS of the coordinate columns. Defaults to EPSG:4326.

    Returns:
        geopandas.GeoDataFrame: One point per usable row, all other columns kept.

    Raises:
        DataSchemaError: If coordinate columns are missing or cannot be detected.
    """
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"CSV file not found: {path}")

    df = pd.read_csv(path, **read_csv_kwargs)

    x_col = x_col or _find_column(df.columns, X_COLUMN_CANDIDATES)
    y_col = y_col or _find_column(df.columns, Y_COLUMN_CANDIDATES)
    if x_col is None or y_col is None:
        raise DataSchemaError(
            f"Could not find coordinate columns in {path.name}. "
            f"Columns present: {list(df.columns)}. Pass x_col and y_col explicitly."
        )
    for col in (x_col, y_col):
        if col not in df.columns:
            raise DataSchemaError(f"Column '{col}' not found in {path.name}.")

    xs = pd.to_numeric(df[x_col], errors="coerce")
    ys = pd.to_numeric(df[y_col], errors="coerce")
    usable = xs.notna() & ys.notna()
    n_dropped = int((~usable).sum())
    if n_dropped:
        warnings.warn(f"Dropped {n_dropped} rows with missing or non-numeric coordinates from {path.name}.")

    df = df[usable].copy()
    gdf = gpd.GeoDataFrame(
        df,
        geometry=gpd.points_from_xy(xs[usable], ys[usable]),
        crs=crs
    )
    logger.info("Read %d points from %s (x=%s, y=%s)", len(gdf), path.name, x_col, y_col)
    return gdf


def write_vector(gdf, path, driver=None):
    """
    Write a GeoDataFrame to disk, choosing the driver from the file extension.

    Args:
        gdf (geopandas.GeoDataFrame): Layer to write.
        path (str or Path): Output path (.shp, .geojson, .json or .gpkg).
        driver (str, optional): Explicit OGR driver, overrides the extension.

    Returns:
        pathlib.Path: The written path.
    """
    path = Path(path)
    if gdf.empty:
        raise ValueError(f"Refusing to write an empty layer to {path}.")

    if driver is None:
        driver = DRIVERS_BY_SUFFIX.get(path.suffix.lower())
        if driver is None:
            raise ValueError(
                f"Cannot infer a driver for '{path.suffix}'. "
                f"Use one of {sorted(DRIVERS_BY_SUFFIX)} or pass driver explicitly."
            )

    os.makedirs(path.parent, exist_ok=True)
    gdf.to_file(path, driver=driver)
    logger.info("Wrote %d features to %s (%s)", len(gdf), path, driver)
    return path
