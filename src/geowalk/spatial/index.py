import warnings

import numpy as np
import geopandas as gpd
from scipy.spatial import cKDTree

from geowalk.exceptions import CRSError


def _coords(gdf):
    # Non-point features are represented by a point guaranteed to lie inside them
    geoms = gdf.geometry
    if not (geoms.geom_type == "Point").all():
        geoms = geoms.representative_point()
    return np.column_stack([geoms.x.values, geoms.y.values])


def _present(gdf):
    geoms = gdf.geometry
    return geoms.notna() & ~geoms.is_empty


def build_nearest_neighbor_index(gdf):
    """
    Build a cKDTree from a GeoDataFrame.

    Args:
        gdf (geopandas.GeoDataFrame): Features to index.

    Returns:
        scipy.spatial.cKDTree: The KD-Tree index.
    """
    if gdf.empty:
        raise ValueError("Cannot build index for empty GeoDataFrame.")
    return cKDTree(_coords(gdf))


def query_nearest(tree, queries_gdf):
    """
    Query nearest distances and positions for a set of features against a KDTree.

    Returns:
        tuple: (distances, positions) numpy arrays; positions index the indexed layer.
    """
    if queries_gdf.empty:
        return np.array([]), np.array([], dtype=int)
    distances, positions = tree.query(_coords(queries_gdf), k=1)
    return distances, positions


def nearest_distance(source, target, col="nearest_dist"):
    """
    Distance from each source feature to the nearest target feature.

    Args:
        source (geopandas.GeoDataFrame): Features to measure from.
        target (geopandas.GeoDataFrame): Features to measure to. Reprojected to source's CRS.
        col (str): Output column name.

    Returns:
        geopandas.GeoDataFrame: Copy of source with `col` (CRS units) and
        `nearest_index` (index label of the nearest target).
    """
    if source.crs is None or target.crs is None:
        raise CRSError("Both layers need a CRS to measure distances.")
    if source.crs.is_geographic:
        warnings.warn("Source layer is in a geographic CRS. Distances will be in degrees. Project to a metric CRS first.")
    if target.crs != source.crs:
        target = target.to_crs(source.crs)

    out = source.copy()
    target = target[_present(target).values]
    if target.empty:
        warnings.warn("No target features provided. Setting distance to infinity.")
        out[col] = float('inf')
        out['nearest_index'] = None
        return out

    # Missing and empty geometries have no distance
    usable = _present(source).values
    rows = np.flatnonzero(usable)
    distances = np.full(len(out), np.nan)
    nearest = np.full(len(out), None, dtype=object)

    if len(rows) and (target.geometry.geom_type == "Point").all():
        tree = build_nearest_neighbor_index(target)
        dist, positions = query_nearest(tree, source[usable])
        distances[rows] = dist
        nearest[rows] = target.index.values[positions]
    elif len(rows):
        # Lines and polygons: exact distance to the geometry, not to a representative point.
        # Positional indexes keep duplicate or named labels from confusing the join.
        joined = gpd.sjoin_nearest(
            source[usable][[source.geometry.name]].reset_index(drop=True),
            target[[target.geometry.name]].reset_index(drop=True),
            how="left",
            distance_col=col
        )
        first = joined[["index_right", col]].groupby(level=0).first()
        distances[rows[first.index.values]] = first[col].values
        nearest[rows[first.index.values]] = target.index.values[first["index_right"].values.astype(int)]

    out[col] = distances
    out['nearest_index'] = nearest
    return out
