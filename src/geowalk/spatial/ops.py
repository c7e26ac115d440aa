"""
Geometry operations used in the walkthrough.

Each function is a thin, checked wrapper around geopandas/shapely: it aligns
CRSs, makes sure distance-based work happens in meters, and hands the result
back in the caller's CRS.
"""

import logging
import warnings

import geopandas as gpd

from geowalk.constants import PREDICATES
from geowalk.exceptions import CRSError
from geowalk.transform.crs import reproject, estimate_metric_crs

logger = logging.getLogger(__name__)


def _metric_crs(gdf, crs=None):
    if crs is not None:
        return crs
    if gdf.crs is not None and gdf.crs.is_projected:
        return gdf.crs
    return estimate_metric_crs(gdf)


def _align(left, right):
    """Return `right` in the CRS of `left`."""
    if left.crs is None or right.crs is None:
        raise CRSError("Both layers need a CRS before they can be combined.")
    if left.crs != right.crs:
        logger.debug("Aligning CRS %s -> %s", right.crs.to_string(), left.crs.to_string())
        return right.to_crs(left.crs)
    return right


def buffer(gdf, distance, crs=None, resolution=16):
    """
    Buffer every feature by a distance in meters.

    The buffer is computed in a metric CRS (the given one, the layer's own if it
    is projected, or an estimated UTM zone) and returned in the input CRS.

    Args:
        gdf (geopandas.GeoDataFrame): Input layer.
        distance (float): Buffer distance in meters. Negative shrinks polygons.
        crs (optional): Metric CRS to buffer in.
        resolution (int): Segments per quarter circle.

    Returns:
        geopandas.GeoDataFrame: Buffered copy with attributes kept. Features that
        collapse to empty (negative buffers) are dropped.
    """
    if gdf.crs is None:
        raise CRSError("Cannot buffer in meters without knowing the layer's CRS.")

    projected = reproject(gdf, _metric_crs(gdf, crs))
    out = projected.copy()
    out[out.geometry.name] = projected.geometry.buffer(distance, resolution=resolution)

    empty = out.geometry.is_empty
    if empty.any():
        warnings.warn(f"{int(empty.sum())} features vanished after buffering by {distance} m and were dropped.")
        out = out[~empty]

    return out.to_crs(gdf.crs)


def intersection(left, right, keep_geom_type=True):
    """
    Geometric intersection of two layers, carrying attributes of both.

    Args:
        left (geopandas.GeoDataFrame): First layer. Its CRS is used for the result.
        right (geopandas.GeoDataFrame): Second layer, reprojected if needed.
        keep_geom_type (bool): Drop pieces of lower dimension (e.g. shared edges).

    Returns:
        geopandas.GeoDataFrame: One row per overlapping pair.
    """
    right = _align(left, right)
    result = gpd.overlay(left, right, how="intersection", keep_geom_type=keep_geom_type)
    logger.info("Intersection produced %d features", len(result))
    return result


def clip(gdf, mask):
    """Cut a layer to the extent of a mask layer or geometry."""
    if isinstance(mask, gpd.GeoDataFrame) or isinstance(mask, gpd.GeoSeries):
        mask = _align(gdf, mask)
    return gpd.clip(gdf, mask)


def predicate_mask(gdf, other, predicate="intersects"):
    """
    Test each feature of `gdf` against the union of `other` with a spatial predicate.

    Args:
        gdf (geopandas.GeoDataFrame): Features to test.
        other (geopandas.GeoDataFrame): Reference features.
        predicate (str): One of intersects, within, contains, touches, crosses,
            overlaps, covers, covered_by, disjoint.

    Returns:
        pandas.Series: Boolean mask aligned with gdf's index.
    """
    if predicate not in PREDICATES:
        raise ValueError(f"Unknown predicate '{predicate}'. Use one of {PREDICATES}.")
    other = _align(gdf, other)
    reference = other.geometry.union_all()
    return getattr(gdf.geometry, predicate)(reference)


def join_points_to_polygons(points, polygons, how="left", predicate="within"):
    """
    Attach the attributes of the containing polygon to each point.

    Points outside every polygon keep NaN attributes when how="left".
    """
    polygons = _align(points, polygons)
    joined = gpd.sjoin(points, polygons, how=how, predicate=predicate)
    return joined.drop(columns=["index_right"], errors="ignore")


def count_points_in_polygons(points, polygons, id_col, count_col="n_points"):
    """
    Count points per polygon.

    Args:
        points (geopandas.GeoDataFrame): Point layer.
        polygons (geopandas.GeoDataFrame): Polygon layer with a unique id column.
        id_col (str): Name of the polygon id column.
        count_col (str): Name of the output count column.

    Returns:
        geopandas.GeoDataFrame: Polygons with a count column (0 where empty).
    """
    if id_col not in polygons.columns:
        raise ValueError(f"Column '{id_col}' not found in polygon layer.")
    polygons = polygons.drop(columns=[count_col], errors="ignore")
    pts = points.to_crs(polygons.crs)
    joined = gpd.sjoin(pts[[pts.geometry.name]], polygons[[id_col, polygons.geometry.name]], how="inner", predicate="within")
    counts = joined.groupby(id_col).size().reset_index(name=count_col)
    out = polygons.merge(counts, on=id_col, how="left")
    out[count_col] = out[count_col].fillna(0).astype(int)
    return out


def dissolve(gdf, by=None, aggfunc="first"):
    """Merge features sharing a value of `by` (all features when None)."""
    out = gdf.dissolve(by=by, aggfunc=aggfunc)
    return out.reset_index() if by is not None else out.reset_index(drop=True)


def centroids(gdf, crs=None):
    """
    Centroid of each feature, computed in a metric CRS and returned in the input CRS.
    """
    projected = reproject(gdf, _metric_crs(gdf, crs))
    out = projected.copy()
    out[out.geometry.name] = projected.geometry.centroid
    return out.to_crs(gdf.crs)


def make_valid(gdf):
    """
    Repair invalid geometries. Valid ones are left untouched.
    """
    invalid = ~gdf.geometry.is_valid
    if not invalid.any():
        return gdf.copy()
    logger.info("Repairing %d invalid geometries", int(invalid.sum()))
    out = gdf.copy()
    out.loc[invalid, out.geometry.name] = gdf.geometry[invalid].make_valid()
    return out


def area_km2(gdf, crs=None):
    """Area of each feature in square kilometers."""
    return reproject(gdf, _metric_crs(gdf, crs)).geometry.area / 1e6


def length_km(gdf, crs=None):
    """Length (or perimeter for polygons) of each feature in kilometers."""
    return reproject(gdf, _metric_crs(gdf, crs)).geometry.length / 1e3
