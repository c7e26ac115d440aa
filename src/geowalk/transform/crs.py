"""
CRS handling: assigning, checking and transforming coordinate reference systems.

Setting a CRS only labels the coordinates; reprojecting (to_crs) actually
transforms them. Mixing the two up is the most common mistake in the
walkthrough, so both are kept as separate, explicit calls.
"""

import logging
import warnings

from pyproj import CRS

from geowalk.config import DEFAULT_CRS, PROJECTED_CRS
from geowalk.exceptions import CRSError

logger = logging.getLogger(__name__)


def epsg_of(gdf):
    """EPSG code of the layer's CRS, or None if it has no CRS or no EPSG match."""
    if gdf.crs is None:
        return None
    return gdf.crs.to_epsg()


def ensure_crs(gdf, default=DEFAULT_CRS):
    """
    Assign a CRS to a layer that has none. Layers that already have one are returned as-is.
    """
    if gdf.crs is not None:
        return gdf
    warnings.warn(f"Layer has no CRS. Assuming {default}.")
    return gdf.set_crs(default)


def reproject(gdf, crs):
    """
    Transform a layer's coordinates to another CRS.

    Args:
        gdf (geopandas.GeoDataFrame): Layer with a defined CRS.
        crs (str, int or pyproj.CRS): Target CRS, e.g. "EPSG:32632" or 32632.

    Returns:
        geopandas.GeoDataFrame: Reprojected copy.

    Raises:
        CRSError: If the layer has no CRS to transform from.
    """
    if gdf.crs is None:
        raise CRSError("Cannot reproject a layer without a CRS. Call ensure_crs() first.")
    target = CRS.from_user_input(crs)
    if gdf.crs == target:
        return gdf.copy()
    logger.debug("Reprojecting %d features from %s to %s", len(gdf), gdf.crs.to_string(), target.to_string())
    return gdf.to_crs(target)


def estimate_metric_crs(gdf):
    """
    Pick a projected CRS in meters suitable for the layer's extent (its local UTM zone).

    Falls back to PROJECTED_CRS for empty layers or when no zone can be estimated.
    """
    if gdf.crs is None:
        raise CRSError("Cannot estimate a metric CRS for a layer without a CRS.")
    if gdf.empty:
        return CRS.from_user_input(PROJECTED_CRS)
    try:
        return gdf.estimate_utm_crs()
    except RuntimeError:
        warnings.warn(f"Could not estimate a UTM zone. Falling back to {PROJECTED_CRS}.")
        return CRS.from_user_input(PROJECTED_CRS)


def require_projected(gdf, what="this operation"):
    """Raise CRSError unless the layer is in a projected CRS."""
    if gdf.crs is None:
        raise CRSError(f"{what} needs a CRS, but the layer has none.")
    if gdf.crs.is_geographic:
        raise CRSError(
            f"{what} needs a projected CRS (units in meters), got geographic {gdf.crs.to_string()}. "
            "Reproject first."
        )
