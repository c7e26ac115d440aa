"""
Layer inspection: what is in a GeoDataFrame before you start transforming it.
"""

import geopandas as gpd
from shapely.validation import explain_validity

from geowalk.transform.crs import epsg_of
from geowalk.types import BoundingBox, LayerSummary


def summarize(gdf):
    """
    Summarize a layer's size, CRS, geometry types, extent and validity.

    Args:
        gdf (geopandas.GeoDataFrame): Layer to inspect.

    Returns:
        LayerSummary: Plain dict, safe to print or serialize.
    """
    geoms = gdf.geometry
    present = geoms[geoms.notna()]
    non_empty = present[~present.is_empty]

    if non_empty.empty:
        bounds = None
    else:
        bounds = BoundingBox.from_bounds(non_empty.total_bounds).as_tuple()

    return LayerSummary(
        n_features=int(len(gdf)),
        crs=gdf.crs.to_string() if gdf.crs is not None else None,
        epsg=epsg_of(gdf),
        is_geographic=gdf.crs.is_geographic if gdf.crs is not None else None,
        geometry_types={str(k): int(v) for k, v in present.geom_type.value_counts().items()},
        bounds=bounds,
        n_invalid=int((~non_empty.is_valid).sum()),
        n_empty=int(len(geoms) - len(non_empty)),
        columns=[(str(c), str(gdf[c].dtype)) for c in gdf.columns if c != gdf.geometry.name],
    )


def describe(gdf, name="layer"):
    """Render summarize() as readable text."""
    s = summarize(gdf)
    crs = s["crs"] or "none"
    if s["epsg"] is not None:
        crs = f"{crs} (EPSG:{s['epsg']}, {'geographic' if s['is_geographic'] else 'projected'})"

    types = ", ".join(f"{t} x{n}" for t, n in s["geometry_types"].items()) or "none"
    if s["bounds"] is None:
        bounds = "n/a"
    else:
        bounds = "({:.4f}, {:.4f}, {:.4f}, {:.4f})".format(*s["bounds"])
    columns = ", ".join(f"{c}:{d}" for c, d in s["columns"]) or "none"

    lines = [
        f"{name}: {s['n_features']} features",
        f"  CRS:        {crs}",
        f"  Geometry:   {types}",
        f"  Bounds:     {bounds}",
        f"  Invalid:    {s['n_invalid']}   Empty: {s['n_empty']}",
        f"  Attributes: {columns}",
    ]
    return "\n".join(lines)


def invalid_features(gdf):
    """
    Return the invalid features with a 'reason' column from GEOS.
    """
    geoms = gdf.geometry
    mask = geoms.notna() & ~geoms.is_empty & ~geoms.is_valid
    bad = gdf[mask].copy()
    bad["reason"] = [explain_validity(g) for g in bad.geometry]
    return gpd.GeoDataFrame(bad, geometry=gdf.geometry.name, crs=gdf.crs)
