"""
Static map and chart functions.

All functions return (fig, ax) and leave showing or saving to the caller.
"""

import logging
import os

import numpy as np
import pandas as pd
import geopandas as gpd
import matplotlib.pyplot as plt
from matplotlib.lines import Line2D
from matplotlib.patches import Patch

from geowalk.constants import GEOMETRY_FAMILIES

logger = logging.getLogger(__name__)

LAYER_COLORS = ["#4c72b0", "#dd8452", "#55a868", "#c44e52", "#8172b3", "#937860"]

_FAMILY_ORDER = {"polygon": 0, "line": 1, "point": 2}


def _family(gdf):
    types = gdf.geometry.dropna().geom_type.unique()
    families = {GEOMETRY_FAMILIES.get(t, "polygon") for t in types}
    if len(families) == 1:
        return families.pop()
    return "polygon" if "polygon" in families else "line"


def _add_basemap(ax, crs):
    try:
        import contextily as ctx
    except ImportError:
        logger.debug("contextily not installed, skipping basemap")
        return
    try:
        ctx.add_basemap(ax, crs=crs, source=ctx.providers.CartoDB.Positron)
    except Exception as e:
        # Tile fetching needs network access; the map is still usable without it
        logger.warning("Could not add basemap: %s", e)


def plot_layers(layers, title, basemap=False, figsize=(9, 9)):
    """
    Overlay several named layers on one map.

    Parameters

    layers : dict or list of (str, GeoDataFrame)
        Layers to draw. All are reprojected to the CRS of the first one.
        Polygons are drawn first, then lines, then points.
    title : str
        Map title
    basemap : bool, optional
        Add a web tile basemap (requires contextily and network access)

    Returns

    tuple
        (fig, ax) matplotlib figure and axes objects
    """
    items = list(layers.items()) if isinstance(layers, dict) else list(layers)
    if not items:
        raise ValueError("No layers to plot.")

    crs = items[0][1].crs
    prepared = []
    for i, (name, gdf) in enumerate(items):
        if crs is not None and gdf.crs is not None and gdf.crs != crs:
            gdf = gdf.to_crs(crs)
        prepared.append((name, gdf, _family(gdf), LAYER_COLORS[i % len(LAYER_COLORS)]))
    prepared.sort(key=lambda item: _FAMILY_ORDER[item[2]])

    fig, ax = plt.subplots(figsize=figsize)
    handles = []
    for name, gdf, family, color in prepared:
        if gdf.empty:
            continue
        if family == "polygon":
            gdf.plot(ax=ax, facecolor=color, edgecolor="black", alpha=0.35, linewidth=0.8)
            handles.append(Patch(facecolor=color, edgecolor="black", alpha=0.35, label=name))
        elif family == "line":
            gdf.plot(ax=ax, color=color, linewidth=2)
            handles.append(Line2D([0], [0], color=color, linewidth=2, label=name))
        else:
            gdf.plot(ax=ax, color=color, markersize=30, edgecolor="black", linewidth=0.5)
            handles.append(Line2D([0], [0], marker="o", color="w", markerfacecolor=color,
                                  markeredgecolor="black", markersize=7, label=name))

    if handles:
        ax.legend(handles=handles, loc="best")
    ax.set_title(title)
    if crs is not None and crs.is_geographic:
        ax.set_xlabel("Longitude")
        ax.set_ylabel("Latitude")
    else:
        ax.set_xlabel("Easting (m)")
        ax.set_ylabel("Northing (m)")

    if basemap and crs is not None:
        _add_basemap(ax, crs)

    return fig, ax


def plot_choropleth(gdf, column, title, log1p=False, aoi=None, cmap="viridis"):
    """
    Create a choropleth map of a numeric column.

    Parameters

    gdf : GeoDataFrame
        Polygons to plot (must contain the specified column)
    column : str
        Column name to visualize
    title : str
        Map title
    log1p : bool, optional
        If True, apply log(1+x) transformation to the data
    aoi : shapely.geometry, optional
        Boundary (in gdf's CRS) to outline and zoom to

    Returns

    tuple
        (fig, ax) matplotlib figure and axes objects
    """
    if column not in gdf.columns:
        raise ValueError(f"Column '{column}' not found in GeoDataFrame.")

    d = gdf.copy()
    d[column] = pd.to_numeric(d[column], errors="coerce")
    if log1p:
        d[column] = np.log1p(d[column])

    fig, ax = plt.subplots(figsize=(9, 9))
    d.plot(
        ax=ax,
        column=column,
        legend=True,
        linewidth=0.35,
        edgecolor="white",
        cmap=cmap,
        missing_kwds={"color": "lightgrey", "label": "No data"},
    )

    if aoi is not None:
        gpd.GeoSeries([aoi], crs=d.crs).boundary.plot(ax=ax, linewidth=2, color="black")
        minx, miny, maxx, maxy = aoi.bounds
        ax.set_xlim(minx, maxx)
        ax.set_ylim(miny, maxy)

    ax.set_axis_off()
    ax.set_title(title)
    return fig, ax


def plot_buffers(points, buffers, title):
    """
    Draw buffer polygons with the features they were built from.

    Returns

    tuple
        (fig, ax) matplotlib figure and axes objects
    """
    if buffers.crs is not None and points.crs is not None and points.crs != buffers.crs:
        points = points.to_crs(buffers.crs)

    fig, ax = plt.subplots(figsize=(9, 9))
    buffers.plot(ax=ax, facecolor="#dd8452", edgecolor="#8c4a1c", alpha=0.3)
    points.plot(ax=ax, color="#4c72b0", markersize=20, edgecolor="black", linewidth=0.5)
    ax.legend(handles=[
        Patch(facecolor="#dd8452", edgecolor="#8c4a1c", alpha=0.3, label="Buffer"),
        Line2D([0], [0], marker="o", color="w", markerfacecolor="#4c72b0",
               markeredgecolor="black", markersize=7, label="Feature"),
    ])
    ax.set_title(title)
    return fig, ax


def plot_overlay(left, right, result, title):
    """
    Show two input layers as outlines and the result of an overlay filled in.

    Returns

    tuple
        (fig, ax) matplotlib figure and axes objects
    """
    crs = result.crs
    if crs is not None:
        left = left.to_crs(crs)
        right = right.to_crs(crs)

    fig, ax = plt.subplots(figsize=(9, 9))
    left.boundary.plot(ax=ax, color="#4c72b0", linewidth=1)
    right.boundary.plot(ax=ax, color="#c44e52", linewidth=1, linestyle="--")
    if not result.empty:
        result.plot(ax=ax, facecolor="#55a868", edgecolor="black", alpha=0.6, linewidth=0.5)
    ax.legend(handles=[
        Line2D([0], [0], color="#4c72b0", linewidth=1, label="Left"),
        Line2D([0], [0], color="#c44e52", linewidth=1, linestyle="--", label="Right"),
        Patch(facecolor="#55a868", edgecolor="black", alpha=0.6, label="Result"),
    ])
    ax.set_title(title)
    return fig, ax


def plot_distribution(values, title, bins=30, x_label="Distance (meters)", log10=False):
    """
    Create a histogram distribution plot with median line.

    Parameters

    values : array-like
        Values to plot (e.g., distances)
    title : str
        Plot title
    bins : int, optional
        Number of histogram bins
    x_label : str, optional
        Label for x-axis
    log10 : bool, optional
        If True, apply log10 transformation to the data

    Returns

    tuple
        (fig, ax) matplotlib figure and axes objects
    """
    s = pd.Series(values, dtype="float64").replace([np.inf, -np.inf], np.nan).dropna()
    if log10:
        s = s[s > 0]
        s = np.log10(s)

    fig, ax = plt.subplots(figsize=(10, 4))
    ax.hist(s.values, bins=bins, edgecolor='black', alpha=0.7)

    if len(s):
        median = float(np.nanmedian(s.values))
        ax.axvline(median, linewidth=2, color='red', linestyle='--', alpha=0.8, label=f'Median: {median:.0f}')
        ax.legend()

    ax.set_title(title)
    ax.set_ylabel("Number of features")
    ax.set_xlabel(("log₁₀(" + x_label + ")") if log10 else x_label)
    return fig, ax


def save_figure(fig, path, dpi=150, close=True):
    """Save a figure, creating the parent directory. Closes it by default."""
    os.makedirs(os.path.dirname(os.path.abspath(path)), exist_ok=True)
    fig.savefig(path, dpi=dpi, bbox_inches="tight")
    if close:
        plt.close(fig)
    logger.info("Saved figure %s", path)
    return path
