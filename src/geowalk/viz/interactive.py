"""
Interactive web map output.
"""

import geopandas as gpd

from geowalk.viz.plot import LAYER_COLORS


def web_map(layers, tooltip_cols=None, zoom_start=13):
    """
    Create an interactive Folium map of one or more named layers.

    Parameters

    layers : dict or list of (str, GeoDataFrame)
        Layers to show, each toggled from the layer control
    tooltip_cols : dict, optional
        Layer name -> list of attribute columns to show on hover
    zoom_start : int, optional
        Initial zoom level

    Returns

    folium.Map
        Interactive map object (use .save('filename.html') to export)
    """
    try:
        import folium
    except ImportError:
        raise ImportError("folium is required. Install with: pip install folium")

    items = list(layers.items()) if isinstance(layers, dict) else list(layers)
    if not items:
        raise ValueError("No layers to map.")
    tooltip_cols = tooltip_cols or {}

    # Web maps are always drawn in WGS84
    wgs = [(name, gdf.to_crs(epsg=4326)) for name, gdf in items]
    minx, miny, maxx, maxy = gpd.GeoSeries(
        [g.geometry.union_all() for _, g in wgs if not g.empty], crs="EPSG:4326"
    ).total_bounds
    m = folium.Map(location=[(miny + maxy) / 2, (minx + maxx) / 2], zoom_start=zoom_start, tiles="CartoDB positron")

    for i, (name, gdf) in enumerate(wgs):
        if gdf.empty:
            continue
        color = LAYER_COLORS[i % len(LAYER_COLORS)]
        fields = [c for c in tooltip_cols.get(name, []) if c in gdf.columns]
        data = gdf[fields + [gdf.geometry.name]]
        folium.GeoJson(
            data,
            name=name,
            style_function=lambda x, color=color: {"color": color, "weight": 2, "fillOpacity": 0.3},
            marker=folium.CircleMarker(radius=6, fill=True, fill_opacity=0.8),
            tooltip=folium.GeoJsonTooltip(fields=fields) if fields else None,
        ).add_to(m)

    m.fit_bounds([[miny, minx], [maxy, maxx]])
    folium.LayerControl().add_to(m)
    return m
