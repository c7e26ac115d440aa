"""
The narrated walkthrough.

Each step pairs a short piece of narration with the library calls it talks
about. Running the walkthrough executes the steps in order against the bundled
sample data (or any session you pass in), logging the narration as it goes and
writing the produced files and figures into an output directory.
"""

import importlib.util
import logging
import os
from dataclasses import dataclass
from typing import Callable

from geowalk.config import DEFAULT_BUFFER_METERS, OUTPUT_DIR
from geowalk.core import GeoWalk
from geowalk.io.sample import load_sample
from geowalk.spatial.ops import join_points_to_polygons, area_km2
from geowalk.viz.plot import (
    plot_layers,
    plot_buffers,
    plot_overlay,
    plot_choropleth,
    plot_distribution,
    save_figure,
)

logger = logging.getLogger(__name__)


@dataclass
class Step:
    key: str
    title: str
    narration: str
    run: Callable


def _load(walk, ctx):
    walk.add_layer("districts", load_sample("districts"))
    walk.add_layer("rivers", load_sample("rivers"))


def _inspect(walk, ctx):
    for name in list(walk.layers):
        logger.info("\n%s", walk.describe(name))
    districts = walk.layer("districts")
    ctx["outputs"]["district_area_km2"] = dict(zip(districts["name"], area_km2(districts).round(2)))


def _points(walk, ctx):
    walk.add_layer("sites", load_sample("sites"))
    logger.info("\n%s", walk.describe("sites"))


def _reproject(walk, ctx):
    for name in ("districts", "rivers", "sites"):
        walk.to_metric(name)
    logger.info("All layers now in %s", walk.layer("districts").crs.to_string())


def _buffer(walk, ctx):
    walk.buffer_layer("sites", distance=ctx["buffer_m"], new_name="site_buffers")


def _intersect(walk, ctx):
    overlap = walk.intersect_layers("site_buffers", "districts", new_name="buffer_districts")
    logger.info("%d buffer pieces after splitting by district", len(overlap))


def _join(walk, ctx):
    sites = join_points_to_polygons(
        walk.layer("sites"),
        walk.layer("districts")[["district_id", "geometry"]],
    )
    walk.add_layer("sites", sites)
    walk.count_points("sites", "districts", id_col="district_id", count_col="n_points")
    counts = walk.layer("districts")[["name", "n_points"]]
    logger.info("Sites per district:\n%s", counts.to_string(index=False))


def _nearest(walk, ctx):
    with_dist = walk.nearest("sites", "rivers", col="river_dist")
    walk.add_layer("sites", with_dist.drop(columns=["nearest_index"]))
    logger.info("Median distance from a site to the river: %.0f m", with_dist["river_dist"].median())


def _write(walk, ctx):
    out_dir = ctx["out_dir"]
    files = ctx["outputs"].setdefault("files", {})
    files["districts"] = walk.write_layer("districts", os.path.join(out_dir, "districts.shp"))
    files["site_buffers"] = walk.write_layer("site_buffers", os.path.join(out_dir, "site_buffers.geojson"))
    files["buffer_districts"] = walk.write_layer("buffer_districts", os.path.join(out_dir, "walkthrough.gpkg"))


def _plot(walk, ctx):
    fig_dir = os.path.join(ctx["out_dir"], "figures")
    figures = ctx["outputs"].setdefault("figures", {})

    fig, _ = plot_layers(
        {"Districts": walk.layer("districts"), "River": walk.layer("rivers"), "Sites": walk.layer("sites")},
        title="Sample districts, river and sites",
    )
    figures["layers"] = save_figure(fig, os.path.join(fig_dir, "layers.png"))

    fig, _ = plot_buffers(walk.layer("sites"), walk.layer("site_buffers"), title=f"{ctx['buffer_m']:.0f} m around each site")
    figures["buffers"] = save_figure(fig, os.path.join(fig_dir, "buffers.png"))

    fig, _ = plot_overlay(
        walk.layer("site_buffers"), walk.layer("districts"), walk.layer("buffer_districts"),
        title="Site buffers intersected with districts",
    )
    figures["overlay"] = save_figure(fig, os.path.join(fig_dir, "overlay.png"))

    fig, _ = plot_choropleth(walk.layer("districts"), "n_points", title="Sites per district")
    figures["choropleth"] = save_figure(fig, os.path.join(fig_dir, "choropleth.png"))

    fig, _ = plot_distribution(
        walk.layer("sites")["river_dist"], title="Distance from sites to the river",
        bins=10, x_label="Distance to river (meters)",
    )
    figures["distribution"] = save_figure(fig, os.path.join(fig_dir, "distribution.png"))

    if importlib.util.find_spec("folium") is not None:
        from geowalk.viz.interactive import web_map

        m = web_map(
            {"Districts": walk.layer("districts"), "River": walk.layer("rivers"), "Sites": walk.layer("sites")},
            tooltip_cols={"Districts": ["name", "n_points"], "Sites": ["name", "category"]},
        )
        path = os.path.join(ctx["out_dir"], "walkthrough_map.html")
        m.save(path)
        figures["web_map"] = path
    else:
        logger.info("folium not installed, skipping the interactive map")


STEPS = [
    Step(
        "load", "Reading vector files",
        "A GeoDataFrame is a pandas DataFrame with a geometry column. geopandas.read_file "
        "reads shapefiles, GeoJSON and GeoPackages the same way; the attribute table becomes "
        "ordinary columns and the shapes become shapely geometries.",
        _load,
    ),
    Step(
        "inspect", "Inspecting a layer",
        "Before doing anything, check what you loaded: how many features, which geometry "
        "types, the extent, whether geometries are valid, and above all the CRS. Areas "
        "computed in degrees are meaningless, so area is measured after projecting.",
        _inspect,
    ),
    Step(
        "points", "Points from a CSV",
        "Tables with longitude and latitude columns are turned into point layers with "
        "points_from_xy. The CRS has to be stated: a CSV carries none.",
        _points,
    ),
    Step(
        "reproject", "Reprojecting",
        "set_crs only labels coordinates; to_crs transforms them. For distances and buffers "
        "we move every layer to a projected CRS in meters, here the local UTM zone.",
        _reproject,
    ),
    Step(
        "buffer", "Buffering",
        "A buffer is the area within a distance of a geometry. Buffers around points are "
        "circles, approximated by polygons.",
        _buffer,
    ),
    Step(
        "intersect", "Intersecting layers",
        "overlay(how='intersection') cuts two polygon layers against each other and keeps "
        "the attributes of both inputs for every piece.",
        _intersect,
    ),
    Step(
        "join", "Spatial join",
        "sjoin attaches attributes by location instead of by key: each site learns which "
        "district it lies within, and grouping the join counts sites per district.",
        _join,
    ),
    Step(
        "nearest", "Nearest features",
        "Distance to the closest feature of another layer, here from each site to the river.",
        _nearest,
    ),
    Step(
        "write", "Writing output",
        "to_file writes any layer back out; the extension picks the format. Shapefiles "
        "truncate column names to 10 characters, GeoPackage and GeoJSON do not.",
        _write,
    ),
    Step(
        "plot", "Plotting",
        "GeoDataFrame.plot draws on matplotlib axes, so layers stack on one map and the "
        "usual matplotlib calls set titles, legends and labels.",
        _plot,
    ),
]

STEP_KEYS = [s.key for s in STEPS]


def run_steps(walk, keys, out_dir=OUTPUT_DIR, buffer_m=DEFAULT_BUFFER_METERS, outputs=None):
    """
    Run the named steps, in walkthrough order.

    Returns:
        dict: Outputs collected by the steps (written files, figures, measurements).
    """
    unknown = [k for k in keys if k not in STEP_KEYS]
    if unknown:
        raise ValueError(f"Unknown steps {unknown}. Available: {STEP_KEYS}")

    ctx = {"out_dir": out_dir, "buffer_m": buffer_m, "outputs": outputs if outputs is not None else {}}
    selected = [s for s in STEPS if s.key in keys]
    for i, step in enumerate(selected, start=1):
        logger.info("Step %d/%d: %s", i, len(selected), step.title)
        logger.info("%s", step.narration)
        step.run(walk, ctx)
    return ctx["outputs"]


def prepare_session(walk=None, buffer_m=DEFAULT_BUFFER_METERS):
    """
    A session with every analysis step applied and nothing written to disk.
    """
    walk = walk or GeoWalk()
    run_steps(walk, [k for k in STEP_KEYS if k not in ("write", "plot")], buffer_m=buffer_m)
    return walk


def run_walkthrough(out_dir=OUTPUT_DIR, walk=None, plots=True, buffer_m=DEFAULT_BUFFER_METERS):
    """
    Run the whole walkthrough on the sample data.

    Args:
        out_dir (str): Directory for written layers and figures.
        walk (GeoWalk, optional): Session to use. A fresh one by default.
        plots (bool): Produce figures (the final step).
        buffer_m (float): Buffer distance in meters around sites.

    Returns:
        tuple: (GeoWalk, dict of outputs)
    """
    walk = walk or GeoWalk()
    keys = STEP_KEYS if plots else [k for k in STEP_KEYS if k != "plot"]
    os.makedirs(out_dir, exist_ok=True)
    outputs = run_steps(walk, keys, out_dir=out_dir, buffer_m=buffer_m)
    logger.info("Walkthrough complete. Output in %s", out_dir)
    return walk, outputs
