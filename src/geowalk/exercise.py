"""
Companion exercise: reproduce the walkthrough's figures.

Students work through TASKS and save one PNG per task into a submission
directory. produce_plots() is the worked solution; check_submission() tells
which expected figures are present.
"""

import logging
import os
from dataclasses import dataclass

from geowalk.config import DEFAULT_BUFFER_METERS
from geowalk.spatial.ops import intersection
from geowalk.viz.plot import (
    plot_layers,
    plot_buffers,
    plot_overlay,
    plot_choropleth,
    plot_distribution,
    save_figure,
)
from geowalk.walkthrough import prepare_session

logger = logging.getLogger(__name__)


@dataclass
class Task:
    key: str
    prompt: str
    filename: str


TASKS = [
    Task(
        "overview",
        "Plot the districts, the river and the sites on a single map with a legend.",
        "overview.png",
    ),
    Task(
        "buffers",
        f"Buffer every site by {DEFAULT_BUFFER_METERS:.0f} m in a projected CRS and plot the buffers with the sites on top.",
        "buffers.png",
    ),
    Task(
        "site_counts",
        "Count the sites in each district with a spatial join and draw a choropleth of the counts.",
        "site_counts.png",
    ),
    Task(
        "river_distance",
        "Compute each site's distance to the river in meters and plot the distribution as a histogram.",
        "river_distance.png",
    ),
    Task(
        "overlap",
        f"Intersect the {DEFAULT_BUFFER_METERS:.0f} m buffers with the districts and plot the inputs with the intersection result.",
        "overlap.png",
    ),
]


def produce_plots(out_dir, walk=None, buffer_m=DEFAULT_BUFFER_METERS):
    """
    Produce the figure for every exercise task.

    Args:
        out_dir (str): Directory to save the PNGs into.
        walk (GeoWalk, optional): Session prepared with the walkthrough steps.
            A fresh session on the sample data is prepared when omitted.
        buffer_m (float): Buffer distance in meters.

    Returns:
        dict: Task key -> saved path.
    """
    if walk is None:
        walk = prepare_session(buffer_m=buffer_m)

    districts = walk.layer("districts")
    rivers = walk.layer("rivers")
    sites = walk.layer("sites")
    buffers = walk.layer("site_buffers")

    figures = {}

    fig, _ = plot_layers({"Districts": districts, "River": rivers, "Sites": sites}, title="Districts, river and sites")
    figures["overview"] = fig

    fig, _ = plot_buffers(sites, buffers, title=f"Sites with {buffer_m:.0f} m buffers")
    figures["buffers"] = fig

    fig, _ = plot_choropleth(districts, "n_points", title="Number of sites per district")
    figures["site_counts"] = fig

    fig, _ = plot_distribution(
        sites["river_dist"], title="Distance from each site to the river",
        bins=10, x_label="Distance to river (meters)",
    )
    figures["river_distance"] = fig

    overlap = intersection(buffers, districts)
    fig, _ = plot_overlay(buffers, districts, overlap, title="Buffers intersected with districts")
    figures["overlap"] = fig

    paths = {}
    for task in TASKS:
        paths[task.key] = save_figure(figures[task.key], os.path.join(out_dir, task.filename))
    logger.info("Saved %d exercise figures to %s", len(paths), out_dir)
    return paths


def check_submission(out_dir):
    """
    Check which task figures exist in a submission directory.

    Returns:
        dict: Task key -> True if the PNG exists and is non-empty.
    """
    results = {}
    for task in TASKS:
        path = os.path.join(out_dir, task.filename)
        results[task.key] = os.path.isfile(path) and os.path.getsize(path) > 0
        if not results[task.key]:
            logger.warning("Missing figure for task '%s': %s", task.key, path)
    return results
