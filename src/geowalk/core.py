import logging

from geowalk.config import DEFAULT_BUFFER_METERS
from geowalk.exceptions import LayerNotFoundError
from geowalk.io.vector import read_vector, read_points_csv, write_vector
from geowalk.summary import summarize, describe
from geowalk.transform.crs import ensure_crs, reproject, estimate_metric_crs
from geowalk.spatial.ops import buffer, intersection, count_points_in_polygons
from geowalk.spatial.index import nearest_distance

logger = logging.getLogger(__name__)


class GeoWalk:
    """
    Core class for a geowalk session.
    Keeps named layers and runs the walkthrough operations on them.
    """

    def __init__(self, crs=None):
        """
        Initialize an empty session.

        Args:
            crs (str, optional): Metric CRS for distance and area work. When None,
                the local UTM zone of the first layer that needs it is used.
        """
        self.target_crs = crs
        self.layers = {}  # Dict of name -> GeoDataFrame

    def __repr__(self):
        return f"GeoWalk(layers={list(self.layers)}, target_crs={self.target_crs!r})"

    def add_layer(self, name, gdf):
        """Register an in-memory GeoDataFrame under a name."""
        self.layers[name] = gdf
        return gdf

    def layer(self, name):
        """
        Get a loaded layer by name.

        Raises:
            LayerNotFoundError: If nothing was loaded under that name.
        """
        if name not in self.layers:
            raise LayerNotFoundError(f"Layer '{name}' not found. Loaded: {list(self.layers)}")
        return self.layers[name]

    def load_layer(self, name, path, **kwargs):
        """
        Read a vector file (shapefile, GeoJSON, GeoPackage) into the session.
        Layers without a CRS are assumed to be EPSG:4326, with a warning.
        """
        gdf = ensure_crs(read_vector(path, **kwargs))
        return self.add_layer(name, gdf)

    def load_points(self, name, path, x_col=None, y_col=None, crs="EPSG:4326"):
        """Read a CSV of coordinates into the session as a point layer."""
        gdf = read_points_csv(path, x_col=x_col, y_col=y_col, crs=crs)
        return self.add_layer(name, gdf)

    def summary(self, name=None):
        """
        Summaries of one layer, or of every loaded layer when name is None.
        """
        if name is not None:
            return summarize(self.layer(name))
        return {n: summarize(g) for n, g in self.layers.items()}

    def describe(self, name):
        return describe(self.layer(name), name=name)

    def metric_crs(self):
        """
        The metric CRS for this session, estimated from the loaded layers if not set.
        """
        if self.target_crs is None:
            if not self.layers:
                raise ValueError("No layers loaded. Load a layer or pass crs= to GeoWalk().")
            first = next(iter(self.layers.values()))
            self.target_crs = estimate_metric_crs(first)
            logger.info("Using metric CRS %s", self.target_crs)
        return self.target_crs

    def to_metric(self, name, new_name=None):
        """
        Reproject a layer to the session's metric CRS.

        Args:
            name (str): Layer to reproject.
            new_name (str, optional): Store the result under this name instead of replacing.

        Returns:
            geopandas.GeoDataFrame: The reprojected layer.
        """
        projected = reproject(self.layer(name), self.metric_crs())
        return self.add_layer(new_name or name, projected)

    def buffer_layer(self, name, distance=DEFAULT_BUFFER_METERS, new_name=None):
        """
        Buffer a layer by a distance in meters.

        Returns:
            geopandas.GeoDataFrame: Buffers, stored as `new_name` (default '<name>_buffer').
        """
        buffered = buffer(self.layer(name), distance, crs=self.metric_crs())
        return self.add_layer(new_name or f"{name}_buffer", buffered)

    def intersect_layers(self, left, right, new_name=None):
        """
        Intersect two layers; stored as `new_name` (default '<left>_x_<right>').
        """
        result = intersection(self.layer(left), self.layer(right))
        return self.add_layer(new_name or f"{left}_x_{right}", result)

    def count_points(self, points, polygons, id_col, count_col="n_points"):
        """
        Count features of the `points` layer inside each feature of `polygons`.
        The polygon layer is replaced by a copy carrying the count column.
        """
        counted = count_points_in_polygons(self.layer(points), self.layer(polygons), id_col, count_col=count_col)
        return self.add_layer(polygons, counted)

    def nearest(self, source, target, col="nearest_dist"):
        """
        Distance in meters from each `source` feature to the nearest `target` feature.

        Returns:
            geopandas.GeoDataFrame: `source` in the metric CRS with the distance column.
        """
        crs = self.metric_crs()
        src = reproject(self.layer(source), crs)
        tgt = reproject(self.layer(target), crs)
        return nearest_distance(src, tgt, col=col)

    def write_layer(self, name, path, driver=None):
        """Write a layer to disk; the format follows the file extension."""
        return write_vector(self.layer(name), path, driver=driver)
