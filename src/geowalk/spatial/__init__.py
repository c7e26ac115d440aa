from .ops import (
    buffer,
    intersection,
    clip,
    predicate_mask,
    join_points_to_polygons,
    count_points_in_polygons,
    dissolve,
    centroids,
    make_valid,
    area_km2,
    length_km,
)
from .index import build_nearest_neighbor_index, query_nearest, nearest_distance
