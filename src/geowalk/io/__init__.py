from .vector import read_vector, read_points_csv, write_vector
from .sample import sample_path, load_sample, get_world_boundaries

__all__ = [
    'read_vector',
    'read_points_csv',
    'write_vector',
    'sample_path',
    'load_sample',
    'get_world_boundaries',
]
