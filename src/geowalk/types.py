from dataclasses import dataclass
from typing import TypedDict, Optional, Dict, List, Tuple

@dataclass
class BoundingBox:
    west: float
    south: float
    east: float
    north: float

    @classmethod
    def from_bounds(cls, bounds):
        west, south, east, north = (float(v) for v in bounds)
        return cls(west, south, east, north)

    def as_tuple(self):
        return (self.west, self.south, self.east, self.north)

class LayerSummary(TypedDict):
    n_features: int
    crs: Optional[str]
    epsg: Optional[int]
    is_geographic: Optional[bool]
    geometry_types: Dict[str, int]
    bounds: Optional[Tuple[float, float, float, float]]
    n_invalid: int
    n_empty: int
    columns: List[Tuple[str, str]]
