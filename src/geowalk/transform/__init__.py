from .crs import ensure_crs, reproject, estimate_metric_crs, require_projected, epsg_of

__all__ = ['ensure_crs', 'reproject', 'estimate_metric_crs', 'require_projected', 'epsg_of']
