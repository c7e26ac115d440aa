class GeoWalkError(Exception):
    """Base exception for geowalk"""
    pass

class VectorReadError(GeoWalkError):
    """Raised when a vector file cannot be read"""
    pass

class DataSchemaError(GeoWalkError):
    """Raised when data does not match expected schema"""
    pass

class CRSError(GeoWalkError):
    """Raised when a layer has a missing or unsuitable CRS"""
    pass

class LayerNotFoundError(GeoWalkError, KeyError):
    """Raised when a named layer has not been loaded"""
    pass

class SampleDownloadError(GeoWalkError):
    """Raised when a sample dataset download fails"""
    pass
