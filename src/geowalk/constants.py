# constants.py

DRIVERS_BY_SUFFIX = {
    ".shp": "ESRI Shapefile",
    ".geojson": "GeoJSON",
    ".json": "GeoJSON",
    ".gpkg": "GPKG",
}

X_COLUMN_CANDIDATES = ["lon", "longitude", "lng", "long", "x", "easting"]
Y_COLUMN_CANDIDATES = ["lat", "latitude", "y", "northing"]

GEOMETRY_FAMILIES = {
    "Point": "point",
    "MultiPoint": "point",
    "LineString": "line",
    "MultiLineString": "line",
    "LinearRing": "line",
    "Polygon": "polygon",
    "MultiPolygon": "polygon",
}

PREDICATES = [
    "intersects",
    "within",
    "contains",
    "touches",
    "crosses",
    "overlaps",
    "covers",
    "covered_by",
    "disjoint",
]

SAMPLE_FILES = {
    "districts": "districts.geojson",
    "sites": "sites.csv",
    "rivers": "rivers.geojson",
}

NATURAL_EARTH_COUNTRIES_URL = "https://raw.githubusercontent.com/martynafford/natural-earth-geojson/master/110m/cultural/ne_110m_admin_0_countries.json"
