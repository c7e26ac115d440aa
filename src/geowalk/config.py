# config.py
# Defaults for CRS, buffers, cache and output locations

import os

DEFAULT_CRS = "EPSG:4326"
PROJECTED_CRS = "EPSG:3857"  # Fallback metric CRS when no local UTM zone can be estimated

DEFAULT_BUFFER_METERS = 500

CACHE_DIR = os.path.expanduser(os.environ.get("GEOWALK_CACHE_DIR", "~/.cache/geowalk"))
OUTPUT_DIR = os.environ.get("GEOWALK_OUTPUT_DIR", "geowalk_output")
