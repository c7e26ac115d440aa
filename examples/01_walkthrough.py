from geowalk import GeoWalk
from geowalk.io.sample import sample_path
from geowalk.spatial.ops import predicate_mask
import logging
import warnings

# Suppress CRS warnings for cleaner output in example
warnings.filterwarnings('ignore', category=UserWarning)

def main():
    logging.basicConfig(level=logging.WARNING)
    print("=== geowalk: loading, transforming and writing vector data ===")

    lab = GeoWalk()

    print("1. Loading the district polygons and the sites CSV...")
    lab.load_layer('districts', str(sample_path('districts')))
    lab.load_points('sites', str(sample_path('sites')))
    print(lab.describe('districts'))
    print(lab.describe('sites'))

    print("2. Reprojecting to a metric CRS...")
    lab.to_metric('districts')
    lab.to_metric('sites')
    print(f"   Using {lab.metric_crs()}")

    print("3. Buffering sites by 300 m...")
    buffers = lab.buffer_layer('sites', distance=300)
    print(f"   Mean buffer area: {buffers.geometry.area.mean():.0f} m²")

    print("4. Which districts touch a clinic buffer?")
    clinics = buffers[buffers['category'] == 'clinic']
    hit = predicate_mask(lab.layer('districts'), clinics, 'intersects')
    print(f"   {', '.join(lab.layer('districts').loc[hit, 'name'])}")

    print("5. Counting sites per district...")
    counted = lab.count_points('sites', 'districts', id_col='district_id')
    for _, row in counted.iterrows():
        print(f"   - {row['name']}: {row['n_points']} sites")

    print("6. Writing output...")
    path = lab.write_layer('districts', 'districts_with_counts.gpkg')
    print(f"   Wrote {path}")

    print("=== Done ===")

if __name__ == "__main__":
    main()
