"""
Command line entry point.

    geowalk walkthrough --out output/
    geowalk exercise --out submission/
    geowalk check submission/
    geowalk describe path/to/layer.shp
"""

import argparse
import logging
import sys

from geowalk.__about__ import __version__
from geowalk.config import DEFAULT_BUFFER_METERS, OUTPUT_DIR
from geowalk.exceptions import GeoWalkError


def _cmd_walkthrough(args):
    from geowalk.walkthrough import run_walkthrough

    _, outputs = run_walkthrough(out_dir=args.out, plots=not args.no_plots, buffer_m=args.buffer)
    for name, path in outputs.get("files", {}).items():
        print(f"  {name}: {path}")
    for name, path in outputs.get("figures", {}).items():
        print(f"  {name}: {path}")
    return 0


def _cmd_exercise(args):
    from geowalk.exercise import TASKS, produce_plots

    if args.tasks:
        for task in TASKS:
            print(f"[{task.key}] {task.prompt} -> {task.filename}")
        return 0
    for key, path in produce_plots(args.out, buffer_m=args.buffer).items():
        print(f"  {key}: {path}")
    return 0


def _cmd_check(args):
    from geowalk.exercise import check_submission

    results = check_submission(args.directory)
    for key, ok in results.items():
        print(f"  {'OK  ' if ok else 'MISS'} {key}")
    return 0 if all(results.values()) else 1


def _cmd_describe(args):
    from geowalk.io.vector import read_vector, read_points_csv
    from geowalk.summary import describe

    if args.path.lower().endswith(".csv"):
        gdf = read_points_csv(args.path)
    else:
        gdf = read_vector(args.path, layer=args.layer)
    print(describe(gdf, name=args.path))
    return 0


def build_parser():
    parser = argparse.ArgumentParser(
        prog="geowalk",
        description="Narrated walkthrough of loading, transforming and plotting vector GIS data.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument('--version', action='version', version=f"%(prog)s {__version__}")
    parser.add_argument('-v', '--verbose', action='store_true', help='Debug logging')

    subparsers = parser.add_subparsers(dest='command', help='Available commands')

    walk = subparsers.add_parser('walkthrough', help='Run the narrated walkthrough on the sample data')
    walk.add_argument('--out', default=OUTPUT_DIR, help='Output directory')
    walk.add_argument('--buffer', type=float, default=DEFAULT_BUFFER_METERS, help='Buffer distance in meters')
    walk.add_argument('--no-plots', action='store_true', help='Skip the plotting step')
    walk.set_defaults(func=_cmd_walkthrough)

    exercise = subparsers.add_parser('exercise', help='Produce the exercise figures (worked solution)')
    exercise.add_argument('--out', default='submission', help='Directory for the figures')
    exercise.add_argument('--buffer', type=float, default=DEFAULT_BUFFER_METERS, help='Buffer distance in meters')
    exercise.add_argument('--tasks', action='store_true', help='Only list the tasks')
    exercise.set_defaults(func=_cmd_exercise)

    check = subparsers.add_parser('check', help='Check a submission directory for the expected figures')
    check.add_argument('directory', help='Submission directory')
    check.set_defaults(func=_cmd_check)

    describe = subparsers.add_parser('describe', help='Summarize a vector file or point CSV')
    describe.add_argument('path', help='Path to a shapefile, GeoJSON, GeoPackage or CSV')
    describe.add_argument('--layer', default=None, help='Layer name for multi-layer files')
    describe.set_defaults(func=_cmd_describe)

    return parser


def main(argv=None):
    parser = build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(levelname)-7s %(name)s: %(message)s",
    )

    if args.command is None:
        parser.print_help()
        return 2

    try:
        return args.func(args)
    except (GeoWalkError, FileNotFoundError, ValueError) as e:
        logging.getLogger("geowalk").error("%s", e)
        return 2


if __name__ == "__main__":
    sys.exit(main())
