from geowalk.exercise import TASKS, produce_plots, check_submission
import logging
import sys

def main(out_dir="submission"):
    logging.basicConfig(level=logging.INFO, format="%(levelname)s %(name)s: %(message)s")

    print("Exercise tasks:")
    for task in TASKS:
        print(f"  [{task.key}] {task.prompt}")

    produce_plots(out_dir)

    results = check_submission(out_dir)
    done = sum(results.values())
    print(f"{done}/{len(results)} figures present in {out_dir}")
    return 0 if done == len(results) else 1

if __name__ == "__main__":
    sys.exit(main(*sys.argv[1:]))
