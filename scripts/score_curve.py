#!/usr/bin/env python3
"""Print the log-normal score curve for a pair of calibration points.

Useful when picking score_podr / score_median for a metric audit.

Run:
  python3 scripts/score_curve.py --podr 2000 --median 4000 --max-ms 10000 --step 500
"""

from __future__ import annotations

import argparse

import numpy as np

from heroaudit.lib.statistics import clamp_to_2_decimals, get_log_normal_distribution


def main() -> None:
    parser = argparse.ArgumentParser(description="heroaudit score curve")
    parser.add_argument("--podr", type=float, default=2000.0)
    parser.add_argument("--median", type=float, default=4000.0)
    parser.add_argument("--max-ms", type=float, default=10000.0)
    parser.add_argument("--step", type=float, default=500.0)
    args = parser.parse_args()

    if args.step <= 0:
        raise SystemExit("--step must be > 0")
    distribution = get_log_normal_distribution(args.median, args.podr)
    timings = np.arange(0.0, args.max_ms + args.step / 2, args.step)
    scores = clamp_to_2_decimals(np.clip(distribution.compute_complementary_percentile(timings), 0.0, 1.0))

    print(f"podr={args.podr:g}ms median={args.median:g}ms shape={distribution.shape:.4f}")
    print(f"{'timing_ms':>10}  score")
    for timing, score in zip(timings, scores):
        print(f"{timing:>10.0f}  {score:.2f}")


if __name__ == "__main__":
    main()
