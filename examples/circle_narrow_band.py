"""Inside/outside nodes around a sampled circle, full scan vs narrow band.

Demonstrates: sample_levelset, LevelSetNeighborhoodExtractor, build_narrow_band
Output:       examples/circle_narrow_band.png

Checks verified:
    every extracted distance is within 0.2 cells of the true circle distance
    the narrow-band run reproduces the full-scan nodes inside the band
"""
import os, sys
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

import numpy as np
from lsextract import LevelSetNeighborhoodExtractor, build_narrow_band, sample_levelset

_BOUNDS = ((-1.0, 1.0), (-1.0, 1.0))
_RES    = (48, 48)
_RADIUS = 0.5
_BAND   = 0.2
_OUT    = os.path.join(os.path.dirname(__file__), "circle_narrow_band.png")


def _circle(p):
    return np.linalg.norm(p, axis=-1) - _RADIUS


def _render_png(image, ex, out_path, title=""):
    try:
        import matplotlib.pyplot as plt
    except ImportError:
        print("  matplotlib not available, skipping PNG")
        return

    fig, ax = plt.subplots(figsize=(5, 5))
    ax.imshow(image.array, cmap="RdBu", origin="lower")
    ax.contour(image.array, levels=[0.0], colors="k", linewidths=0.8)
    for nodes, colour in ((ex.inside_points, "tab:blue"), (ex.outside_points, "tab:red")):
        idx, dist = nodes.to_arrays()
        if len(dist):
            scale = max(float(dist.max()), 1e-30)
            ax.scatter(idx[:, 1], idx[:, 0], c=colour, s=4 + 40 * dist / scale)
    ax.set_title(title, fontsize=10)
    ax.set_axis_off()
    plt.savefig(out_path, dpi=150, bbox_inches="tight")
    plt.close()
    print(f"  Saved: {out_path}")


def main():
    print("=" * 60)
    print("CIRCLE: radius 0.5 on a 48 x 48 grid")
    print(f"  narrow band width {_BAND}")
    print("=" * 60)

    image = sample_levelset(_circle, _BOUNDS, _RES)
    h = image.spacing[0]

    full = LevelSetNeighborhoodExtractor(input_level_set=image)
    full.locate()

    # --- accuracy against the analytic distance ---
    worst = 0.0
    for nodes in (full.inside_points, full.outside_points):
        for node in nodes:
            y = _BOUNDS[1][0] + h * (node.index[0] + 0.5)
            x = _BOUNDS[0][0] + h * (node.index[1] + 0.5)
            worst = max(worst, abs(node.value - abs(np.hypot(x, y) - _RADIUS)))

    print(f"\nInside nodes : {full.inside_points.size()}")
    print(f"Outside nodes: {full.outside_points.size()}")
    print(f"max |extracted - true| = {worst / h:.3f} cells  (should be < 0.2)")

    # --- narrow band ---
    band = build_narrow_band(image, _BAND)
    narrow = LevelSetNeighborhoodExtractor(
        input_level_set=image, input_narrow_band=band,
        narrow_banding=True, narrow_bandwidth=_BAND,
    )
    progress = []
    narrow.add_observer(progress.append)
    narrow.locate()

    in_band = {i for i in band.indices()}
    expected = [(n.index, n.value) for n in full.inside_points if n.index in in_band]
    got      = [(n.index, n.value) for n in narrow.inside_points]
    print(f"\nBand candidates: {band.size()}   progress updates: {len(progress)}")
    print(f"Narrow-band inside nodes match full scan: {got == expected}")

    ok = worst < 0.2 * h and got == expected and progress[-1] == 1.0
    print("\n" + ("PASSED" if ok else "FAILED"))

    _render_png(image, full, _OUT, "Inside (blue) / outside (red) nodes")


if __name__ == "__main__":
    main()
