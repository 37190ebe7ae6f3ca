"""Benchmark block decomposition on a synthetic layered volume."""
from __future__ import annotations

import argparse
import io
import sys
import time
from typing import List

import numpy as np

from compress.decomposer import BlockDecomposer
from compress.scheduler import PartitionScheduler
from compress.sink import TextBlockSink
from engine import config
from volume.voxel_grid import VoxelGrid

_TAGS = b"ABCDEFGH"
_LABELS = {
    "A": "air",
    "B": "bedrock",
    "C": "clay",
    "D": "dirt",
    "E": "earth",
    "F": "flint",
    "G": "gravel",
    "H": "humus",
}


def build_layered_grid(shape, layers: int, noise: float, seed: int) -> VoxelGrid:
    """Horizontal strata with a sprinkling of random inclusions."""
    depth, height, width = shape
    rng = np.random.default_rng(seed)
    layers = max(1, min(layers, len(_TAGS)))
    bounds = np.sort(rng.choice(np.arange(1, max(2, depth)), size=layers - 1, replace=depth - 1 < layers - 1))
    strata = np.searchsorted(bounds, np.arange(depth), side="right")
    codes = np.frombuffer(_TAGS, dtype=np.uint8)[strata]
    data = np.broadcast_to(codes[:, None, None], (depth, height, width)).copy()
    if noise > 0.0:
        hits = rng.random(data.shape) < noise
        data[hits] = rng.choice(np.frombuffer(_TAGS, dtype=np.uint8), size=int(hits.sum()))
    return VoxelGrid.from_array(data)


def _parse_args(argv: List[str]) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Benchmark greedy block decomposition")
    parser.add_argument("--size", nargs=3, type=int, metavar=("D", "H", "W"), default=[32, 32, 32])
    parser.add_argument("--layers", type=int, default=5)
    parser.add_argument("--noise", type=float, default=0.01, help="Fraction of cells given a random tag")
    parser.add_argument("--seed", type=int, default=7)
    parser.add_argument("--workers", type=int, default=None, help="Override scheduler.workers")
    parser.add_argument("--growth", choices=("ordered", "exhaustive"), default=None)
    parser.add_argument("--seeds", choices=("first", "mode", "fit"), default=None)
    parser.add_argument("--records", action="store_true", help="Print the emitted records to stdout")
    return parser.parse_args(argv)


def main(argv: List[str]) -> int:
    args = _parse_args(argv)

    seed_name = args.seeds or str(config.get("decomposer.seed_strategy", "first"))
    growth_name = args.growth or str(config.get("decomposer.growth_strategy", "ordered"))
    workers = args.workers if args.workers is not None else config.get_int("scheduler.workers", 4, minimum=1)

    t_start = time.perf_counter()
    grid = build_layered_grid(tuple(args.size), args.layers, args.noise, args.seed)
    region = grid.region()
    build_time = time.perf_counter() - t_start

    def factory() -> BlockDecomposer:
        return BlockDecomposer(seed_name, growth_name)

    out = sys.stdout if args.records else io.StringIO()

    t_seq = time.perf_counter()
    sequential = factory().run(region, TextBlockSink(out, _LABELS))
    seq_time = time.perf_counter() - t_seq

    scheduler = PartitionScheduler(workers, factory)
    t_par = time.perf_counter()
    scheduled = scheduler.decompose(region, TextBlockSink(io.StringIO(), _LABELS))
    par_time = time.perf_counter() - t_par

    print(f"[bench] grid {grid.shape} voxels={grid.volume} built in {build_time:.3f} s", file=sys.stderr)
    print(f"[bench] strategies seeds={seed_name} growth={growth_name}", file=sys.stderr)
    print(f"[bench] sequential: {len(sequential)} blocks in {seq_time:.3f} s", file=sys.stderr)
    print(f"[bench] scheduled ({workers} workers): {len(scheduled)} blocks in {par_time:.3f} s", file=sys.stderr)
    if grid.volume:
        print(f"[bench] compression ratio {grid.volume / max(1, len(sequential)):.1f} voxels/block", file=sys.stderr)
    return 0


if __name__ == "__main__":
    raise SystemExit(main(sys.argv[1:]))
