"""Micro-benchmark for full-table scans."""

from __future__ import annotations

import sys
import time
from pathlib import Path

from dbfdecode.options import OpenOptions, ReadMode
from dbfdecode.table import open_table


def benchmark_scan(path: Path, runs: int = 3, loose: bool = True) -> dict[str, float]:
    mode = ReadMode.LOOSE if loose else ReadMode.STRICT
    table = open_table(path, OpenOptions(read_mode=mode))
    total_bytes = table.record_count * table.record_length
    best = None
    records = 0
    for _ in range(runs):
        table.reset()
        start = time.perf_counter()
        records = len(table.read_records())
        elapsed = time.perf_counter() - start
        best = elapsed if best is None or elapsed < best else best
    mbps = (total_bytes / 1_000_000) / best if best else 0.0
    return {"records": records, "bytes": total_bytes, "best_seconds": best or 0.0, "mbps": mbps}


if __name__ == "__main__":
    if len(sys.argv) != 2:
        raise SystemExit("usage: benchmark.py TABLE.dbf")
    result = benchmark_scan(Path(sys.argv[1]))
    print(result)
