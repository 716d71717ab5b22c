"""
Benchmarks for spvmerkle core components.

Run with: python -m spvmerkle.utils.benchmark
"""

import time
import statistics
from typing import Callable, List
from dataclasses import dataclass

from spvmerkle.crypto import sha256, keccak256, poseidon2, PoseidonHasher
from spvmerkle.core.merkle import MerkleTree, verify_proof
from spvmerkle.utils.logger import get_logger

logger = get_logger("benchmark")


# =============================================================================
# Benchmark Framework
# =============================================================================


@dataclass
class BenchmarkResult:
    """Result of a benchmark run."""
    name: str
    iterations: int
    total_time_ms: float
    avg_time_ms: float
    min_time_ms: float
    max_time_ms: float
    ops_per_sec: float

    def __str__(self) -> str:
        return (
            f"{self.name}: {self.ops_per_sec:.0f} ops/s "
            f"(avg={self.avg_time_ms:.3f}ms, min={self.min_time_ms:.3f}ms, max={self.max_time_ms:.3f}ms)"
        )


def benchmark(
    name: str,
    func: Callable,
    iterations: int = 1000,
    warmup: int = 100,
) -> BenchmarkResult:
    """
    Run a benchmark.

    Args:
        name: Benchmark name
        func: Function to benchmark (no args)
        iterations: Number of iterations
        warmup: Warmup iterations

    Returns:
        BenchmarkResult
    """
    if iterations < 1:
        raise ValueError(f"iterations must be >= 1, got {iterations}")

    for _ in range(warmup):
        func()

    times = []
    for _ in range(iterations):
        start = time.perf_counter()
        func()
        end = time.perf_counter()
        times.append((end - start) * 1000)  # ms

    total = sum(times)
    avg = statistics.mean(times)

    return BenchmarkResult(
        name=name,
        iterations=iterations,
        total_time_ms=total,
        avg_time_ms=avg,
        min_time_ms=min(times),
        max_time_ms=max(times),
        ops_per_sec=1000 / avg if avg > 0 else float("inf"),
    )


# =============================================================================
# Hash Benchmarks
# =============================================================================


def benchmark_hashing(scale: float = 1.0) -> List[BenchmarkResult]:
    """Benchmark hash functions."""
    data = b"x" * 64

    return [
        benchmark("SHA-256 (64 bytes)", lambda: sha256(data), iterations=_n(10000, scale)),
        benchmark("Keccak-256 (64 bytes)", lambda: keccak256(data), iterations=_n(10000, scale)),
        benchmark("Poseidon2 (2 field elements)", lambda: poseidon2(12345, 67890), iterations=_n(1000, scale)),
    ]


# =============================================================================
# Merkle Tree Benchmarks
# =============================================================================


def benchmark_merkle(scale: float = 1.0) -> List[BenchmarkResult]:
    """Benchmark tree construction, update, paths and proofs."""
    results = []
    values = [i.to_bytes(4, "big") for i in range(1024)]

    results.append(benchmark(
        "Build (1024 leaves, depth 32)",
        lambda: MerkleTree.from_values(values, depth=32),
        iterations=_n(50, scale),
        warmup=2,
    ))

    results.append(benchmark(
        "Build (16 leaves, Poseidon 8/57, depth 8)",
        lambda: MerkleTree.from_values(values[:16], depth=8, hasher=PoseidonHasher()),
        iterations=_n(5, scale),
        warmup=1,
    ))

    tree = MerkleTree.from_values(values, depth=32)
    results.append(benchmark(
        "Update leaf (1024 leaves, full rebuild)",
        lambda: tree.update_leaf(7, b"updated"),
        iterations=_n(50, scale),
        warmup=2,
    ))

    results.append(benchmark(
        "Hash path (depth 32)",
        lambda: tree.hash_path(513),
        iterations=_n(1000, scale),
    ))

    results.append(benchmark(
        "Proof generation (depth 32)",
        lambda: tree.generate_proof(513),
        iterations=_n(1000, scale),
    ))

    proof = tree.generate_proof(513)
    root = tree.root
    results.append(benchmark(
        "Proof verification (depth 32)",
        lambda: verify_proof(513, proof, root),
        iterations=_n(1000, scale),
    ))

    return results


def _n(iterations: int, scale: float) -> int:
    return max(1, int(iterations * scale))


# =============================================================================
# Main
# =============================================================================


def run_all_benchmarks(scale: float = 1.0) -> List[BenchmarkResult]:
    """Run all benchmarks, print and return the results."""
    print("=" * 60)
    print("spvmerkle Performance Benchmarks")
    print("=" * 60)

    sections = [
        ("Hashing", benchmark_hashing),
        ("Merkle Trees", benchmark_merkle),
    ]

    all_results = []
    for section_name, bench_func in sections:
        print(f"\n{section_name}")
        print("-" * 40)
        results = bench_func(scale)
        for r in results:
            print(f"  {r}")
        all_results.extend(results)

    print("\n" + "=" * 60)
    logger.debug(f"Ran {len(all_results)} benchmarks at scale {scale}")
    return all_results


if __name__ == "__main__":
    run_all_benchmarks()
