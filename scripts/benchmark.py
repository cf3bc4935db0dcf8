#!/usr/bin/env python3
"""Benchmark script for book service performance."""

import argparse
import statistics
import time
import uuid

import httpx


def _timed(client: httpx.Client, method: str, url: str, **kwargs) -> tuple[httpx.Response, float]:
    start = time.perf_counter()
    response = client.request(method, url, **kwargs)
    return response, (time.perf_counter() - start) * 1000  # ms


def _summary(latencies: list[float]) -> dict:
    return {
        "min": min(latencies),
        "max": max(latencies),
        "mean": statistics.mean(latencies),
        "median": statistics.median(latencies),
        "stdev": statistics.stdev(latencies) if len(latencies) > 1 else 0,
        "p95": sorted(latencies)[int(len(latencies) * 0.95)],
    }


def benchmark_books(
    client: httpx.Client,
    num_requests: int,
    title_prefix: str = "Benchmark",
    verbose: bool = True,
) -> dict:
    """Create, search and delete books, returning latency statistics per operation."""
    latencies: dict[str, list[float]] = {"create": [], "search": [], "delete": []}
    created: list[int] = []
    errors = 0
    # Unique per run so repeated runs never collide on titles
    run_tag = uuid.uuid4().hex[:8]

    if verbose:
        print(f"Benchmarking {num_requests} create/search/delete cycles...")
        print()

    for i in range(num_requests):
        title = f"{title_prefix} {run_tag} #{i}"
        try:
            response, elapsed = _timed(client, "POST", "/books", json={"title": title})
            if response.status_code != 201:
                errors += 1
                if verbose:
                    print(f"  Create {i + 1}: ERROR ({response.status_code})")
                continue
            latencies["create"].append(elapsed)
            created.append(response.json()["id"])

            response, elapsed = _timed(client, "GET", "/books/search", params={"title": run_tag})
            if response.status_code == 200:
                latencies["search"].append(elapsed)
            else:
                errors += 1

            if verbose:
                print(f"  Cycle {i + 1}: create {latencies['create'][-1]:.2f}ms")

        except httpx.HTTPError as e:
            errors += 1
            if verbose:
                print(f"  Cycle {i + 1}: EXCEPTION ({e})")

    for book_id in created:
        try:
            response, elapsed = _timed(client, "DELETE", f"/books/{book_id}")
        except httpx.HTTPError:
            errors += 1
            continue
        if response.status_code == 204:
            latencies["delete"].append(elapsed)
        else:
            errors += 1

    if not latencies["create"]:
        return {"error": "All requests failed"}

    return {
        "total_requests": num_requests,
        "successful_creates": len(latencies["create"]),
        "failed_requests": errors,
        "latency_ms": {op: _summary(values) for op, values in latencies.items() if values},
    }


def main():
    parser = argparse.ArgumentParser(description="Benchmark book service")
    parser.add_argument(
        "--url",
        default="http://localhost:3000",
        help="Base URL of book service",
    )
    parser.add_argument(
        "--requests",
        type=int,
        default=10,
        help="Number of create/search/delete cycles",
    )
    parser.add_argument(
        "--prefix",
        default="Benchmark",
        help="Title prefix for created books",
    )

    args = parser.parse_args()

    print("=" * 50)
    print("Book Service Benchmark")
    print("=" * 50)
    print()

    with httpx.Client(base_url=args.url, timeout=30.0) as client:
        results = benchmark_books(client, num_requests=args.requests, title_prefix=args.prefix)

    print()
    print("=" * 50)
    print("Results")
    print("=" * 50)
    print()

    if "error" in results:
        print(f"Error: {results['error']}")
        return

    print(f"Total cycles:        {results['total_requests']}")
    print(f"Successful creates:  {results['successful_creates']}")
    print(f"Failed requests:     {results['failed_requests']}")

    for op, stats in results["latency_ms"].items():
        print()
        print(f"{op.capitalize()} latency (ms):")
        print(f"  Min:               {stats['min']:.2f}")
        print(f"  Max:               {stats['max']:.2f}")
        print(f"  Mean:              {stats['mean']:.2f}")
        print(f"  Median:            {stats['median']:.2f}")
        print(f"  Std Dev:           {stats['stdev']:.2f}")
        print(f"  P95:               {stats['p95']:.2f}")


if __name__ == "__main__":
    main()
