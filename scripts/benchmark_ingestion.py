#!/usr/bin/env python3
"""
Benchmark Script for the Pageview Telemetry service

Posts pageviews one request at a time, then reads a frame from /live
to check that the streamed count covers every insert.

Usage:
    python scripts/benchmark_ingestion.py [base_url] [total_pageviews]
"""

import sys
import time
import requests
import statistics


PAGES = ["/", "/pricing", "/docs", "/blog", "/signup"]


def benchmark_ingestion(base_url: str, total_pageviews: int = 1000):
    """Benchmark pageview ingestion"""
    print(f"\n{'=' * 60}")
    print(f"BENCHMARK: Tracking {total_pageviews:,} pageviews")
    print(f"{'=' * 60}")

    accepted = 0
    failed = 0
    request_times = []

    start_time = time.time()

    for i in range(total_pageviews):
        request_start = time.time()

        try:
            response = requests.post(
                f"{base_url}/track",
                params={"page": PAGES[i % len(PAGES)]},
                timeout=30
            )

            if response.status_code == 204:
                accepted += 1
            else:
                failed += 1
                print(f"Error on request {i}: Status {response.status_code} {response.text}")

        except requests.RequestException as e:
            failed += 1
            print(f"Error on request {i}: {e}")

        request_times.append(time.time() - request_start)

        if i % 200 == 0:
            print(f"Progress: {i + 1:,} / {total_pageviews:,} pageviews")

    total_time = time.time() - start_time

    print(f"\n{'=' * 60}")
    print(f"INGESTION RESULTS")
    print(f"{'=' * 60}")
    print(f"Total pageviews:     {total_pageviews:,}")
    print(f"Accepted:            {accepted:,}")
    print(f"Failed:              {failed:,}")
    print(f"Total time:          {total_time:.2f}s")
    print(f"Requests/sec:        {total_pageviews / total_time:,.0f}")
    print(f"Avg latency:         {statistics.mean(request_times) * 1000:.2f}ms")
    if len(request_times) > 1:
        print(f"p95 latency:         {statistics.quantiles(request_times, n=20)[-1] * 1000:.2f}ms")
    print(f"Max latency:         {max(request_times) * 1000:.2f}ms")
    print(f"{'=' * 60}\n")

    return accepted


def read_live_count(base_url: str) -> int:
    """Read the first frame from the live stream"""
    with requests.get(f"{base_url}/live", stream=True, timeout=10) as response:
        response.raise_for_status()
        for line in response.iter_lines(decode_unicode=True):
            if line and line.startswith("data: "):
                return int(line[len("data: "):])
    raise RuntimeError("Live stream closed before the first frame")


def main():
    base_url = sys.argv[1] if len(sys.argv) > 1 else "http://localhost:8080"
    total_pageviews = int(sys.argv[2]) if len(sys.argv) > 2 else 1000

    print("\n" + "=" * 60)
    print("PAGEVIEW TELEMETRY - BENCHMARK")
    print("=" * 60)
    print(f"Target: {base_url}")
    print("=" * 60)

    # Test connection
    try:
        response = requests.get(f"{base_url}/health", timeout=5)
        if response.status_code != 200:
            print("Error: API is not healthy")
            sys.exit(1)
    except requests.RequestException as e:
        print(f"Error: Cannot connect to API: {e}")
        sys.exit(1)

    count_before = read_live_count(base_url)
    accepted = benchmark_ingestion(base_url, total_pageviews=total_pageviews)
    count_after = read_live_count(base_url)

    print(f"Live count before:   {count_before:,}")
    print(f"Live count after:    {count_after:,}")
    if count_after - count_before < accepted:
        print("Error: live count is missing accepted pageviews")
        sys.exit(1)

    print("\n" + "=" * 60)
    print("BENCHMARK COMPLETE")
    print("=" * 60)


if __name__ == "__main__":
    main()
