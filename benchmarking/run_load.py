import os
import time
from collections import Counter

import requests

# SMALL NUMBER FOR DEBUGGING
TOTAL_REQUESTS = int(os.getenv("TOTAL_REQUESTS", "5"))
BATCH_SIZE = int(os.getenv("BATCH_SIZE", "2"))

READ_SQL = "SELECT * FROM patient LIMIT 10"


class LoadResult:
    def __init__(self, label: str):
        self.label = label
        self.success = 0
        self.fail = 0
        self.error_codes = Counter()
        self.first_error = None
        self.elapsed = 0.0

    def record(self, resp=None, exc=None):
        if resp is not None and resp.status_code == 200:
            self.success += 1
            return

        self.fail += 1
        if exc is not None:
            self.error_codes["EXCEPTION"] += 1
            if self.first_error is None:
                self.first_error = f"Exception: {repr(exc)}"
        else:
            self.error_codes[resp.status_code] += 1
            if self.first_error is None:
                self.first_error = f"Status {resp.status_code}: {resp.text}"

    @property
    def total(self) -> int:
        return self.success + self.fail

    @property
    def throughput(self) -> float:
        return self.total / self.elapsed if self.elapsed > 0 else 0.0


def build_patients(start: int, count: int):
    return [
        {"patientName": f"Load Patient {start + i}", "birthDate": "1990-01-01"}
        for i in range(count)
    ]


def run_reads(api_url: str, total: int) -> LoadResult:
    result = LoadResult("READ")
    url = api_url.rstrip("/") + "/api/query"

    start = time.time()
    for i in range(total):
        try:
            resp = requests.get(url, params={"sql": READ_SQL}, timeout=15)
            result.record(resp=resp)
        except requests.RequestException as e:
            result.record(exc=e)

        if (i + 1) % 5 == 0:
            print(f"[DEBUG] Sent {i+1}/{total} read requests...")
    result.elapsed = time.time() - start
    return result


def run_inserts(api_url: str, total: int, batch_size: int) -> LoadResult:
    result = LoadResult("INSERT")
    url = api_url.rstrip("/") + "/api/insert-multiple"

    start = time.time()
    for i in range(total):
        payload = {"patients": build_patients(i * batch_size, batch_size)}
        try:
            resp = requests.post(url, json=payload, timeout=15)
            result.record(resp=resp)
        except requests.RequestException as e:
            result.record(exc=e)

        if (i + 1) % 5 == 0:
            print(f"[DEBUG] Sent {i+1}/{total} insert requests...")
    result.elapsed = time.time() - start
    return result


def print_result(result: LoadResult):
    print(f"\n=== {result.label} benchmark result ===")
    print(f"Total requests: {result.total}")
    print(f"Success      : {result.success}")
    print(f"Fail         : {result.fail}")
    print(f"Time         : {result.elapsed:.2f}s")
    print(f"Throughput   : {result.throughput:.2f} req/s")

    if result.error_codes:
        print("\n=== Error status code distribution ===")
        for code, count in result.error_codes.items():
            print(f"  {code}: {count} times")

    if result.first_error:
        print("\n*** Example error from first failed request ***")
        print(result.first_error)


def main():
    api_url = os.getenv("API_URL")

    if not api_url:
        print("[ERROR] API_URL env var is not set.")
        return

    print("=== Patient API load run ===")
    print(f"API URL         : {api_url}")
    print(f"Requests / kind : {TOTAL_REQUESTS}")
    print(f"Batch size      : {BATCH_SIZE}")

    print_result(run_inserts(api_url, TOTAL_REQUESTS, BATCH_SIZE))
    print_result(run_reads(api_url, TOTAL_REQUESTS))


if __name__ == "__main__":
    main()
