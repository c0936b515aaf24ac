import argparse
import concurrent.futures
import json
import os

import requests

BASE = os.environ.get("REIMBURSEMENTS_BASE", "http://127.0.0.1:8000")


def perform_task(i, reimbursement_id):
    try:
        r = requests.post(
            f"{BASE}/api/reimbursements/{reimbursement_id}/perform", timeout=20
        )
        return (i, reimbursement_id, r.status_code, r.text)
    except Exception as e:
        return (i, reimbursement_id, "ERR", str(e))


def run_perform_concurrent(workers, reimbursement_ids):
    print(f"Running perform test: workers={workers}, reimbursements={reimbursement_ids}")
    jobs = [reimbursement_ids[i % len(reimbursement_ids)] for i in range(workers)]
    with concurrent.futures.ThreadPoolExecutor(max_workers=workers) as ex:
        futures = [ex.submit(perform_task, i, rid) for i, rid in enumerate(jobs)]
        results = [f.result() for f in futures]
    print("Results:")
    for r in results:
        print(r[:3])
    # each reimbursement must be performed exactly once
    performed = [r[1] for r in results if r[2] == 200]
    print("Performed:", sorted(performed))
    refunded = {}
    for r in results:
        if r[2] == 200:
            for refund in json.loads(r[3]).get("refunds", []):
                refunded.setdefault(refund["payment_id"], []).append(refund["amount"])
    print("Refunds per payment:", refunded)


if __name__ == "__main__":
    parser = argparse.ArgumentParser(
        description="Fire concurrent perform requests at one or more reimbursements."
    )
    parser.add_argument("ids", type=int, nargs="+")
    parser.add_argument("--workers", type=int, default=8)
    args = parser.parse_args()
    run_perform_concurrent(args.workers, args.ids)
