import json
import time
import logging
from collections import Counter
from datetime import datetime, timezone
from concurrent.futures import ThreadPoolExecutor, as_completed

import boto3

from lambdalogs.logs import setup_logger

REGION = "us-west-2"
FUNCTION_NAME = "lambdalogs"

N_MINUTES = 1
INTERVAL_SECONDS = N_MINUTES * 60

# Invocations fired concurrently per round
INVOCATIONS_PER_ROUND = 50

# Safety stop (None to loop forever)
MAX_ROUNDS = 10

# Threads for parallel invokes
MAX_WORKERS = 16

lambda_client = boto3.client("lambda", region_name=REGION)


def invoke_one(fname: str, message: str):
    resp = lambda_client.invoke(
        FunctionName=fname,
        InvocationType="RequestResponse",
        Payload=json.dumps({"message": message}).encode("utf-8"),
    )
    payload = json.loads(resp["Payload"].read().decode("utf-8"))
    # Handled failures return the fixed error payload, crashes set FunctionError
    failed = "FunctionError" in resp or "error" in payload
    return fname, payload, failed


def summarize_round(results):
    """Return (counts seen, errors, invocation counts seen more than once).

    Each warm instance keeps its own counter, so a duplicate only means two
    different execution environments served the round.
    """
    counts = []
    errors = 0
    for _fname, payload, failed in results:
        if failed or "invocation_count" not in payload:
            errors += 1
            continue
        counts.append(payload["invocation_count"])
    duplicates = sorted(n for n, seen in Counter(counts).items() if seen > 1)
    return counts, errors, duplicates


def run_round(round_num, fname=FUNCTION_NAME, n=INVOCATIONS_PER_ROUND, logger=None):
    logger = logger or logging.getLogger("lambdalogs_invoke")
    results = []
    errors = 0
    with ThreadPoolExecutor(max_workers=MAX_WORKERS) as ex:
        futures = [
            ex.submit(invoke_one, fname, f"round {round_num} call {i}") for i in range(n)
        ]
        for fut in as_completed(futures):
            try:
                result = fut.result()
            except Exception as e:
                errors += 1
                logger.warning(f"{fname} invoke failed: {e}")
                continue

            _, payload, failed = result
            if failed:
                logger.warning(f"{fname} function error: {payload}")
            else:
                logger.info(f"{fname}: invocation_count={payload.get('invocation_count')}")
            results.append(result)

    counts, function_errors, duplicates = summarize_round(results)
    return counts, errors + function_errors, duplicates


def main():
    logger = setup_logger(
        level="INFO",
        logfile=f"lambdalogs_invoke_{int(time.time())}.log",
        name="lambdalogs_invoke",
    )

    round_num = 0
    while True:
        round_num += 1
        round_ts = datetime.now(timezone.utc).isoformat()
        t0 = time.time()

        logger.info(f"=== Round {round_num} @ {round_ts} | {INVOCATIONS_PER_ROUND} invocations ===")

        counts, errors, duplicates = run_round(round_num, logger=logger)
        highest = max(counts) if counts else None

        # Safety stop
        if MAX_ROUNDS is not None and round_num >= MAX_ROUNDS:
            logger.info(f"STOP: reached MAX_ROUNDS={MAX_ROUNDS}. last highest count={highest}")
            break

        # Sleep until next interval
        elapsed = time.time() - t0
        sleep_s = max(0, INTERVAL_SECONDS - elapsed)
        logger.info(
            f"Round summary: ok={len(counts)} errors={errors} highest_count={highest} "
            f"shared_counts={len(duplicates)} sleep={sleep_s:.1f}s"
        )
        time.sleep(sleep_s)


if __name__ == "__main__":
    main()
