import argparse
import os
import sys

import requests

_session = requests.Session()


def die(message, code=1):
    print(message)
    sys.exit(code)


def main(argv=None):
    parser = argparse.ArgumentParser(description="Call a deployed payout trigger endpoint.")
    parser.add_argument("--base-url", default=os.getenv("BASE_URL", "http://127.0.0.1:8000"))
    parser.add_argument("--timeout", type=float, default=120.0)
    args = parser.parse_args(argv)

    secret = os.getenv("CRON_SECRET")
    if not secret:
        die("CRON_SECRET is not set")

    url = args.base_url.rstrip("/") + "/api/cron/process-payouts"
    try:
        resp = _session.get(url, headers={"Authorization": "Bearer %s" % secret}, timeout=args.timeout)
    except requests.RequestException as exc:
        die("Request failed: %s" % exc)

    req_id = resp.headers.get("X-Request-ID")
    if req_id:
        print("request_id=%s" % req_id)
    print("HTTP %s" % resp.status_code)
    try:
        print(resp.json())
    except ValueError:
        print(resp.text[:500])

    if resp.status_code != 200:
        sys.exit(1)


if __name__ == "__main__":
    main()
