#!/usr/bin/env python3
"""
Booking lifecycle flow script.

DO NOT ADD BUSINESS LOGIC HERE.
This script only orchestrates API calls.
All rules live in the backend.

Usage:
    python scripts/flow_booking_lifecycle.py --check-in 2026-06-01 --check-out 2026-06-05
    python scripts/flow_booking_lifecycle.py --check-in 2026-06-01 --check-out 2026-06-05 --base-url http://staging:8000

Flow:
    1. Create booking A
    2. Try an overlapping booking B sharing A's check-out day (expect 409)
    3. Create booking B starting the day after A's check-out
    4. Confirm A
    5. Try to move A back to Pending (expect 409)
    6. Try to delete confirmed A (expect 409)
    7. Cancel A, then delete it
"""

import argparse
import json
import sys
from datetime import date, timedelta

import httpx

BASE_URL = "http://localhost:8000"

GUEST = {
    "first_name": "John",
    "last_name": "Doe",
    "phone": "+33612345678",
    "email": "John.Doe@EXAMPLE.com ",
    "booking_type": "Garden suite",
    "country": "France",
    "city": "Lyon",
    "address": "12 rue des Jardins",
    "arrival": "15:00",
    "total_price": "480.00",
}


def api_request(client: httpx.Client, method: str, endpoint: str, data: dict | None = None) -> dict:
    """Make API request."""
    response = client.request(method, endpoint, json=data, follow_redirects=True)
    return {"status": response.status_code, "data": response.json() if response.text else {}}


def print_step(step: int, title: str):
    """Print step header."""
    print(f"\n{'='*60}")
    print(f"STEP {step}: {title}")
    print("="*60)


def print_result(result: dict, fields: list[str] | None = None, expect: int | None = None) -> bool:
    """Print result; succeed on 2xx or on the expected status."""
    ok = result["status"] == expect if expect else result["status"] < 400
    label = "OK" if ok else "UNEXPECTED"
    print(f"{label} ({result['status']})")
    data = result["data"]
    if fields and isinstance(data, dict):
        data = {k: data.get(k) for k in fields if k in data}
    print(json.dumps(data, indent=2))
    return ok


def main():
    parser = argparse.ArgumentParser(description="Booking lifecycle flow")
    parser.add_argument("--check-in", required=True, help="Check-in date (YYYY-MM-DD)")
    parser.add_argument("--check-out", required=True, help="Check-out date (YYYY-MM-DD)")
    parser.add_argument("--base-url", default=BASE_URL, help="API base URL")
    args = parser.parse_args()

    check_in = date.fromisoformat(args.check_in)
    check_out = date.fromisoformat(args.check_out)
    fields = ["id", "email", "check_in_date", "check_out_date", "status", "total_price"]

    with httpx.Client(base_url=args.base_url, timeout=10.0) as client:
        print_step(1, "Create booking A")
        result = api_request(client, "POST", "/api/v1/bookings/", {
            **GUEST,
            "check_in_date": check_in.isoformat(),
            "check_out_date": check_out.isoformat(),
        })
        if not print_result(result, fields):
            sys.exit(1)
        booking_a = result["data"]["id"]

        print_step(2, "Booking B sharing A's check-out day")
        result = api_request(client, "POST", "/api/v1/bookings/", {
            **GUEST,
            "check_in_date": check_out.isoformat(),
            "check_out_date": (check_out + timedelta(days=5)).isoformat(),
        })
        if not print_result(result, expect=409):
            sys.exit(1)

        print_step(3, "Booking B starting the next day")
        result = api_request(client, "POST", "/api/v1/bookings/", {
            **GUEST,
            "check_in_date": (check_out + timedelta(days=1)).isoformat(),
            "check_out_date": (check_out + timedelta(days=5)).isoformat(),
        })
        if not print_result(result, fields):
            sys.exit(1)

        print_step(4, "Confirm A")
        result = api_request(client, "PATCH", f"/api/v1/bookings/{booking_a}/status", {"status": "Confirmed"})
        if not print_result(result, fields):
            sys.exit(1)

        print_step(5, "Move A back to Pending")
        result = api_request(client, "PATCH", f"/api/v1/bookings/{booking_a}/status", {"status": "Pending"})
        if not print_result(result, expect=409):
            sys.exit(1)

        print_step(6, "Delete confirmed A")
        result = api_request(client, "DELETE", f"/api/v1/bookings/{booking_a}")
        if not print_result(result, expect=409):
            sys.exit(1)

        print_step(7, "Cancel A, then delete it")
        result = api_request(client, "PATCH", f"/api/v1/bookings/{booking_a}/status", {"status": "Cancelled"})
        if not print_result(result, fields):
            sys.exit(1)
        result = api_request(client, "DELETE", f"/api/v1/bookings/{booking_a}")
        if not print_result(result, expect=204):
            sys.exit(1)

    print("\n" + "="*60)
    print("BOOKING LIFECYCLE FLOW COMPLETE")
    print("="*60)


if __name__ == "__main__":
    main()
