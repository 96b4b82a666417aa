"""Seed script for development data.

Run with:  python -m approval_engine.seed
Requires the API to be running at BASE_URL.
"""

from __future__ import annotations

import asyncio
import sys
from datetime import date, timedelta

import httpx

BASE_URL = "http://localhost:8000"
ADMIN_USER_ID = "00000000-0000-0000-0000-000000000001"

ADMIN_HEADERS = {
    "Content-Type": "application/json",
    "X-User-Id": ADMIN_USER_ID,
    "X-Role": "ADMIN",
}

GRADES = [
    {"name": "G1", "annual_leave_limit": 12, "annual_expense_limit": "1000.00", "discount_limit_percent": "10.00"},
    {"name": "G2", "annual_leave_limit": 18, "annual_expense_limit": "5000.00", "discount_limit_percent": "20.00"},
]

# (request_type, grade name, condition)
RULES = [
    ("LEAVE", "G1", {"max_days": 2}),
    ("EXPENSE", "G1", {"max_amount": 100}),
    ("DISCOUNT", "G1", {"max_percent": 5}),
    ("LEAVE", "G2", {"max_days": 5}),
    ("EXPENSE", "G2", {"max_amount": 500}),
    ("DISCOUNT", "G2", {"max_percent": 10}),
]

HOLIDAYS = [
    {"date": "2026-01-01", "description": "New Year's Day"},
    {"date": "2026-05-01", "description": "Labour Day"},
    {"date": "2026-12-25", "description": "Christmas Day"},
]


def _next_weekday(days_ahead: int) -> date:
    day = date.today() + timedelta(days=days_ahead)
    while day.weekday() >= 5:
        day += timedelta(days=1)
    return day


async def _safe_post(
    client: httpx.AsyncClient,
    url: str,
    json: dict,
    label: str,
    headers: dict[str, str] = ADMIN_HEADERS,
) -> dict | None:
    """POST with 409-conflict tolerance so the script can be re-run."""
    resp = await client.post(url, json=json, headers=headers)
    if resp.status_code in (200, 201):
        print(f"  [OK] {label}")
        return resp.json()
    if resp.status_code == 409:
        print(f"  [SKIP] {label} (already exists)")
        return None
    print(f"  [ERROR] {label}: {resp.status_code} {resp.text[:200]}")
    return None


async def seed_grades(client: httpx.AsyncClient) -> dict[str, str]:
    """Seed grades and return a name->id mapping."""
    print("\n--- Seeding grades ---")
    for grade in GRADES:
        await _safe_post(client, f"{BASE_URL}/grades", grade, f"Grade {grade['name']}")

    resp = await client.get(f"{BASE_URL}/grades", headers=ADMIN_HEADERS)
    return {g["name"]: g["id"] for g in resp.json()["items"]}


async def seed_rules(client: httpx.AsyncClient, grade_ids: dict[str, str]) -> None:
    print("\n--- Seeding rules ---")
    for request_type, grade_name, condition in RULES:
        await _safe_post(
            client,
            f"{BASE_URL}/rules",
            {"request_type": request_type, "grade_id": grade_ids[grade_name], "condition": condition},
            f"Rule {request_type} / {grade_name} {condition}",
        )


async def seed_holidays(client: httpx.AsyncClient) -> None:
    print("\n--- Seeding holidays ---")
    for holiday in HOLIDAYS:
        await _safe_post(client, f"{BASE_URL}/holidays", holiday, f"Holiday {holiday['date']}")


async def seed_people(client: httpx.AsyncClient, grade_ids: dict[str, str]) -> dict[str, str]:
    """Register a manager and two reports; return a name->id mapping of the new ones."""
    print("\n--- Seeding employees ---")
    people: dict[str, str] = {}

    manager = await _safe_post(
        client,
        f"{BASE_URL}/employees",
        {"name": "Maya Manager", "email": "maya@example.com", "role": "MANAGER", "grade_id": grade_ids["G2"]},
        "Manager Maya",
    )
    if manager is None:
        return people
    people["maya"] = manager["id"]

    for name, email in (("Eli Employee", "eli@example.com"), ("Ava Employee", "ava@example.com")):
        employee = await _safe_post(
            client,
            f"{BASE_URL}/employees",
            {"name": name, "email": email, "grade_id": grade_ids["G1"], "manager_id": manager["id"]},
            name,
        )
        if employee is not None:
            people[email.split("@")[0]] = employee["id"]
    return people


async def seed_requests(client: httpx.AsyncClient, people: dict[str, str]) -> None:
    """Create one auto-approved leave and one expense that waits for Maya."""
    if "eli" not in people:
        print("\n--- Skipping requests (employees already seeded) ---")
        return

    print("\n--- Seeding requests ---")
    eli_headers = {"Content-Type": "application/json", "X-User-Id": people["eli"], "X-Role": "EMPLOYEE"}
    start = _next_weekday(14)

    await _safe_post(
        client,
        f"{BASE_URL}/requests/leave",
        {"from_date": start.isoformat(), "to_date": (start + timedelta(days=1)).isoformat(), "reason": "Family visit"},
        "Eli 2-day leave (AUTO_APPROVED)",
        headers=eli_headers,
    )
    pending = await _safe_post(
        client,
        f"{BASE_URL}/requests/expense",
        {"amount": "450.00", "category": "TRAVEL", "reason": "Client visit"},
        "Eli travel expense (PENDING)",
        headers=eli_headers,
    )

    if pending is not None:
        maya_headers = {"Content-Type": "application/json", "X-User-Id": people["maya"], "X-Role": "MANAGER"}
        resp = await client.post(
            f"{BASE_URL}/requests/{pending['request']['id']}/approve",
            json={"comment": "Receipts checked"},
            headers=maya_headers,
        )
        if resp.status_code == 200:
            print("  [OK] Maya approved Eli's expense")
        else:
            print(f"  [ERROR] Approving Eli's expense: {resp.status_code} {resp.text[:200]}")


async def main() -> None:
    print("=" * 60)
    print("  Approval Engine: Development Seed Script")
    print("=" * 60)

    async with httpx.AsyncClient(timeout=30.0) as client:
        try:
            resp = await client.get(f"{BASE_URL}/health")
            if resp.status_code != 200:
                print(f"API health check failed: {resp.status_code}")
                sys.exit(1)
            print("\n[OK] API is healthy")
        except httpx.ConnectError:
            print("ERROR: Cannot connect to API at", BASE_URL)
            sys.exit(1)

        grade_ids = await seed_grades(client)
        await seed_rules(client, grade_ids)
        await seed_holidays(client)
        people = await seed_people(client, grade_ids)
        await seed_requests(client, people)

    print("\n" + "=" * 60)
    print("  Seeding complete!")
    print("=" * 60)


if __name__ == "__main__":
    asyncio.run(main())
