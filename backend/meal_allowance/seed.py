"""Seed script for development data.

Run with:  python -m meal_allowance.seed
Posts a small roster and a month of leave records to a running API.
"""

from __future__ import annotations

import asyncio
import sys
from datetime import date

import httpx

BASE_URL = "http://localhost:8000"

HEADERS = {
    "Content-Type": "application/json",
    "X-User-Id": "seed",
    "X-Role": "admin",
}

SEED_YEAR = 2024
SEED_MONTH = 1

EMPLOYEES = [
    {"name": "Kim Minji", "team": "Medical Office", "join_date": "2023-01-01"},
    {"name": "Lee Jiwoo", "team": "Counseling", "join_date": "2022-03-15"},
    {"name": "Park Seoyeon", "team": "Coordination", "join_date": "2024-01-15"},
    {"name": "Choi Yuna", "team": "Nursing", "join_date": "2021-07-01", "leave_date": "2024-01-20"},
    {"name": "Jung Hana", "team": "Skin Care", "join_date": "2023-09-01"},
    {"name": "Kang Doyun", "team": "Management Support", "join_date": "2020-05-04"},
]

# (employee name, day of SEED_MONTH, leave type)
LEAVE = [
    ("Kim Minji", 15, "afternoon half-day"),
    ("Kim Minji", 16, "annual leave"),
    ("Lee Jiwoo", 15, "morning half-day"),
    ("Lee Jiwoo", 20, "day off"),
    ("Jung Hana", 10, "sick leave"),
    ("Kang Doyun", 22, "afternoon annual half-day"),
]


async def _safe_post(client: httpx.AsyncClient, url: str, json: dict, label: str) -> dict | None:
    """POST and report the outcome."""
    resp = await client.post(url, json=json, headers=HEADERS)
    if resp.status_code in (200, 201):
        print(f"  [OK] {label}")
        return resp.json()
    if resp.status_code == 409:
        print(f"  [SKIP] {label} (already exists)")
        return None
    print(f"  [ERROR] {label}: {resp.status_code} {resp.text[:200]}")
    return None


async def _safe_put(client: httpx.AsyncClient, url: str, json: dict, label: str) -> dict | None:
    """PUT (upsert), naturally idempotent."""
    resp = await client.put(url, json=json, headers=HEADERS)
    if resp.status_code in (200, 201):
        print(f"  [OK] {label}")
        return resp.json()
    if resp.status_code == 423:
        print(f"  [SKIP] {label} (month locked)")
        return None
    print(f"  [ERROR] {label}: {resp.status_code} {resp.text[:200]}")
    return None


async def seed_employees(client: httpx.AsyncClient) -> dict[str, str]:
    """Create roster entries that do not exist yet and return a name->id mapping."""
    print("\n--- Seeding employees ---")
    resp = await client.get(f"{BASE_URL}/employees", headers=HEADERS, params={"refresh": True})
    resp.raise_for_status()
    employee_ids = {item["name"]: item["id"] for item in resp.json()["items"]}

    for emp in EMPLOYEES:
        if emp["name"] in employee_ids:
            print(f"  [SKIP] {emp['name']} (already exists)")
            continue
        result = await _safe_post(client, f"{BASE_URL}/employees", emp, f"{emp['name']} ({emp['team']})")
        if result:
            employee_ids[emp["name"]] = result["id"]

    return employee_ids


async def seed_leave(client: httpx.AsyncClient, employee_ids: dict[str, str]) -> None:
    """Register leave records for the seed month."""
    print("\n--- Seeding leave records ---")
    for name, day, leave_type in LEAVE:
        employee_id = employee_ids.get(name)
        if not employee_id:
            print(f"  [SKIP] {name} not found")
            continue
        leave_date = date(SEED_YEAR, SEED_MONTH, day).isoformat()
        await _safe_put(
            client,
            f"{BASE_URL}/leave-records",
            {"employee_id": employee_id, "date": leave_date, "leave_type": leave_type},
            f"{name} {leave_date} {leave_type}",
        )


async def print_summary(client: httpx.AsyncClient) -> None:
    """Print the seed month's team totals."""
    resp = await client.get(
        f"{BASE_URL}/calculations/{SEED_YEAR}/{SEED_MONTH}",
        headers=HEADERS,
        params={"refresh": True},
    )
    if resp.status_code != 200:
        print(f"  [ERROR] calculation: {resp.status_code} {resp.text[:200]}")
        return
    data = resp.json()
    print(f"\n--- Meal allowance {SEED_YEAR}-{SEED_MONTH:02d} ---")
    for team in data["by_team"]:
        print(f"  {team['team']:<20} {team['employee_count']:>2} employees  {team['total_allowance']:>9,}")
    print(f"  {'Total':<20} {data['employee_count']:>2} employees  {data['total_allowance']:>9,}")


async def main() -> None:
    print("=" * 60)
    print("  Meal Allowance - Development Seed Script")
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
            print("Make sure the API is running (uvicorn meal_allowance.main:app)")
            sys.exit(1)

        employee_ids = await seed_employees(client)
        await seed_leave(client, employee_ids)
        await print_summary(client)

    print("\n" + "=" * 60)
    print("  Seeding complete!")
    print("=" * 60)


if __name__ == "__main__":
    asyncio.run(main())
