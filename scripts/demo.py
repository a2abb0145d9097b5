from __future__ import annotations

import os
import time

import requests
from rich import print

BASE = os.getenv("API_BASE_URL", "http://127.0.0.1:8000")

def _headers(jwt: str | None) -> dict[str, str]:
    headers = {"content-type": "application/json"}
    if jwt:
        headers["authorization"] = f"bearer {jwt}"
    return headers

def post(path: str, *, jwt: str | None = None, json: dict | None = None) -> requests.Response:
    return requests.post(f"{BASE}{path}", headers=_headers(jwt), json=json, timeout=10)

def put(path: str, *, jwt: str | None = None, json: dict | None = None) -> requests.Response:
    return requests.put(f"{BASE}{path}", headers=_headers(jwt), json=json, timeout=10)

def get(path: str, *, jwt: str | None = None) -> requests.Response:
    return requests.get(f"{BASE}{path}", headers=_headers(jwt), timeout=10)

def delete(path: str, *, jwt: str | None = None) -> requests.Response:
    return requests.delete(f"{BASE}{path}", headers=_headers(jwt), timeout=10)

def login(email: str, name: str) -> str:
    r = post("/auth/request-link", json={"email": email, "name": name})
    r.raise_for_status()
    token = r.json()["token"]

    r2 = post("/auth/redeem", json={"token": token})
    r2.raise_for_status()
    return r2.json()["access_token"]

def wait_ready(timeout_s: float = 30.0) -> None:
    deadline = time.time() + timeout_s
    last_err: Exception | None = None

    while time.time() < deadline:
        try:
            r = get("/ready")
            if r.status_code == 200:
                return
        except requests.RequestException as e:
            last_err = e
        time.sleep(0.5)

    if last_err:
        raise RuntimeError(f"api not ready after {timeout_s}s (last error: {last_err})")
    raise RuntimeError(f"api not ready after {timeout_s}s")

def main() -> None:
    print("[bold]demo: auth -> create task -> assign -> list -> update -> delete[/bold]")
    wait_ready()
    print("[green]ready ok[/green]")

    owner_jwt = login("alice@example.com", "Alice")
    member_jwt = login("bob@example.com", "Bob")
    print("owner + member authed")

    r = get("/users", jwt=owner_jwt)
    r.raise_for_status()
    bob = next(u for u in r.json() if u["name"] == "Bob")

    r = post(
        "/tasks",
        jwt=owner_jwt,
        json={"title": "Fix bug", "description": "needs fixing", "tag": "bug", "users": [bob["id"]]},
    )
    r.raise_for_status()
    task_id = r.json()["id"]
    print("created task:", task_id)

    r = get("/tasks", jwt=member_jwt)
    r.raise_for_status()
    print("member sees:", [(t["title"], t["assignedMembers"]) for t in r.json()])

    r = put(f"/tasks/{task_id}", jwt=member_jwt, json={"status": "completed"})
    print("member update (expect 401):", r.status_code)

    r = put(f"/tasks/{task_id}", jwt=owner_jwt, json={"status": "completed"})
    r.raise_for_status()
    print("owner update:", r.json()["task"]["status"])

    r = delete(f"/tasks/{task_id}", jwt=owner_jwt)
    print("owner delete (expect 401):", r.status_code)

    r = delete(f"/tasks/{task_id}", jwt=member_jwt)
    r.raise_for_status()
    print("member delete:", r.json()["success"])
    print("[bold green]demo complete[/bold green]")

if __name__ == "__main__":
    main()
