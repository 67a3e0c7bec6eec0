#!/usr/bin/env python3
"""
Taskboard Quickstart — full task lifecycle in one script.

Register → create tasks → start / complete → filter → stats → clean up.
Run with: python examples/quickstart.py

Requires: pip install httpx
Backend must be running: taskboard serve
"""

from datetime import datetime, timedelta, timezone

from _common import create_client, unwrap


def main():
    client = create_client()

    # ── Create tasks ──────────────────────────────────────────────
    print("\n1. Creating tasks...")
    due = (datetime.now(timezone.utc) + timedelta(days=3)).isoformat()
    specs = [
        {"title": "Write release notes", "priority": "high", "category": "Work", "dueDate": due},
        {"title": "Review open PRs", "category": "Work", "tags": ["review"]},
        {"title": "Buy groceries", "priority": "low", "category": "Home", "tags": ["errand"]},
    ]
    tasks = []
    for spec in specs:
        task = unwrap(client.post("/tasks", json=spec), 201)["task"]
        tasks.append(task)
        print(f"   [{task['priority']:>6}] {task['title']} ({task['id'][:8]}...)")

    # ── Status transitions ────────────────────────────────────────
    print("\n2. Working on tasks...")
    first, second, _ = tasks
    task = unwrap(client.put(f"/tasks/{first['id']}", json={"status": "in-progress"}))["task"]
    print(f"   {task['title']}: {task['status']}")
    task = unwrap(client.put(f"/tasks/{first['id']}", json={"status": "completed"}))["task"]
    print(f"   {task['title']}: {task['status']} at {task['completedAt']}")

    # ── Filtering ─────────────────────────────────────────────────
    print("\n3. Filtering...")
    work = unwrap(client.get("/tasks", params={"category": "work"}))
    print(f"   category=work → {[t['title'] for t in work['tasks']]}")
    found = unwrap(client.get("/tasks", params={"search": "errand"}))
    print(f"   search=errand → {[t['title'] for t in found['tasks']]}")

    # ── Stats ─────────────────────────────────────────────────────
    print("\n4. Stats...")
    stats = unwrap(client.get("/tasks/stats/summary"))["stats"]
    print(f"   {stats['completed']}/{stats['total']} done ({stats['completionRate']}%), "
          f"{stats['inProgress']} in progress, {stats['overdue']} overdue")

    # ── Clean up ──────────────────────────────────────────────────
    print("\n5. Cleaning up...")
    unwrap(client.delete(f"/tasks/{second['id']}"))
    remaining = unwrap(client.get("/tasks"))["pagination"]["totalTasks"]
    print(f"   Deleted one task, {remaining} left")

    unwrap(client.delete("/users/profile"))
    print("   Demo account deactivated")

    print("\n✓ Quickstart complete!")


if __name__ == "__main__":
    main()
