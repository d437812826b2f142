#!/usr/bin/env python3
"""
Seed script: fills a running board service with a demo game-dev board.

    uvicorn taskboard.main:app
    python scripts/seed_data.py
"""

import os

import requests

API_URL = os.environ.get("TASKBOARD_API_URL", "http://localhost:8000/api/v1")
API_KEY = os.environ.get("API_KEY", "dev-api-key-change-in-production")
HEADERS = {"X-API-Key": API_KEY, "Content-Type": "application/json"}

COLUMNS = [
    {"name": "Backlog", "color": "oklch(0.50 0.18 270)"},
    {"name": "To Do", "color": "oklch(0.45 0.15 285)"},
    {"name": "In Progress", "color": "oklch(0.75 0.15 195)"},
    {"name": "Review", "color": "oklch(0.70 0.15 50)"},
    {"name": "Done", "color": "oklch(0.65 0.18 145)"},
]

# Задачи по названию колонки
TASKS = {
    "Backlog": [
        {"title": "Boss fight concept", "points": 8, "tags": ["Design"], "priority": "low"},
        {"title": "Localization pipeline", "points": 5, "tags": ["Programming"], "priority": "low"},
    ],
    "To Do": [
        {
            "title": "Player jump animation",
            "description": "Squash and stretch on landing",
            "points": 3,
            "tags": ["Art"],
            "priority": "high",
        },
        {"title": "Footstep sounds", "points": 2, "tags": ["Sound"], "priority": "medium"},
        {"title": "Pause menu", "points": 3, "tags": ["Programming", "Design"], "priority": "medium"},
    ],
    "In Progress": [
        {"title": "Save system", "points": 5, "tags": ["Programming", "Feature"], "priority": "critical"},
    ],
    "Review": [
        {"title": "Fix camera clipping", "points": 2, "tags": ["Bug"], "priority": "high"},
    ],
    "Done": [
        {"title": "Project setup", "points": 1, "tags": ["Documentation"], "priority": "medium"},
    ],
}


def create_column(column_data):
    """Create a column via API."""
    response = requests.post(f"{API_URL}/columns", headers=HEADERS, json=column_data)
    if response.status_code == 201:
        return response.json()
    print(f"Error creating column {column_data['name']}: {response.text}")
    return None


def create_task(task_data, column_id):
    """Create a task via API."""
    payload = {
        "columnId": column_id,
        "title": task_data["title"],
        "description": task_data.get("description", ""),
        "points": task_data.get("points", 0),
        "tags": task_data.get("tags", []),
        "priority": task_data.get("priority", "medium"),
    }
    response = requests.post(f"{API_URL}/tasks", headers=HEADERS, json=payload)
    if response.status_code == 201:
        return response.json()
    print(f"Error creating task {task_data['title']}: {response.text}")
    return None


def main():
    print("=" * 60)
    print(f"Seeding board at {API_URL}")
    print("=" * 60)

    column_ids = {}
    print("\nCreating columns...")
    for column_data in COLUMNS:
        column = create_column(column_data)
        if column:
            column_ids[column_data["name"]] = column["id"]
            print(f"  + {column_data['name']} (order={column['order']})")

    print("\nCreating tasks...")
    total_tasks = 0
    for column_name, tasks in TASKS.items():
        if column_name not in column_ids:
            print(f"  ! Column {column_name} not created, skipping its tasks")
            continue

        print(f"\n  {column_name}:")
        for task_data in tasks:
            task = create_task(task_data, column_ids[column_name])
            if task:
                total_tasks += 1
                print(f"    + {task_data['title']} ({task_data.get('points', 0)} pts)")

    print("\n" + "=" * 60)
    print(f"Done! Created {len(column_ids)} columns and {total_tasks} tasks")
    print("=" * 60)


if __name__ == "__main__":
    main()
