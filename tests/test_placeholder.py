import json
from pathlib import Path


def test_fixtures_are_valid_json():
    """Ensure we can load our sample data."""
    fixtures_dir = Path(__file__).parent / "fixtures"

    # First page of my tasks carries a cursor
    with open(fixtures_dir / "tasks_page1.json") as f:
        data = json.load(f)
        assert len(data["data"]) == 3
        assert data["next_page"]["path"].startswith("/tasks?")

    # Last page has an empty path
    with open(fixtures_dir / "tasks_page2.json") as f:
        data = json.load(f)
        assert data["next_page"]["path"] == ""

    with open(fixtures_dir / "workspaces.json") as f:
        data = json.load(f)
        assert data["next_page"] is None
