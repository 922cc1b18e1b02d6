"""Campaign CRUD."""

import json
import shutil
from datetime import datetime, timezone
from typing import Any

from .core import campaign_path, campaigns_dir, slugify


def list_campaigns() -> list[dict[str, Any]]:
    results = []
    for path in sorted(campaigns_dir().glob("*.json")):
        results.append(json.loads(path.read_text()))
    return results


def get_campaign(campaign_id: str) -> dict[str, Any] | None:
    try:
        path = campaign_path(campaign_id)
    except ValueError:
        return None
    if not path.is_file():
        return None
    return json.loads(path.read_text())


def create_campaign(name: str, description: str = "") -> dict[str, Any]:
    """Create a campaign with a unique slug id derived from its name."""
    base_id = slugify(name)
    campaign_id = base_id
    counter = 2
    while campaign_path(campaign_id).exists():
        campaign_id = f"{base_id}-{counter}"
        counter += 1

    campaign = {
        "id": campaign_id,
        "name": name,
        "description": description,
        "created_at": datetime.now(timezone.utc).isoformat(),
    }
    campaign_path(campaign_id).write_text(json.dumps(campaign, indent=2))
    (campaigns_dir() / campaign_id).mkdir(exist_ok=True)
    (campaigns_dir() / campaign_id / "memory.json").write_text(json.dumps([], indent=2))
    return campaign


def delete_campaign(campaign_id: str) -> bool:
    """Delete a campaign and all of its memory."""
    if get_campaign(campaign_id) is None:
        return False
    campaign_path(campaign_id).unlink()
    child_dir = campaigns_dir() / campaign_id
    if child_dir.is_dir():
        shutil.rmtree(child_dir)
    return True
