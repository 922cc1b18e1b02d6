"""Storage initialization, path helpers, and slug utilities."""

import re
import unicodedata
from pathlib import Path

_data_dir: Path | None = None


def slugify(title: str) -> str:
    """Convert a title to a filesystem-safe slug.

    "The Sunken Coast" → "the-sunken-coast"
    """
    text = unicodedata.normalize("NFKD", title)
    text = text.encode("ascii", "ignore").decode("ascii")
    text = text.lower()
    text = re.sub(r"['\"]", "", text)  # strip apostrophes/quotes before hyphenation
    text = re.sub(r"[^a-z0-9]+", "-", text)
    text = text.strip("-")
    return text or "untitled"


def init_storage(data_dir: Path) -> None:
    global _data_dir
    _data_dir = data_dir
    _data_dir.mkdir(parents=True, exist_ok=True)
    campaigns_dir().mkdir(exist_ok=True)


def data_dir() -> Path:
    assert _data_dir is not None, "Call init_storage() before using storage"
    return _data_dir


def campaigns_dir() -> Path:
    return data_dir() / "campaigns"


def campaign_path(campaign_id: str) -> Path:
    """Metadata file for a campaign. Rejects ids that could escape the data dir."""
    if not campaign_id or slugify(campaign_id) != campaign_id:
        raise ValueError(f"Invalid campaign id: {campaign_id!r}")
    return campaigns_dir() / f"{campaign_id}.json"
