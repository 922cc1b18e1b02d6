"""File-based JSON storage.

Data layout:
  data/
    config.json            App settings (LLM connection, detection settings)
    campaigns/
      <id>.json            Campaign metadata (name, description, created_at)
      <id>/
        memory.json        Memory entries: characters, places, items, factions...

Campaign ids are slugs of the campaign name ("The Sunken Coast" →
"the-sunken-coast", with -2, -3... on collision).

Memory lookups for entity detection go through MemoryStore, which matches
titles exactly but case-insensitively and skips archived entries.

Config: get_config() returns defaults merged with stored values.
update_config() merges each settings group key-by-key.
"""

# Re-export all public symbols so `from arcane_node import storage` keeps working.

from .core import (  # noqa: F401
    campaign_path,
    campaigns_dir,
    data_dir,
    init_storage,
    slugify,
)

from .campaigns import (  # noqa: F401
    create_campaign,
    delete_campaign,
    get_campaign,
    list_campaigns,
)

from .memory import (  # noqa: F401
    MemoryStore,
    delete_memory_entry,
    find_memory_by_title,
    get_memory,
    get_memory_entry,
    save_memory_entry,
    search_memory,
    update_memory_entry,
)

from .config import (  # noqa: F401
    get_config,
    update_config,
)
