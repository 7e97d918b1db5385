from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment."""

    model_config = SettingsConfigDict(env_file=".env")

    app_name: str = "Fetchr"
    debug: bool = False

    database_url: str = "sqlite+aiosqlite:///./commanders.sqlite3"

    commanders_json_path: str = "data/commanders.json"

    scryfall_search_url: str = (
        "https://api.scryfall.com/cards/search"
        "?order=edhrec&q=(game%3Apaper)+legal%3Acommander+is%3Acommander"
    )

    # "random" drops a random batch when full, "lru" drops the least recently used entry
    search_cache_eviction: str = "random"


settings = Settings()


# =============================================================================
# SEARCH LIMITS
# =============================================================================

# Cached fuzzy queries kept per engine
SEARCH_CACHE_SIZE = 100

# Entries dropped at once by random eviction
SEARCH_CACHE_EVICTION_BATCH = 10

# Edit distance at which a fuzzy search still counts a name as a match
MAX_FUZZY_DISTANCE = 2


# =============================================================================
# PICK SESSIONS
# =============================================================================

# Open pick sessions kept by the API; opening one more drops the oldest
MAX_OPEN_PICKS = 500
