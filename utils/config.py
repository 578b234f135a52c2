"""Configuration management utilities for the program report navigator.

Provides reusable classes for:
- Loading configuration from JSON
- Environment-driven settings for the upstream record API
- The letter-range bucket table and static navbar entries
- Application (web server, logging) settings
"""

from pathlib import Path
from typing import Dict, List, Optional, Any, Tuple
import json
import os as _os


# ── Menu bucket defaults ─────────────────────────────────────────────────────
# Each pair is (low, high), inclusive, compared on the first character of the
# customer name.  Order here is the order the dropdowns appear in the navbar.

DEFAULT_BUCKETS: List[Tuple[str, str]] = [
    ("0", "9"),
    ("A", "D"),
    ("E", "H"),
    ("I", "L"),
    ("M", "P"),
    ("Q", "T"),
    ("U", "Z"),
]

# Field ids in the Programs table: record id, program name, customer code,
# status, year.
DEFAULT_PROGRAM_FIELDS: Dict[str, int] = {
    "record_id": 3,
    "name": 6,
    "customer_code": 11,
    "status": 17,
    "year": 111,
}

# Field ids in the Customers table.
DEFAULT_CUSTOMER_FIELDS: Dict[str, int] = {
    "name": 6,
    "code": 9,
}


def _env_bool(name: str, default: bool = False) -> bool:
    raw = _os.getenv(name)
    if raw is None:
        return default
    return raw.strip().lower() in ("1", "true", "yes", "on")


def parse_buckets(raw: Any) -> List[Tuple[str, str]]:
    """Normalize a bucket table into a list of (low, high) pairs.

    Accepts a list of two-item sequences (``[["A", "D"], ...]``), a mapping of
    ordering key to pair (``{"1": ["0", "9"], ...}``, ordered by key insertion),
    or a comma-separated string (``"0-9,A-D"``).

    Args:
        raw: Bucket table in any of the accepted forms

    Returns:
        List of (low, high) single-character pairs

    Raises:
        ValueError: If a pair is not two single characters or low > high
    """
    if isinstance(raw, str):
        pairs = []
        for chunk in raw.split(","):
            chunk = chunk.strip()
            if not chunk:
                continue
            if len(chunk) != 3 or chunk[1] != "-":
                raise ValueError(f"Invalid bucket range {chunk!r}; expected e.g. 'A-D'")
            pairs.append((chunk[0], chunk[2]))
        raw = pairs
    elif isinstance(raw, dict):
        raw = list(raw.values())

    buckets: List[Tuple[str, str]] = []
    for pair in raw:
        if len(pair) != 2:
            raise ValueError(f"Bucket range must have two bounds, got {pair!r}")
        low, high = str(pair[0]), str(pair[1])
        if len(low) != 1 or len(high) != 1:
            raise ValueError(f"Bucket bounds must be single characters, got {pair!r}")
        if low > high:
            raise ValueError(f"Bucket range {low}-{high} is inverted")
        buckets.append((low, high))
    return buckets


def _static_entry(raw: Any, where: str) -> Dict[str, Any]:
    if not isinstance(raw, dict):
        raise ValueError(f"{where} must be an object, got {raw!r}")
    label = raw.get("label")
    if not isinstance(label, str) or not label:
        raise ValueError(f"{where} needs a non-empty 'label' string, got {raw!r}")
    href = raw.get("href")
    if href is not None and not isinstance(href, str):
        raise ValueError(f"{where} 'href' must be a string, got {href!r}")
    return {"label": label, "href": href}


def parse_static_items(raw: Any) -> List[Dict[str, Any]]:
    """Validate the static navbar entries.

    Each entry is ``{"label": str, "href": str?, "children": [...]}``; each
    child is ``{"label": str, "href": str?}``.

    Args:
        raw: List of entries as loaded from JSON (None means no entries)

    Returns:
        Normalized list of entries

    Raises:
        ValueError: If an entry or child is not an object or lacks a label
    """
    if raw is None:
        return []
    if not isinstance(raw, list):
        raise ValueError(f"static_items must be a list, got {raw!r}")

    items: List[Dict[str, Any]] = []
    for i, entry in enumerate(raw):
        item = _static_entry(entry, f"static_items[{i}]")
        children = entry.get("children") or []
        if not isinstance(children, list):
            raise ValueError(f"static_items[{i}] 'children' must be a list")
        item["children"] = [
            _static_entry(child, f"static_items[{i}].children[{j}]")
            for j, child in enumerate(children)
        ]
        items.append(item)
    return items


class Config:
    """Base configuration class for organizing application settings."""

    def __init__(self):
        """Initialize configuration with default values."""
        pass

    def to_dict(self) -> Dict[str, Any]:
        """Convert config to dictionary.

        Returns:
            Dictionary of all config attributes
        """
        return {k: v for k, v in self.__dict__.items() if not k.startswith("_")}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Config":
        """Create config from dictionary.

        Args:
            data: Configuration dictionary

        Returns:
            Config instance with values from dictionary
        """
        config = cls()
        for key, value in data.items():
            setattr(config, key, value)
        return config

    @classmethod
    def load_json(cls, path: Path) -> "Config":
        """Load configuration from JSON file.

        Args:
            path: Path to configuration file

        Returns:
            Config instance loaded from file

        Raises:
            FileNotFoundError: If file doesn't exist
            json.JSONDecodeError: If file is not valid JSON
        """
        with open(path, "r") as f:
            data = json.load(f)
        return cls.from_dict(data)


class QuickbaseConfig(Config):
    """Connection settings for the upstream record API.

    Environment variables:
        QB_API_URL: API root (default: https://api.quickbase.com/v1)
        QB_REALM: Realm hostname sent as QB-Realm-Hostname
        QB_USER_TOKEN: User token sent in the Authorization header
        QB_REPORTS_TABLE_ID: Table whose reports are listed
        QB_PROGRAMS_TABLE_ID: Programs table
        QB_CUSTOMERS_TABLE_ID: Customers table
        QB_REPORT_BASE_URL: Prefix for report hyperlinks (table id and qid are appended)
        QB_TIMEOUT_SECONDS: Per-request timeout (default: 30)
    """

    def __init__(self) -> None:
        super().__init__()
        self.api_url = _os.getenv("QB_API_URL", "https://api.quickbase.com/v1").rstrip("/")
        self.realm = _os.getenv("QB_REALM", "")
        self._user_token = _os.getenv("QB_USER_TOKEN", "")
        self.reports_table_id = _os.getenv("QB_REPORTS_TABLE_ID", "")
        self.programs_table_id = _os.getenv("QB_PROGRAMS_TABLE_ID", "")
        self.customers_table_id = _os.getenv("QB_CUSTOMERS_TABLE_ID", "")
        self.report_base_url = _os.getenv("QB_REPORT_BASE_URL", "")
        self.timeout_seconds = float(_os.getenv("QB_TIMEOUT_SECONDS", "30"))
        self.program_fields: Dict[str, int] = dict(DEFAULT_PROGRAM_FIELDS)
        self.customer_fields: Dict[str, int] = dict(DEFAULT_CUSTOMER_FIELDS)

    def headers(self) -> Dict[str, str]:
        """Build the request headers the upstream API expects.

        The token is opaque here; it is read from the environment by the
        caller and never written out by ``to_dict``.
        """
        headers = {"Content-Type": "application/json"}
        if self.realm:
            headers["QB-Realm-Hostname"] = self.realm
        if self._user_token:
            headers["Authorization"] = f"QB-USER-TOKEN {self._user_token}"
        return headers


class NavConfig(Config):
    """Menu layout settings.

    Loaded from the JSON file named by APP_NAV_CONFIG when set, otherwise
    from the defaults and these environment variables:

        APP_NAV_BUCKETS: Comma-separated ranges, e.g. "0-9,A-M,N-Z"
        APP_MASK_NAMES: Mask program and customer names in the rendered menu
        APP_DEDUPE_RECORDS: Drop structurally identical fetched records
        APP_FETCH_CONCURRENTLY: Fetch the three record sets in parallel
    """

    def __init__(self) -> None:
        super().__init__()
        raw_buckets = _os.getenv("APP_NAV_BUCKETS")
        self.buckets: List[Tuple[str, str]] = (
            parse_buckets(raw_buckets) if raw_buckets else list(DEFAULT_BUCKETS)
        )
        # Extra navbar entries rendered after the program dropdowns:
        # [{"label": "...", "href": "...", "children": [{"label", "href"}]}]
        self.static_items: List[Dict[str, Any]] = []
        self.mask_names = _env_bool("APP_MASK_NAMES")
        self.dedupe_records = _env_bool("APP_DEDUPE_RECORDS")
        self.fetch_concurrently = _env_bool("APP_FETCH_CONCURRENTLY")

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "NavConfig":
        config = super().from_dict(data)
        config.buckets = parse_buckets(config.buckets)
        config.static_items = parse_static_items(config.static_items)
        return config

    @classmethod
    def from_env(cls) -> "NavConfig":
        """Create a NavConfig from APP_NAV_CONFIG (JSON) or the environment."""
        path = _os.getenv("APP_NAV_CONFIG")
        if path:
            return cls.load_json(Path(path))
        return cls()


class AppConfig(Config):
    """Application-level configuration loaded from environment variables.

    All env vars have sensible defaults so the web page starts without any
    configuration (it will fail upstream calls until QB_* values are set).

    Environment variables:
        APP_PORT: Server port (default: 8000)
        APP_HOST: Server bind address (default: 127.0.0.1)
        APP_LOG_FORMAT: Logging format — "text" or "json" (default: text)
        APP_LOG_LEVEL: Root log level (default: INFO)
        APP_CORS_ORIGINS: Comma-separated allowed origins (default: *)
    """

    def __init__(self) -> None:
        super().__init__()
        self.api_port = int(_os.getenv("APP_PORT", "8000"))
        self.api_host = _os.getenv("APP_HOST", "127.0.0.1")
        self.log_format = _os.getenv("APP_LOG_FORMAT", "text")
        self.log_level = _os.getenv("APP_LOG_LEVEL", "INFO").upper()
        raw_origins = _os.getenv("APP_CORS_ORIGINS", "*")
        self.cors_origins: list[str] = (
            ["*"] if raw_origins == "*"
            else [o.strip() for o in raw_origins.split(",") if o.strip()]
        )
        self.quickbase: Optional[QuickbaseConfig] = None
        self.nav: Optional[NavConfig] = None

    @classmethod
    def from_env(cls) -> "AppConfig":
        """Create an AppConfig instance populated from environment variables."""
        cfg = cls()
        cfg.quickbase = QuickbaseConfig()
        cfg.nav = NavConfig.from_env()
        return cfg
