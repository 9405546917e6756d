import os

# Marker written into the "src" field of every line the middleware emits
SOURCE_TAG = os.getenv("RESPONSELOG_SOURCE_TAG", "rl")

# Label used when a record carries no HTTP method
DEFAULT_METHOD = "HTTP"

# Input read when no source is given
DEFAULT_INPUT = "logs.json"

DEFAULT_CHUNK_SIZE = int(os.getenv("RESPONSELOG_CHUNK_SIZE", "8192"))

# Placeholders substituted for variable path segments
INTEGER_PLACEHOLDER = "{integer}"
UUID_PLACEHOLDER = "{uuid}"

REGEX_PATTERNS = {
    "integer": r"^\d+$",
    "uuid": r"^[a-fA-F0-9]{8}-[a-fA-F0-9]{4}-[a-fA-F0-9]{4}-[a-fA-F0-9]{4}-[a-fA-F0-9]{12}$",
}

# Summary columns, in output order
CSV_HEADER = ["URL", "Count", "Sum", "Avg"]

OUTPUT_FORMATS = ["csv", "table", "json"]
SORT_KEYS = ["url", "count", "sum", "avg"]

HTTP_STATUS_CLASSES = {
    "1xx": "Informational",
    "2xx": "Success",
    "3xx": "Redirection",
    "4xx": "Client Error",
    "5xx": "Server Error",
}

# Default configuration
DEFAULT_CONFIG = {
    "parsing": {
        "source_tag": SOURCE_TAG,
        "ignore_blank_lines": False,
        "chunk_size": DEFAULT_CHUNK_SIZE,
    },
    "aggregation": {
        "default_method": DEFAULT_METHOD,
    },
    "output": {
        "format": "csv",
    },
    "middleware": {
        "skip_paths": ["/health"],
        "headers": [],
    },
}


def _parse_bool(value: str) -> bool:
    lowered = value.strip().lower()
    if lowered in ("true", "yes", "1", "on"):
        return True
    if lowered in ("false", "no", "0", "off"):
        return False
    raise ValueError(f"Not a boolean: {value}")


def _parse_list(value: str) -> list:
    return [item.strip() for item in value.split(",") if item.strip()]


# Environment variable mapping
ENV_VARS = {
    "RESPONSELOG_SOURCE_TAG": ("parsing.source_tag", str),
    "RESPONSELOG_IGNORE_BLANK_LINES": ("parsing.ignore_blank_lines", _parse_bool),
    "RESPONSELOG_CHUNK_SIZE": ("parsing.chunk_size", int),
    "RESPONSELOG_DEFAULT_METHOD": ("aggregation.default_method", str),
    "RESPONSELOG_OUTPUT_FORMAT": ("output.format", str),
    "RESPONSELOG_SKIP_PATHS": ("middleware.skip_paths", _parse_list),
    "RESPONSELOG_HEADERS": ("middleware.headers", _parse_list),
}
