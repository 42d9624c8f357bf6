"""Centralized defaults for mocks and reports."""

# Project directory searched for config.yaml
DEFAULT_PROJECT_DIR = ".testsmith"
CONFIG_FILENAME = "config.yaml"

# Reports
DEFAULT_OUTPUT_DIR = "reports"
DEFAULT_REPORT_FORMAT = "txt"
DEFAULT_REPORT_TITLE = "Test Report"
DEFAULT_CATEGORY_DELIMITER = "_"
UNKNOWN_CATEGORY = "Unknown"

# Mock user returned by the default policy for fetch_user-style methods
MOCK_USER = {
    "id": "mock_user",
    "name": "Mock User",
    "email": "mock@example.com",
}

# Type names accepted in template YAML files
TEMPLATE_TYPE_NAMES = {
    "Any": object,
    "None": type(None),
    "Void": type(None),
    "bool": bool,
    "bytes": bytes,
    "Data": bytes,
    "dict": dict,
    "float": float,
    "int": int,
    "list": list,
    "str": str,
    "User": dict,
}

# Built-in capability templates: capability -> {method: return type name}
DEFAULT_TEMPLATES = {
    "UserRepository": {
        "fetch_user": "User",
        "fetch_users": "list",
        "save_user": "bool",
        "delete_user": "bool",
        "update_user": "bool",
    },
    "APIService": {
        "get": "Data",
        "post": "Data",
        "put": "Data",
        "delete": "bool",
    },
    "DatabaseService": {
        "query": "Any",
        "execute": "Void",
        "transaction": "Void",
    },
}
