# config.example.py

"""
Documentation-only module (safe to commit).

The real configuration is loaded from environment variables (optionally via a local .env file).
This file exists to make the repo self-documenting even without opening .env.example.
"""

ENV_VARS = {
    # App / logging
    "CHORES_APP_NAME": "App display name (default: chores).",
    "CHORES_LOG_LEVEL": "Console logging level (default: INFO).",
    # Storage (gitignored)
    "CHORES_DATA_DIR": "Local data directory (default: .local/chores).",
    "CHORES_STORAGE": "Snapshot backend: sqlite | json (default: sqlite).",
    "CHORES_DB_PATH": "SQLite path (default: <data_dir>/chores.sqlite3).",
    "CHORES_JSON_PATH": "JSON snapshot path (default: <data_dir>/chores.json).",
    "CHORES_STORAGE_TIMEOUT": "Seconds to wait on a locked database (default: 5.0).",
    # Household seeding
    "CHORES_DEFAULT_MEMBERS": (
        "Comma separated Name:points:avatar entries added when the ledger is empty "
        "(default: Mom:150:👩,Dad:100:👨,Junior:50:👦)."
    ),
    "CHORES_SEED_DEMO_DATA": "Add the sample chores on first run (true/false, default: false).",
}
