# config.example.py

"""
Documentation-only module (safe to commit).

The real configuration is loaded from environment variables (optionally via a local .env file).
Do NOT commit real secrets or service-account keys. Use:
- .env (local, gitignored)
- GOOGLE_APPLICATION_CREDENTIALS pointing at a key file outside the repo

This file exists to make the repo self-documenting even without opening .env.example.
"""

ENV_VARS = {
    # App / logging
    "MISSION_APP_NAME": "App display name (default: Mission Control).",
    "MISSION_LOG_LEVEL": "Console logging level (default: INFO). The log file always gets DEBUG.",
    "MISSION_DATA_DIR": "Local data directory for logs and the local store (default: .local/mission_control).",
    # Task store
    "MISSION_STORE_BACKEND": "firestore (default) or local. Firestore falls back to local if no credentials.",
    "MISSION_TASKS_COLLECTION": "Firestore collection holding the task documents (default: tasks).",
    "MISSION_LOCAL_STORE_PATH": "JSON file for the local store (default: <data_dir>/tasks.json).",
    # Firestore
    "MISSION_FIRESTORE_PROJECT": "Google Cloud project id (fallback: GOOGLE_CLOUD_PROJECT).",
    "MISSION_FIRESTORE_DATABASE": "Firestore database id (default: the project's (default) database).",
    "MISSION_FIRESTORE_CREDENTIALS": (
        "Service-account JSON key path (fallback: GOOGLE_APPLICATION_CREDENTIALS, then ADC)."
    ),
    "FIRESTORE_EMULATOR_HOST": "Honored by the Firestore SDK itself, e.g. localhost:8080.",
    # Countdown
    "MISSION_TICK_INTERVAL_SECONDS": "Countdown recompute interval (default: 1.0).",
}
