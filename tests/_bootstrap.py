"""Test helper that normalizes sys.path and environment defaults."""

from __future__ import annotations

import os
import sys
from pathlib import Path

PROJECT_ROOT = Path(__file__).resolve().parents[1]

if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))


_DEFAULT_ENV_VARS: dict[str, str] = {
    "API_KEY": "test-api-key",
    "API_SECRET": "test-api-secret",
    "SENDER_NO": "010-0000-0000",
    "PUBLIC_HOST": "https://qr.example.com",
    "EVENT_LOG_BASE_URL": "https://events.example.com",
}

for key, value in _DEFAULT_ENV_VARS.items():
    os.environ.setdefault(key, value)
