"""Type aliases used across framecue."""

from __future__ import annotations

from collections.abc import Callable
from datetime import datetime
from typing import Any

JsonDict = dict[str, Any]
JobId = str
TaskToken = str
Clock = Callable[[], datetime]
