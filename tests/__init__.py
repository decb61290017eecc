"""Test suite for soccer_predictor.

The suite imports ``soccer_predictor`` straight from ``src`` so it runs
from a plain checkout without an editable install.
"""

from __future__ import annotations

import sys
from pathlib import Path

SRC = Path(__file__).resolve().parents[1] / "src"
if str(SRC) not in sys.path:
    sys.path.insert(0, str(SRC))
