"""Test package initialisation.

The project packages (``modules``, ``notifications``, ``utils``) live one
directory above this package, so the repository root is appended to
``sys.path`` for runs that do not install the project first.
"""

from __future__ import annotations

import sys
from pathlib import Path

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.append(str(ROOT))
