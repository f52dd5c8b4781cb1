# tests/conftest.py
"""
Pytest configuration and fixtures.
Adds src to sys.path so `import floralgallery` works without an install.
"""

import sys
from pathlib import Path

project_root = Path(__file__).parent.parent
src_root = project_root / "src"
if str(src_root) not in sys.path:
    sys.path.insert(0, str(src_root))
