"""
Pytest configuration for holecast tests.
Adds the src/holecast directory to sys.path so that flat imports work, and the
repository root so that `tests.test_fixtures` resolves.
"""
import sys
from pathlib import Path

_root_path = Path(__file__).parent.parent
src_path = _root_path / "src" / "holecast"

for path in (src_path, _root_path):
    if str(path) not in sys.path:
        sys.path.insert(0, str(path))
