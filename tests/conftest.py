import sys
from pathlib import Path

import pytest

ROOT = Path(__file__).resolve().parents[1]
SRC = ROOT / "src"
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))
if SRC.exists():
    sys.path.insert(0, str(SRC))

# Register shared Hypothesis profiles for deterministic CI runs and fast local loops.
from tests.util import hypothesis_profiles  # noqa: E402,F401  pylint: disable=unused-import

from histometrics.core.reservoir import UniformReservoir  # noqa: E402


@pytest.fixture(name="clean_env")
def _clean_env_fixture(monkeypatch: pytest.MonkeyPatch) -> pytest.MonkeyPatch:
    """Drop histogram env overrides so config tests start from the file alone."""

    for key in ("HISTOGRAM_RESERVOIR_SIZE", "HISTOGRAM_RESERVOIR_SEED", "HISTOGRAM_PERCENTILES"):
        monkeypatch.delenv(key, raising=False)
    return monkeypatch


@pytest.fixture
def seeded_reservoir() -> UniformReservoir:
    return UniformReservoir(size=128, seed=0xC0FFEE)
