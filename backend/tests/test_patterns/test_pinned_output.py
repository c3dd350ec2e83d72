"""Pinned output for every registered algorithm.

Each row fixes a seed and records what it must produce under the default
config: the raw element count, the first element's path data (leading
commands plus a sha256 prefix of the whole string) and its paint. A change
to draw order, parameter ranges or geometry in any algorithm fails here,
which a self-comparison determinism test cannot catch.

Seeds for gradient-capable algorithms are ones whose toggle draw does not
fire, so the rows hold with gradients enabled too.
"""

import hashlib
from typing import NamedTuple

import pytest

from engine import palettes
from engine.cache import PatternCache
from engine.determinism import derive_seed, make_rng
from engine.generator import PatternGenerator
from engine.models import PatternConfig
from patterns.registry import get, list_all

pytestmark = pytest.mark.smoke

SCHEME = palettes.COLOR_SCHEMES[0]
ACCENT = "#d4d4d8"


class Pinned(NamedTuple):
    pattern_id: str
    seed: int
    count: int
    path_head: str
    path_sha256: str
    stroke_width: float
    opacity: float
    fill: str


# fmt: off
PINNED = [
    Pinned("pattern.radial_checkerboard", 1000, 1691, "M 164.5 80.5 L 164.5 80.5", "69df08b30962e6e9", 1.9800651577503432, 0.6400000000000001, ACCENT),
    Pinned("pattern.rotating_spiral", 2002, 78, "M 164.5 80.5 L 164.5 80.5", "9cba81196bc6f04f", 0.9683041838134431, 0.6400000000000001, "none"),
    Pinned("pattern.starburst", 3000, 83, "M 164.5 80.5 L 414.5 80.5", "478c2aedc7780b71", 2.034160665294925, 0.4668531378600823, "none"),
    Pinned("pattern.concentric_rings", 4008, 48, "M 414.5 80.5 L 413.3 105.0", "eb6ecf154552143a", 0.5942065329218107, 0.68, "none"),
    Pinned("pattern.twisted_spiral", 5011, 7, "M 164.5 80.5 L 166.4 82.2", "e151362c14bcffdd", 1.9135631001371742, 0.5599999999999999, "none"),
    Pinned("pattern.polygon_mandala", 6000, 50, "M 164.5 80.5 L 164.5 80.5", "7c64548842c9785f", 2.7087482853223595, 0.8, "none"),
    Pinned("pattern.rotating_radial", 7000, 363, "M 164.5 80.5 L 164.5 80.5", "53102c7f904c5281", 1.395411522633745, 0.6, ACCENT),
    Pinned("pattern.flower_mandala", 8000, 531, "M 164.5 80.5 Q 168.5 81.9", "add8f884d2e8c16a", 2.446491340877915, 0.5, "none"),
    Pinned("pattern.warped_grid", 9000, 38, "M 0.0 23.3 L 3.4 25.8", "d9a8cf7a2907acc9", 1.0459066358024691, 0.8, "none"),
    Pinned("pattern.tunnel", 10000, 114, "M 39.5 -9.5 L 289.5 -9.5", "81aaab416779d4f7", 0, 0.5, ACCENT),
    Pinned("pattern.wave_rings", 11000, 87, "M 164.5 80.5 L 170.0 81.0", "6a46f9665baacbc5", 0.4258179012345679, 0.7, "none"),
    Pinned("pattern.double_helix", 12000, 8, "M 164.5 80.5 L 168.3 83.9", "1d8b965f1d0afcdb", 4.630780606995884, 0.7, "none"),
    Pinned("pattern.dotted_spiral", 13000, 736, "M 167.5 80.5 L 167.3 81.6", "044a32c564801e78", 0, 0.6, ACCENT),
    Pinned("pattern.star_mandala", 14000, 1012, "M 169.8 80.5 L 175.1 80.5", "d2df2ed1d4c46632", 1.923943758573388, 0.7, "none"),
    Pinned("pattern.curved_rays", 15000, 30, "M 174.5 80.5 Q 227.0 169.8", "c67d116324bb6701", 2.3406172839506176, 0.6, "none"),
    Pinned("pattern.moire_circles", 16000, 473, "M 0.0 -12.6 L -0.2 -10.2", "8337d88ccf242a19", 0.6145893347050754, 0.5, "none"),
]
# fmt: on

DJ_DAN = ("DJ Dan", "Housing Project", "1992")
DJ_DAN_SEED = 1195227552
DJ_DAN_JSON_SHA256 = "d4f20060e82aab72413e59c8c5e4355302329f038b8b188173d5c2f74d4140df"


def _sha256(text: str) -> str:
    return hashlib.sha256(text.encode("utf-8")).hexdigest()


def test_every_algorithm_is_pinned():
    assert [row.pattern_id for row in PINNED] == [p["id"] for p in list_all()]


@pytest.mark.parametrize(
    "enable_gradients", [False, True], ids=["flat", "gradients-enabled"]
)
@pytest.mark.parametrize("row", PINNED, ids=lambda row: row.pattern_id)
def test_first_element_pinned(row, enable_gradients):
    config = PatternConfig(enable_gradients=enable_gradients)
    elements, gradients = get(row.pattern_id)["fn"](make_rng(row.seed), SCHEME, config)

    assert len(elements) == row.count
    assert gradients == []
    first = elements[0]
    assert first.path_data.startswith(row.path_head)
    assert _sha256(first.path_data).startswith(row.path_sha256)
    assert first.stroke_width == pytest.approx(row.stroke_width, rel=1e-12)
    assert first.opacity == pytest.approx(row.opacity, rel=1e-12)
    assert first.fill == row.fill


def test_concentric_annulus_pinned():
    """Filled annulus: outer ring forward, inner ring reversed, both closed."""
    elements, _ = get("pattern.concentric_rings")["fn"](
        make_rng(4008), SCHEME, PatternConfig()
    )
    annulus = elements[1]
    assert annulus.stroke == "none"
    assert annulus.fill == ACCENT
    assert annulus.opacity == pytest.approx(0.72)
    assert annulus.path_data.startswith("M 406.7 80.5 L 405.5 104.2 L 402.0 127.7")
    assert " Z M 398.9 80.5 L 397.7 57.5 " in annulus.path_data
    assert annulus.path_data.endswith(" Z")
    assert _sha256(annulus.path_data) == (
        "1e5ebd92b5644cf6073eefdd28de8355c7c7a45a54ae189e3afee14d87171f2d"
    )


def test_dj_dan_pattern_pinned():
    assert derive_seed(*DJ_DAN) == DJ_DAN_SEED

    generator = PatternGenerator(PatternCache())
    meta = generator.pattern_meta(*DJ_DAN)
    assert meta.algorithm_id == "pattern.radial_checkerboard"
    assert meta.element_count == 60

    pattern = generator.generate_pattern(*DJ_DAN)
    assert pattern.elements[0].path_data == (
        "M 164.5 80.5 L 164.5 80.5 L 168.8 81.2 L 168.9 80.5 Z"
    )
    assert pattern.elements[0].stroke_width == pytest.approx(0.6370541838134431)
    assert _sha256(pattern.to_json()) == DJ_DAN_JSON_SHA256
