import pytest

from config import CFG
from tiles import BASE_SHAPES, FAMILIES, is_known_family, mirror, normalize, orientations, rotate


EXPECTED_COUNTS = {"I": 2, "O": 1, "T": 4, "S": 4, "Z": 4, "L": 8, "J": 8}
ONE_SIDED_COUNTS = {"I": 2, "O": 1, "T": 4, "S": 2, "Z": 2, "L": 4, "J": 4}


@pytest.mark.parametrize("family", FAMILIES)
def test_orientation_counts_with_mirror(family):
    assert len(orientations(family, mirror=True)) == EXPECTED_COUNTS[family]


@pytest.mark.parametrize("family", FAMILIES)
def test_orientation_counts_one_sided(family):
    assert len(orientations(family, mirror=False)) == ONE_SIDED_COUNTS[family]


@pytest.mark.parametrize("family", FAMILIES)
def test_orientations_are_normalized_and_distinct(family):
    seen = set()
    for orient in orientations(family, mirror=True):
        assert len(orient) == 4
        assert len(set(orient)) == 4
        assert min(r for r, _ in orient) == 0
        assert min(c for _, c in orient) == 0
        assert list(orient) == sorted(orient)
        assert orient not in seen
        seen.add(orient)


def test_orientations_are_stable_between_calls():
    first = [orientations(f, mirror=True) for f in FAMILIES]
    second = [orientations(f, mirror=True) for f in FAMILIES]
    assert first == second


def test_catalog_starts_with_base_shape():
    for family, shape in BASE_SHAPES.items():
        assert orientations(family, mirror=True)[0] == normalize(shape)


def test_horizontal_i_comes_first():
    horizontal, vertical = orientations("I")
    assert horizontal == ((0, 0), (0, 1), (0, 2), (0, 3))
    assert vertical == ((0, 0), (1, 0), (2, 0), (3, 0))


def test_mirror_of_l_is_a_j_orientation():
    assert mirror(BASE_SHAPES["L"]) in orientations("J", mirror=False)
    assert mirror(BASE_SHAPES["S"]) == normalize(BASE_SHAPES["Z"])


def test_four_rotations_return_to_start():
    shape = normalize(BASE_SHAPES["T"])
    current = shape
    for _ in range(4):
        current = rotate(current)
    assert current == shape


def test_one_sided_is_a_prefix_of_the_full_catalog():
    for family in FAMILIES:
        one_sided = orientations(family, mirror=False)
        assert orientations(family, mirror=True)[: len(one_sided)] == one_sided


def test_default_follows_config(monkeypatch):
    monkeypatch.setattr(CFG, "ALLOW_MIRROR", False)
    assert len(orientations("L")) == 4
    monkeypatch.setattr(CFG, "ALLOW_MIRROR", True)
    assert len(orientations("L")) == 8


def test_lowercase_family_is_accepted():
    assert orientations("t") == orientations("T")
    assert is_known_family("z")


def test_unknown_family():
    assert not is_known_family("X")
    assert not is_known_family("")
    assert not is_known_family(None)
    with pytest.raises(KeyError):
        orientations("X")
