import dataclasses

import pytest

from colortransfer.colorspace import Colorspace
from colortransfer.errors import InvalidInputError, UnknownColorspaceError
from colortransfer.session import (
    DEFAULT_RATIO,
    ESCAPE_KEY,
    SLIDER_MAX,
    TransferParams,
    TransferSession,
    colorspace_for_key,
)


def test_new_session_is_unset() -> None:
    session = TransferSession()
    assert session.colorspace is Colorspace.NONE
    assert session.ratios == [DEFAULT_RATIO] * 3
    # unset still transfers in LAB
    assert session.params.colorspace is Colorspace.LAB


def test_select_sets_labels() -> None:
    session = TransferSession()

    assert session.select(Colorspace.LAB) is True
    assert session.labels == ("Luminance", "Alpha", "Beta")

    assert session.select("hsv") is True
    assert session.colorspace is Colorspace.HSV
    assert session.labels == ("Hue", "Saturation", "Value")


def test_switch_resets_ratios() -> None:
    session = TransferSession()
    session.select(Colorspace.LAB)
    session.set_ratio(0, 0.2)
    session.set_ratio(2, 0.6)

    assert session.select(Colorspace.XYZ) is True
    assert session.ratios == [1.0, 1.0, 1.0]
    assert session.labels == ("X", "Y", "Z")


def test_reselect_is_noop() -> None:
    session = TransferSession()
    session.select(Colorspace.RGB)
    session.set_ratio(1, 0.35)

    assert session.select(Colorspace.RGB) is False
    assert session.ratios == [1.0, 0.35, 1.0]
    assert session.labels == ("Red", "Green", "Blue")


def test_unset_selects_lab() -> None:
    session = TransferSession()
    assert session.select(None) is True
    assert session.colorspace is Colorspace.LAB

    session.set_ratio(0, 0.5)
    assert session.select(Colorspace.NONE) is False
    assert session.ratios[0] == pytest.approx(0.5)


def test_select_unknown_keeps_state() -> None:
    session = TransferSession()
    session.select(Colorspace.HSV)
    session.set_ratio(0, 0.1)

    with pytest.raises(UnknownColorspaceError):
        session.select("cmyk")

    assert session.colorspace is Colorspace.HSV
    assert session.ratios[0] == pytest.approx(0.1)


def test_set_ratio_clamps() -> None:
    session = TransferSession()
    assert session.set_ratio(0, 1.7) == 1.0
    assert session.set_ratio(1, -0.3) == 0.0
    assert session.ratios == [1.0, 0.0, 1.0]

    with pytest.raises(InvalidInputError):
        session.set_ratio(3, 0.5)


def test_sliders_map_to_ratios() -> None:
    session = TransferSession()
    assert session.set_slider(2, 25) == pytest.approx(0.25)
    assert session.set_slider(0, SLIDER_MAX) == pytest.approx(1.0)
    assert session.slider_positions() == [100, 100, 25]


def test_params_are_immutable_snapshot() -> None:
    session = TransferSession()
    session.select(Colorspace.HSV)
    session.set_ratio(0, 0.4)

    params = session.params
    assert params == TransferParams(Colorspace.HSV, (0.4, 1.0, 1.0))

    session.set_ratio(0, 0.9)
    assert params.ratios[0] == pytest.approx(0.4)

    with pytest.raises(dataclasses.FrozenInstanceError):
        params.colorspace = Colorspace.LAB


@pytest.mark.parametrize(
    "key, expected",
    [
        ("l", Colorspace.LAB),
        ("L", Colorspace.LAB),
        (ord("r"), Colorspace.RGB),
        (ord("H"), Colorspace.HSV),
        ("x", Colorspace.XYZ),
        (ord("q"), None),
        (ESCAPE_KEY, None),
        (-1, None),
    ],
)
def test_colorspace_for_key(key, expected) -> None:
    assert colorspace_for_key(key) is expected
