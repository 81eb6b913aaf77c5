from dataclasses import dataclass, field
from typing import List, Optional, Tuple, Union

from colortransfer.colorspace import Colorspace, resolve
from colortransfer.errors import InvalidInputError
from colortransfer.transfer import DEFAULT_RATIOS, clamp_ratios


DEFAULT_RATIO = 1.0
SLIDER_MAX = 100

ESCAPE_KEY = 27

KEYMAP = {
    "l": Colorspace.LAB,
    "r": Colorspace.RGB,
    "h": Colorspace.HSV,
    "x": Colorspace.XYZ,
}


def colorspace_for_key(key: Union[int, str]) -> Optional[Colorspace]:
    """Map a key press (character or key code) to a colorspace."""
    if isinstance(key, int):
        if key < 0:
            return None
        key = chr(key & 0xFF)
    return KEYMAP.get(key.lower())


@dataclass(frozen=True)
class TransferParams:
    colorspace: Colorspace
    ratios: Tuple[float, float, float] = DEFAULT_RATIOS


@dataclass
class TransferSession:
    """Active colorspace, blend ratios and channel labels of one session.

    The session starts with no colorspace; the first ``select`` sets one.
    """

    colorspace: Colorspace = Colorspace.NONE
    ratios: List[float] = field(default_factory=lambda: [DEFAULT_RATIO] * 3)
    labels: Tuple[str, str, str] = ("", "", "")

    def select(self, colorspace: Union[Colorspace, str, None]) -> bool:
        """Switch to ``colorspace``.

        Returns False when it is already active, in which case nothing
        changes. Otherwise the ratios go back to ``DEFAULT_RATIO`` and the
        labels follow the new colorspace.
        """
        entry = resolve(colorspace)
        if entry.colorspace is self.colorspace:
            return False

        self.colorspace = entry.colorspace
        self.labels = entry.labels
        self.ratios = [DEFAULT_RATIO] * 3
        return True

    def set_ratio(self, channel: int, value: float) -> float:
        if channel not in range(3):
            raise InvalidInputError(f"Channel must be 0, 1 or 2, got {channel}")

        ratios = list(self.ratios)
        ratios[channel] = value
        self.ratios = list(clamp_ratios(ratios))
        return self.ratios[channel]

    def set_slider(self, channel: int, position: int) -> float:
        return self.set_ratio(channel, position / SLIDER_MAX)

    def slider_positions(self) -> List[int]:
        return [int(round(r * SLIDER_MAX)) for r in self.ratios]

    @property
    def params(self) -> TransferParams:
        colorspace = resolve(self.colorspace).colorspace
        return TransferParams(colorspace=colorspace, ratios=tuple(self.ratios))
