import cv2 as cv
import numpy as np

from colortransfer.session import ESCAPE_KEY, SLIDER_MAX, TransferSession, colorspace_for_key
from colortransfer.transfer import TransferEngine


REFERENCE_WINDOW = "Source Image"
TARGET_WINDOW = "Original Target"
RESULT_WINDOW = "Modified Target"
CONTROLS_WINDOW = "Transfer Ratio"
README_WINDOW = "Instructions"

CONTROLS_SIZE = (600, 125)
WINDOW_GAP = 10

INSTRUCTIONS = (
    "Keymap:",
    "'L' -> LAB, 'R' -> RGB",
    "'H' -> HSV, 'X' -> XYZ",
    "ESC -> Save and Exit",
)


def instructions_panel(lines=INSTRUCTIONS, line_height: int = 25, width: int = 225) -> np.ndarray:
    panel = np.full((line_height * (len(lines) + 1), width), 255, dtype=np.uint8)
    for i, line in enumerate(lines):
        y = line_height * (i + 1)
        cv.putText(panel, line, (10, y), cv.FONT_HERSHEY_PLAIN, 0.75, 0)
    return panel


class InteractiveTransfer:
    """HighGUI front end: three image windows, per-channel trackbars and a
    key loop that switches colorspace."""

    def __init__(self, engine: TransferEngine, session: TransferSession = None):
        self.engine = engine
        self.session = session or TransferSession()
        self.result = None

    def update(self) -> np.ndarray:
        params = self.session.params
        self.result = self.engine.transfer(params.colorspace, params.ratios)
        cv.imshow(RESULT_WINDOW, self.result)
        return self.result

    def _on_trackbar(self, channel: int):
        def callback(position: int):
            self.session.set_slider(channel, position)
            self.update()
        return callback

    def _build_controls(self):
        rows, cols = self.engine.target.shape[:2]

        # Trackbars are named after the channels, so rebuild the window
        cv.destroyWindow(CONTROLS_WINDOW)
        cv.namedWindow(CONTROLS_WINDOW, cv.WINDOW_NORMAL)
        cv.moveWindow(CONTROLS_WINDOW, cols + WINDOW_GAP, rows + 155)

        for channel, (label, position) in enumerate(
            zip(self.session.labels, self.session.slider_positions())
        ):
            cv.createTrackbar(label, CONTROLS_WINDOW, position, SLIDER_MAX, self._on_trackbar(channel))

        cv.resizeWindow(CONTROLS_WINDOW, *CONTROLS_SIZE)

    def change_mode(self, colorspace) -> bool:
        if not self.session.select(colorspace):
            return False
        self._build_controls()
        self.update()
        return True

    def run(self) -> np.ndarray:
        reference, target = self.engine.reference, self.engine.target

        for name in (REFERENCE_WINDOW, TARGET_WINDOW, RESULT_WINDOW, README_WINDOW):
            cv.namedWindow(name, cv.WINDOW_AUTOSIZE)
        cv.namedWindow(CONTROLS_WINDOW, cv.WINDOW_NORMAL)

        cv.moveWindow(REFERENCE_WINDOW, 0, 0)
        cv.moveWindow(TARGET_WINDOW, reference.shape[1] + WINDOW_GAP, 0)
        cv.moveWindow(RESULT_WINDOW, 0, target.shape[0] + 50)
        cv.moveWindow(README_WINDOW, target.shape[1] + WINDOW_GAP, target.shape[0] + 200)

        cv.imshow(REFERENCE_WINDOW, reference)
        cv.imshow(TARGET_WINDOW, target)
        cv.imshow(README_WINDOW, instructions_panel())

        # An unset colorspace starts in LAB; an active one keeps its ratios
        if not self.change_mode(self.session.colorspace):
            self._build_controls()
            self.update()

        try:
            while True:
                key = cv.waitKey(0)
                if key == -1 or key & 0xFF == ESCAPE_KEY:
                    break
                colorspace = colorspace_for_key(key)
                if colorspace is not None:
                    self.change_mode(colorspace)
        finally:
            cv.destroyAllWindows()

        return self.result


def run_interactive(reference: np.ndarray, target: np.ndarray, session: TransferSession = None) -> np.ndarray:
    return InteractiveTransfer(TransferEngine(reference, target), session).run()
