import cv2 as cv
import numpy as np
import pytest

from colortransfer import cli
from colortransfer.colorspace import Colorspace, resolve
from colortransfer.transfer import transfer


@pytest.fixture
def image_paths(tmp_path, reference_image, target_image):
    reference_path = tmp_path / "reference.png"
    target_path = tmp_path / "target.png"
    cv.imwrite(str(reference_path), reference_image)
    cv.imwrite(str(target_path), target_image)
    return reference_path, target_path


def test_writes_output(image_paths, tmp_path, reference_image, target_image, capsys) -> None:
    output_path = tmp_path / "out" / "result.png"

    status = cli.main([str(image_paths[0]), str(image_paths[1]), str(output_path)])

    assert status == 0
    written = cv.imread(str(output_path), cv.IMREAD_UNCHANGED)
    np.testing.assert_array_equal(written, transfer(reference_image, target_image, Colorspace.LAB))
    assert "[INFO] Output saved to" in capsys.readouterr().out


def test_without_output_writes_nothing(image_paths, tmp_path) -> None:
    before = set(tmp_path.iterdir())
    assert cli.main([str(p) for p in image_paths]) == 0
    assert set(tmp_path.iterdir()) == before


def test_colorspace_and_ratios(image_paths, tmp_path, target_image) -> None:
    output_path = tmp_path / "result.png"

    status = cli.main(
        [str(p) for p in image_paths]
        + [str(output_path), "--colorspace", "HSV", "--ratios", "0", "-1", "0"]
    )

    assert status == 0
    forward, inverse, _ = resolve(Colorspace.HSV)
    np.testing.assert_array_equal(cv.imread(str(output_path)), inverse(forward(target_image)))


def test_unknown_colorspace_is_usage_error(image_paths) -> None:
    with pytest.raises(SystemExit) as excinfo:
        cli.main([str(p) for p in image_paths] + ["--colorspace", "cmyk"])
    assert excinfo.value.code == 2


def test_missing_input_fails(image_paths, tmp_path, capsys) -> None:
    status = cli.main([str(image_paths[0]), str(tmp_path / "missing.png")])

    assert status == 1
    err = capsys.readouterr().err
    assert "[ERROR]" in err
    assert "Could not load target" in err


def test_grayscale_input_fails(image_paths, tmp_path, capsys) -> None:
    gray_path = tmp_path / "gray.png"
    cv.imwrite(str(gray_path), np.zeros((4, 4), dtype=np.uint8))

    status = cli.main([str(gray_path), str(image_paths[1])])

    assert status == 1
    assert "may not be a color image" in capsys.readouterr().err


def test_metrics_are_reported(image_paths, capsys) -> None:
    assert cli.main([str(p) for p in image_paths] + ["--metrics", "--colorspace", "rgb"]) == 0

    out = capsys.readouterr().out
    assert "[METRIC] PSNR vs target" in out
    assert "Statistics distance to reference" in out


def test_interactive_uses_gui(image_paths, tmp_path, monkeypatch, target_image) -> None:
    calls = []

    def fake_run_interactive(reference, target, session):
        calls.append(session.params)
        return target.copy()

    monkeypatch.setattr(cli, "run_interactive", fake_run_interactive)
    output_path = tmp_path / "result.png"

    status = cli.main(
        [str(p) for p in image_paths] + [str(output_path), "--interactive", "--colorspace", "xyz"]
    )

    assert status == 0
    assert calls[0].colorspace is Colorspace.XYZ
    np.testing.assert_array_equal(cv.imread(str(output_path)), target_image)


def test_metrics_on_tiny_images(tmp_path, uniform_image, capsys) -> None:
    reference_path = tmp_path / "reference.png"
    target_path = tmp_path / "target.png"
    output_path = tmp_path / "result.png"
    cv.imwrite(str(reference_path), uniform_image((50, 100, 200)))
    cv.imwrite(str(target_path), uniform_image((200, 100, 50)))

    status = cli.main(
        [str(reference_path), str(target_path), str(output_path), "--metrics", "--colorspace", "rgb"]
    )

    assert status == 0
    out = capsys.readouterr().out
    assert "[WARN] PSNR/SSIM unavailable" in out
    assert "Statistics distance to reference" in out
    np.testing.assert_allclose(cv.imread(str(output_path)).astype(int), 50 * np.array([1, 2, 4]), atol=1)
