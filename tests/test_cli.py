import json

import numpy as np
import pytest
from PIL import Image

import growcut_segment


def _inputs(tmp_path):
    img = np.full((20, 20, 4), 255, dtype=np.uint8)
    img[5:15, 5:15, :3] = 0
    overlay = np.zeros_like(img)
    overlay[9:11, 9:11] = (0, 255, 0, 255)
    overlay[0, :] = (255, 0, 0, 255)
    Image.fromarray(img).save(tmp_path / "image.png")
    Image.fromarray(overlay).save(tmp_path / "overlay.png")
    return str(tmp_path / "image.png"), str(tmp_path / "overlay.png")


def test_cli_writes_masked_image(tmp_path, capsys):
    image, overlay = _inputs(tmp_path)
    out = tmp_path / "out" / "result.png"
    code = growcut_segment.main([image, overlay, str(out), "--workers", "2"])
    assert code == 0

    alpha = np.asarray(Image.open(out))[..., 3]
    assert alpha[10, 10] == 255
    assert alpha[0, 0] == 0

    summary = json.loads(capsys.readouterr().out.strip().splitlines()[-1])
    assert summary["converged"] is True
    assert summary["width"] == 20 and summary["height"] == 20
    assert summary["workers"] == 2
    assert summary["method"] == "growcut"


def test_cli_preview_seeds(tmp_path):
    image, overlay = _inputs(tmp_path)
    preview = tmp_path / "preview.png"
    code = growcut_segment.main([image, overlay, str(tmp_path / "out.png"),
                                 "--preview-seeds", str(preview)])
    assert code == 0
    px = np.asarray(Image.open(preview))
    assert tuple(px[0, 0]) == (255, 0, 0, 255)
    assert tuple(px[10, 10]) == (0, 255, 0, 255)


def test_cli_missing_arguments_is_usage_error(tmp_path):
    with pytest.raises(SystemExit) as exc:
        growcut_segment.main([str(tmp_path / "a.png")])
    assert exc.value.code == 2


def test_cli_extra_arguments_is_usage_error(tmp_path):
    with pytest.raises(SystemExit) as exc:
        growcut_segment.main(["a.png", "b.png", "c.png", "d.png"])
    assert exc.value.code == 2


def test_cli_rgb_input_fails(tmp_path):
    Image.fromarray(np.zeros((4, 4, 3), dtype=np.uint8)).save(tmp_path / "rgb.png")
    Image.fromarray(np.zeros((4, 4, 4), dtype=np.uint8)).save(tmp_path / "ov.png")
    code = growcut_segment.main([str(tmp_path / "rgb.png"), str(tmp_path / "ov.png"),
                                 str(tmp_path / "out.png")])
    assert code == 1
    assert not (tmp_path / "out.png").exists()


def test_cli_convert_accepts_rgb(tmp_path):
    Image.fromarray(np.zeros((4, 4, 3), dtype=np.uint8)).save(tmp_path / "rgb.png")
    Image.fromarray(np.zeros((4, 4, 4), dtype=np.uint8)).save(tmp_path / "ov.png")
    code = growcut_segment.main([str(tmp_path / "rgb.png"), str(tmp_path / "ov.png"),
                                 str(tmp_path / "out.png"), "--convert"])
    assert code == 0


def test_cli_missing_file_fails(tmp_path):
    code = growcut_segment.main([str(tmp_path / "a.png"), str(tmp_path / "b.png"),
                                 str(tmp_path / "out.png")])
    assert code == 1


def test_cli_self_test(capsys):
    assert growcut_segment.main(["--run-tests"]) == 0
    assert json.loads(capsys.readouterr().out.strip().splitlines()[-1])["test"] == "ok"
