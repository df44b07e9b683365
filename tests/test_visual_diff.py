import pytest
from PIL import Image

from pagescript.errors import VisualDiffError
from pagescript.visual_diff import compare_images


def _save(path, size=(10, 10), color=(255, 255, 255, 255)):
    Image.new("RGBA", size, color).save(path)
    return str(path)


def test_identical_images(tmp_path):
    actual = _save(tmp_path / "a.png")
    expected = _save(tmp_path / "b.png")

    result = compare_images(actual, expected)

    assert result.identical
    assert result.mismatch_ratio == 0.0
    assert result.diff_path is None


def test_changed_pixels_are_counted_and_highlighted(tmp_path):
    actual = _save(tmp_path / "a.png")
    img = Image.new("RGBA", (10, 10), (255, 255, 255, 255))
    for x in range(5):
        img.putpixel((x, 0), (0, 0, 0, 255))
    img.save(tmp_path / "b.png")
    diff = tmp_path / "out" / "diff.png"

    result = compare_images(actual, str(tmp_path / "b.png"), str(diff))

    assert result.mismatched_pixels == 5
    assert result.mismatch_ratio == pytest.approx(0.05)
    assert result.diff_path == str(diff)
    with Image.open(diff) as written:
        assert written.size == (10, 10)
        assert written.convert("RGBA").getpixel((0, 0)) == (255, 0, 0, 255)
        assert written.convert("RGBA").getpixel((9, 9)) != (255, 0, 0, 255)


def test_size_mismatch_counts_uncovered_area(tmp_path):
    actual = _save(tmp_path / "a.png", size=(10, 10))
    expected = _save(tmp_path / "b.png", size=(10, 12))

    result = compare_images(actual, expected)

    assert (result.width, result.height) == (10, 12)
    assert result.mismatched_pixels == 20


def test_missing_reference(tmp_path):
    actual = _save(tmp_path / "a.png")

    with pytest.raises(VisualDiffError):
        compare_images(actual, str(tmp_path / "missing.png"))


def test_unreadable_reference(tmp_path):
    actual = _save(tmp_path / "a.png")
    broken = tmp_path / "broken.png"
    broken.write_text("not an image", encoding="utf-8")

    with pytest.raises(VisualDiffError):
        compare_images(actual, str(broken))
