import pytest

from slopekit.winsys import NUM_RESOLUTIONS, ScreenModes, ScreenRes, screen_scale


@pytest.fixture
def modes():
    return ScreenModes(ScreenRes(1920, 1080))


def test_desktop_only_in_fullscreen(modes):
    assert modes.resolution(0, True) == ScreenRes(1920, 1080)
    assert modes.resolution(0, False) == ScreenRes(800, 600)


def test_out_of_range_is_auto(modes):
    assert modes.resolution(NUM_RESOLUTIONS, True) == ScreenRes(800, 600)
    assert modes.res_name(NUM_RESOLUTIONS) == "800 x 600"


def test_listed_resolution(modes):
    assert modes.resolution(2, False) == ScreenRes(1024, 768)
    assert modes.res_name(2) == "1024 x 768"


def test_names_match_resolutions(modes):
    for idx in range(1, NUM_RESOLUTIONS):
        res = modes.resolution(idx, True)
        assert modes.res_name(idx) == f"{res.width} x {res.height}"


def test_auto_label(modes):
    assert modes.res_name(0) == "auto"
    assert modes.res_name(0, "Automatisch") == "Automatisch"


def test_screen_scale_small_screen():
    assert screen_scale(600) == pytest.approx(0.78)


def test_screen_scale_reference_height():
    assert screen_scale(768) == pytest.approx(1.0)


def test_screen_scale_grows_with_height():
    assert screen_scale(1080) > screen_scale(900) > screen_scale(768)


def test_quad_scale_is_square_root():
    assert screen_scale(1536, True) ** 2 == pytest.approx(screen_scale(1536))
    assert screen_scale(600, True) ** 2 == pytest.approx(0.78)