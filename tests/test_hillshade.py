from __future__ import annotations

import numpy as np
import pytest

from basin.derive import depth_preview_u16, float_preview_u8, hillshade, land_mask_u8
from basin.grid import make_grid
from basin.config import GridConfig, TopographyConfig
from basin.topography import generate_topography


DY_M = 55597.5


def _reference_depth() -> np.ndarray:
    return generate_topography(make_grid(GridConfig()), TopographyConfig()).depth_m


def test_hillshade_vertical_exaggeration_changes_output() -> None:
    depth = _reference_depth()

    shade_1x = hillshade(depth, dx_m=DY_M, dy_m=DY_M, vertical_exaggeration=1.0)
    shade_40x = hillshade(depth, dx_m=DY_M, dy_m=DY_M, vertical_exaggeration=40.0)

    assert shade_1x.dtype == np.uint8
    assert shade_1x.shape == depth.shape
    assert not np.array_equal(shade_1x, shade_40x)
    mad = float(np.mean(np.abs(shade_40x.astype(np.float32) - shade_1x.astype(np.float32))))
    assert mad > 1.5


def test_flat_floor_is_uniformly_lit() -> None:
    shade = hillshade(np.full((6, 6), 4000.0), dx_m=DY_M, dy_m=DY_M, altitude_deg=45.0)

    assert np.all(shade == shade[0, 0])
    assert shade[0, 0] == round(np.sin(np.deg2rad(45.0)) * 255.0)


def test_hillshade_rejects_bad_input() -> None:
    with pytest.raises(ValueError):
        hillshade(np.zeros(4), dx_m=DY_M, dy_m=DY_M)
    with pytest.raises(ValueError):
        hillshade(np.zeros((4, 4)), dx_m=0.0, dy_m=DY_M)
    with pytest.raises(ValueError):
        hillshade(np.zeros((4, 4)), dx_m=np.ones(3), dy_m=DY_M)


def test_previews_put_north_at_the_top() -> None:
    depth = np.array([[0.0, 0.0], [4000.0, 2000.0]])

    preview = depth_preview_u16(depth, max_depth_m=4000.0)
    mask = land_mask_u8(depth)

    np.testing.assert_array_equal(preview, [[65535, 32768], [0, 0]])
    np.testing.assert_array_equal(mask, [[0, 0], [255, 255]])


def test_float_preview_spans_full_range() -> None:
    values = np.array([[0.0, 1.0e-6], [5.0e-7, 0.0]])

    preview = float_preview_u8(values)

    assert preview.dtype == np.uint8
    assert int(preview.min()) == 0
    assert int(preview.max()) == 255


def test_narrow_zonal_cells_steepen_east_west_slopes() -> None:
    # Depth increases eastward only, so shading depends on the zonal spacing.
    depth = np.tile(np.linspace(3000.0, 4000.0, 8), (6, 1))

    square = hillshade(depth, dx_m=DY_M, dy_m=DY_M, vertical_exaggeration=40.0)
    narrow = hillshade(depth, dx_m=0.5 * DY_M, dy_m=DY_M, vertical_exaggeration=40.0)

    assert not np.array_equal(square, narrow)


def test_per_row_zonal_width_matches_scalar_rows() -> None:
    depth = _reference_depth()
    dx_m, dy_m = make_grid(GridConfig()).cell_size_m()

    shade = hillshade(depth, dx_m=dx_m, dy_m=dy_m)
    row = 10
    single = hillshade(depth, dx_m=float(dx_m[row]), dy_m=dy_m)

    # Outputs are flipped north-up.
    np.testing.assert_array_equal(shade[-1 - row], single[-1 - row])


def test_grid_cell_sizes_shrink_toward_the_pole() -> None:
    dx_m, dy_m = make_grid(GridConfig()).cell_size_m()

    assert dy_m == pytest.approx(55597.5)
    assert dx_m.shape == (80,)
    assert np.all(np.diff(dx_m) > 0.0)
    assert dx_m[0] == pytest.approx(55597.5 * np.cos(np.deg2rad(-69.75)))
