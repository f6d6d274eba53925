import numpy as np
import pytest

from kernels import gaussian_kernel, diff_x_kernel, diff_y_kernel


@pytest.mark.parametrize("sigma, size", [(1.0, 1), (1.0, 3), (1.0, 5), (0.5, 7), (2.5, 9)])
def test_gaussian_kernel_sums_to_one(sigma, size) -> None:
    kernel = gaussian_kernel(sigma, size)

    assert kernel.shape == (size, size)
    assert kernel.dtype == np.float32
    assert np.sum(kernel) == pytest.approx(1.0, abs=1e-6)


@pytest.mark.parametrize("size", [0, -3, 4])
def test_gaussian_kernel_rejects_invalid_size(size) -> None:
    with pytest.raises(ValueError, match="positive odd"):
        gaussian_kernel(1.0, size)


def test_gaussian_kernel_is_symmetric_and_peaks_at_center() -> None:
    kernel = gaussian_kernel(1.0, 5)

    np.testing.assert_allclose(kernel, kernel.T)
    np.testing.assert_allclose(kernel, np.flipud(kernel))
    assert np.argmax(kernel) == 12


def test_gaussian_kernel_values() -> None:
    kernel = gaussian_kernel(1.0, 3)
    g = np.exp(-np.array([1.0, 0.0, 1.0]) / 2.0)
    expected = np.outer(g, g) / np.outer(g, g).sum()

    np.testing.assert_allclose(kernel, expected, rtol=1e-6)


def test_diff_kernels_are_unnormalized_central_differences() -> None:
    dx = diff_x_kernel()
    dy = diff_y_kernel()

    assert dx.shape == (1, 3)
    assert dy.shape == (3, 1)
    np.testing.assert_array_equal(dx.ravel(), [1, 0, -1])
    np.testing.assert_array_equal(dy.ravel(), [1, 0, -1])
    assert np.sum(dx) == 0
