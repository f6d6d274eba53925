import logging

import numpy as np

logger = logging.getLogger(__name__)


# -----------------------
# Gaussian smoothing kernel
# -----------------------
def gaussian_kernel(sigma=1.0, size=5):
    """
    Return a square Gaussian kernel normalized to sum=1.

    sigma : standard deviation of the gaussian
    size  : kernel side, must be a positive odd integer
    """
    if size <= 0 or size % 2 == 0:
        raise ValueError("size parameter must be a positive odd number")

    ax = np.arange(-(size // 2), size // 2 + 1, dtype=np.float32)
    xx, yy = np.meshgrid(ax, ax)
    kernel = np.exp(-(xx**2 + yy**2) / (2.0 * sigma**2))
    kernel /= np.sum(kernel)

    logger.debug("gaussian kernel: size=%d sigma=%.3f", size, sigma)
    return kernel.astype(np.float32)


# -----------------------
# Central differences (Sobel without the smoothing)
# -----------------------
def diff_x_kernel():
    """Horizontal derivative, 3 wide and 1 high."""
    return np.array([[1, 0, -1]], dtype=np.float32)


def diff_y_kernel():
    """Vertical derivative, 1 wide and 3 high."""
    return np.array([[1],
                     [0],
                     [-1]], dtype=np.float32)
