import logging
import os

import numpy as np
import matplotlib.pyplot as plt
from pydantic import BaseModel, ConfigDict

from convolution import convolve2d, reduce_window, load_image
from kernels import gaussian_kernel, diff_x_kernel, diff_y_kernel

logger = logging.getLogger(__name__)

# Symmetric 2x2 matrix [[xx, xy], [xy, yy]] per pixel
STRUCTURE_TENSOR = np.dtype([("xx", np.float32), ("xy", np.float32), ("yy", np.float32)])


class HarrisConfig(BaseModel):
    """Parameters of one detection run."""

    model_config = ConfigDict(frozen=True)

    smoothing_size: int = 5
    structure_size: int = 5
    harris_k: float = 0.04
    threshold_ratio: float = 0.5
    suppression_size: int = 9
    sigma: float = 1.0


# -----------------------
# Structure tensor
# -----------------------
def structure_tensor_image(image, gaussian, diff_x, diff_y, window_size):
    """
    image       : grayscale image as 2D numpy array (H x W)
    gaussian    : smoothing kernel, applied once before differentiation
    diff_x      : x derivative kernel
    diff_y      : y derivative kernel
    window_size : side of the square window the gradient products are summed over

    returns an (H x W) array of STRUCTURE_TENSOR
    """
    smoothed = convolve2d(image, gaussian)
    Ix = convolve2d(smoothed, diff_x)
    Iy = convolve2d(smoothed, diff_y)

    # Plain windowed sums, no averaging by window area
    def window_sum(region, pixel):
        return np.sum(region)

    tensor = np.zeros(Ix.shape, dtype=STRUCTURE_TENSOR)
    tensor["xx"] = reduce_window(Ix * Ix, window_size, window_sum)
    tensor["xy"] = reduce_window(Ix * Iy, window_size, window_sum)
    tensor["yy"] = reduce_window(Iy * Iy, window_size, window_sum)
    return tensor


def harris_response(tensor, k=0.04):
    """det(M) - k * trace(M)^2 for every pixel. Negative values are kept."""
    xx, xy, yy = tensor["xx"], tensor["xy"], tensor["yy"]
    return ((xx * yy - xy * xy) - k * (xx + yy) * (xx + yy)).astype(np.float32)


def global_max(response):
    # Seeded at 0: an all-negative response gives 0, which disables the threshold
    max_r = 0.0
    if response.size:
        max_r = max(max_r, float(np.max(response)))
    return max_r


# -----------------------
# Non-maximum suppression
# -----------------------
def non_max_suppression(response, threshold_ratio=0.5, window_size=9):
    """
    Windowed non-maximal suppression with a global threshold.

    The threshold is threshold_ratio times the global max of the response.
    A pixel survives with its own value when it is above threshold and no
    pixel in its window is strictly greater; everything else becomes 0.

    Equal neighbours do not suppress each other, so a plateau of equal
    maximal values survives as several adjacent corners. Callers that need
    a single point per corner have to merge those themselves.
    """
    threshold = global_max(response) * threshold_ratio

    def keep_local_max(region, pixel):
        if pixel < threshold:
            return 0.0
        return 0.0 if np.max(region, initial=pixel) > pixel else pixel

    logger.debug("non-max suppression: threshold=%g window=%d", threshold, window_size)
    return reduce_window(response, window_size, keep_local_max)


# -----------------------
# Full Harris pipeline
# -----------------------
def find_corners(image, config=None):
    """
    image  : grayscale image as 2D numpy array (H x W)
    config : HarrisConfig, defaults when omitted

    returns the corner map: response value at local maxima, 0 elsewhere
    """
    if config is None:
        config = HarrisConfig()

    # 1. Kernels (fail fast on invalid sizes)
    gaussian = gaussian_kernel(config.sigma, config.smoothing_size)
    diff_x = diff_x_kernel()
    diff_y = diff_y_kernel()

    # 2. Structure tensor
    tensor = structure_tensor_image(image, gaussian, diff_x, diff_y, config.structure_size)

    # 3. Harris response
    R = harris_response(tensor, config.harris_k)
    if logger.isEnabledFor(logging.DEBUG):
        logger.debug("harris response: max=%g", global_max(R))

    # 4. Threshold + non-maximum suppression
    corners = non_max_suppression(R, config.threshold_ratio, config.suppression_size)
    logger.debug("found %d corners", np.count_nonzero(corners))
    return corners


def corner_points(corners):
    """rows, cols of the non-zero pixels of a corner map, strongest first."""
    ys, xs = np.nonzero(corners)
    order = np.argsort(-corners[ys, xs], kind="stable")
    return ys[order], xs[order]


def checkerboard(size=64, square=16):
    rr, cc = np.indices((size, size))
    return (((rr // square) + (cc // square)) % 2).astype(np.float32)


# --- Example usage ---
def launch(image_path="assets/comp_vision_test.jpg"):
    logging.basicConfig(level=logging.INFO, format='%(asctime)s - %(name)s - %(levelname)s - %(message)s')

    if os.path.exists(image_path):
        image = load_image(image_path)
    else:
        # fallback: synthetic checkerboard
        image = checkerboard()

    corners = find_corners(image, HarrisConfig(harris_k=0.05))
    rows, cols = corner_points(corners)
    print(f"Found {len(rows)} corners in {image.shape[1]}x{image.shape[0]} image")

    plt.figure(figsize=(6, 6))
    plt.title("Harris corners")
    plt.imshow(image, cmap='gray')
    plt.scatter(cols, rows, s=20, c='red', marker='+')
    plt.axis('off')
    plt.show()


if __name__ == "__main__":
    launch()
