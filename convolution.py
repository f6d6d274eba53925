import numpy as np
import os

from PIL import Image


def convolve2d(image, kernel, padding='edge'):
    """
    image  : 2D numpy array (H x W)
    kernel : 2D numpy array (kH x kW), both sides odd
    padding: 'edge' (clamp to border pixel), 'reflect', 'zero'

    returns a float32 array with the same shape as image
    """
    image = image.astype(np.float32)
    H, W = image.shape
    kH, kW = kernel.shape

    # true convolution
    kernel_flipped = np.flipud(np.fliplr(kernel)).astype(np.float32)

    pad_h = kH // 2
    pad_w = kW // 2

    if padding == 'zero':
        padded = np.pad(image, ((pad_h, pad_h), (pad_w, pad_w)), mode='constant')
    elif padding == 'reflect':
        padded = np.pad(image, ((pad_h, pad_h), (pad_w, pad_w)), mode='reflect')
    elif padding == 'edge':
        padded = np.pad(image, ((pad_h, pad_h), (pad_w, pad_w)), mode='edge')
    else:
        raise ValueError("Unknown padding mode")

    output = np.zeros_like(image, dtype=np.float32)

    for y in range(H):
        for x in range(W):
            region = padded[y:y+kH, x:x+kW]
            output[y, x] = np.sum(region * kernel_flipped)

    return output


def window_slices(shape, point, half):
    """Square window of radius `half` around point=(x, y), clipped to shape=(H, W)."""
    H, W = shape
    x, y = point
    rows = slice(max(y - half, 0), min(y + half + 1, H))
    cols = slice(max(x - half, 0), min(x + half + 1, W))
    return rows, cols


def reduce_window(image, size, fn):
    """
    Windowed fold over a 2D image.

    For every pixel p calls fn(region, image[p]) where region is the
    size x size neighbourhood of p clipped to the image, and stores the
    result at p in a new image (float32, or float64 for wider input).
    """
    H, W = image.shape
    half = size // 2

    out = np.zeros((H, W), dtype=np.result_type(image.dtype, np.float32))
    for y in range(H):
        for x in range(W):
            rows, cols = window_slices((H, W), (x, y), half)
            out[y, x] = fn(image[rows, cols], image[y, x])
    return out


def load_image(path):
    """Grayscale float32 image in the range 0..1."""
    img = Image.open(path).convert("L")
    return np.array(img, dtype=np.float32) / 255.0


def save_image(array, path):
    # Normalize to 0–255
    arr_norm = array - array.min()
    if arr_norm.max() > 0:
        arr_norm = arr_norm / arr_norm.max()
    arr_uint8 = (arr_norm * 255).astype(np.uint8)

    # Create the directory if missing
    directory = os.path.dirname(path)
    if directory:
        os.makedirs(directory, exist_ok=True)

    Image.fromarray(arr_uint8).save(path)
