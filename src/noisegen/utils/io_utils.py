import os
import re
import logging
import numpy as np
import imageio.v2 as imageio
import cv2 # OpenCV for single images, slices and multi-page TIF
from typing import List

from ..core import SAMPLE_DTYPE, ImageReadError, ImageWriteError

logger = logging.getLogger(__name__)

# Slice files picked up when the input path is a directory
SLICE_PATTERN = re.compile(r".*\.((?:png)|(?:bmp)|(?:jpe?g))$", re.IGNORECASE)
TIFF_EXTENSIONS = (".tif", ".tiff")
GIF_EXTENSION = ".gif"
SERIES_PLACEHOLDER = "%"


def ensure_dir_exists(path: str):
    """Creates a directory if it doesn't exist. An empty path means the cwd."""
    if not path:
        return
    try:
        os.makedirs(path, exist_ok=True)
    except OSError as e:
        raise ImageWriteError(f"Cannot create directory {path}: {e}") from e


def _to_gray_uint8(frame: np.ndarray, source: str, bgr: bool = False) -> np.ndarray:
    """
    Converts a decoded frame (gray, colour or colour + alpha) to a 2D uint8 array.

    OpenCV decodes colour pages in BGR(A) order, imageio in RGB(A) order.
    """
    frame = np.asarray(frame)
    if frame.ndim == 3:
        if frame.shape[2] == 4:
            frame = cv2.cvtColor(frame, cv2.COLOR_BGRA2GRAY if bgr else cv2.COLOR_RGBA2GRAY)
        elif frame.shape[2] == 3:
            frame = cv2.cvtColor(frame, cv2.COLOR_BGR2GRAY if bgr else cv2.COLOR_RGB2GRAY)
        else:
            frame = frame[:, :, 0]
    if frame.ndim != 2:
        raise ImageReadError(f"Unsupported frame shape {frame.shape} in {source}")
    if frame.dtype != SAMPLE_DTYPE:
        if np.issubdtype(frame.dtype, np.integer):
            # Rescale wider integer types (e.g. 16-bit) to 8 bits
            max_val = np.iinfo(frame.dtype).max
            frame = (frame.astype(np.float64) * 255.0 / max_val).astype(SAMPLE_DTYPE)
        else:
            frame = (np.clip(frame, 0.0, 1.0) * 255.0).astype(SAMPLE_DTYPE)
    return frame


def _stack(slices: List[np.ndarray], source: str) -> np.ndarray:
    shapes = {s.shape for s in slices}
    if len(shapes) != 1:
        raise ImageReadError(f"Slices of {source} do not share the same size: {sorted(shapes)}")
    return np.ascontiguousarray(np.stack(slices, axis=0))


def list_slice_files(directory: str) -> List[str]:
    """Returns the image slice files of `directory`, sorted by name."""
    try:
        names = os.listdir(directory)
    except OSError as e:
        raise ImageReadError(f"{directory} cannot be read ({e})") from e
    files = [os.path.abspath(os.path.join(directory, name)) for name in names
             if SLICE_PATTERN.match(name) and os.path.isfile(os.path.join(directory, name))]
    return sorted(files)


def read_image(filepath: str) -> np.ndarray:
    """Reads one 2D image as grayscale uint8."""
    img = cv2.imread(filepath, cv2.IMREAD_GRAYSCALE)
    if img is None:
        raise ImageReadError(f"OpenCV is unable to read the image \"{filepath}\"")
    return img


def read_image_series(directory: str) -> np.ndarray:
    """Reads the slice files of `directory`, in name order, as a (z, y, x) grid."""
    files = list_slice_files(directory)
    if not files:
        raise ImageReadError(f"No image slices (png, bmp, jpg) found in \"{directory}\"")
    slices = []
    for filepath in files:
        logger.debug(f"Reading \"{filepath}\"")
        slices.append(read_image(filepath))
    return _stack(slices, directory)


def read_tiff(filepath: str) -> np.ndarray:
    """Reads every page of a (multi-page) TIF file."""
    success, pages = cv2.imreadmulti(filepath, flags=cv2.IMREAD_UNCHANGED)
    if not success or not pages:
        raise ImageReadError(f"OpenCV is unable to read the image \"{filepath}\"")
    return _stack([_to_gray_uint8(page, filepath, bgr=True) for page in pages], filepath)


def read_gif(filepath: str) -> np.ndarray:
    """Reads every frame of a GIF file."""
    try:
        frames = imageio.mimread(filepath)
    except (OSError, ValueError) as e:
        raise ImageReadError(f"imageio is unable to read the image \"{filepath}\" ({e})") from e
    if not frames:
        raise ImageReadError(f"No frames found in \"{filepath}\"")
    return _stack([_to_gray_uint8(frame, filepath) for frame in frames], filepath)


def read_grid(path: str) -> np.ndarray:
    """
    Loads an image, image stack or directory of slices as a 3D uint8 grid.

    Args:
        path (str): A single image file, a multi-page TIF, a GIF, or a
                    directory of png/bmp/jpg slices (sorted by file name).

    Returns:
        np.ndarray: uint8 array of shape (depth, height, width).

    Raises:
        ImageReadError: Missing path, unreadable file or inconsistent slices.
    """
    logger.info(f"Reading image \"{path}\"")
    if not os.path.exists(path):
        raise ImageReadError(f"\"{path}\" does not exist")

    if os.path.isdir(path):
        logger.debug(f"{path} is a folder")
        grid = read_image_series(path)
    else:
        logger.debug(f"{path} is a file")
        ext = os.path.splitext(path)[1].lower()
        if ext in TIFF_EXTENSIONS:
            grid = read_tiff(path)
        elif ext == GIF_EXTENSION:
            grid = read_gif(path)
        else:
            grid = read_image(path)[np.newaxis, :, :]

    logger.info(f"Image \"{path}\" loaded, shape {grid.shape}")
    return grid


def _imwrite(filepath: str, img: np.ndarray):
    try:
        success = cv2.imwrite(filepath, img)
    except cv2.error as e:
        raise ImageWriteError(f"Cannot write image in {filepath} ({e})") from e
    if not success:
        raise ImageWriteError(f"cv2.imwrite failed for {filepath}")


def save_gif(frames: List[np.ndarray], filepath: str, fps: int = 5, loop: int = 0):
    """
    Saves a list of 2D uint8 frames as an animated GIF.

    Args:
        frames (List[np.ndarray]): Grayscale uint8 frames.
        filepath (str): Path to save the GIF file.
        fps (int): Frames per second for the GIF.
        loop (int): Number of times the GIF should loop (0 = infinite).
    """
    if not frames:
        raise ImageWriteError("No frames provided for GIF generation")
    ensure_dir_exists(os.path.dirname(filepath))
    try:
        imageio.mimsave(filepath, list(frames), duration=(1000 // fps), loop=loop) # duration in ms
    except (OSError, ValueError) as e:
        raise ImageWriteError(f"Cannot write GIF {filepath} ({e})") from e


def format_series_name(pattern: str, index: int) -> str:
    """Expands a printf-style series pattern, e.g. 'slice_%03d.png' -> 'slice_007.png'."""
    try:
        return pattern % index
    except (TypeError, ValueError) as e:
        raise ImageWriteError(f"Invalid series pattern \"{pattern}\" ({e})") from e


def write_image_series(grid: np.ndarray, pattern: str) -> List[str]:
    """Writes slice z of `grid` to `pattern % z`, for every z. Returns the paths."""
    paths = []
    for z in range(grid.shape[0]):
        filepath = format_series_name(pattern, z)
        ensure_dir_exists(os.path.dirname(filepath))
        _imwrite(filepath, grid[z])
        paths.append(filepath)
    return paths


def write_grid(grid: np.ndarray, path: str) -> List[str]:
    """
    Saves a 3D uint8 grid.

    A path containing '%' is a numbered series (one file per slice). TIF
    files hold every slice as a page, GIF files as a frame. Any other format
    only accepts single-slice grids.

    Returns:
        List[str]: The files written.

    Raises:
        ImageWriteError: Unwritable destination or unsupported depth/format.
    """
    if SERIES_PLACEHOLDER in path:
        logger.debug(f"Writing image in \"{path}\" as a series")
        paths = write_image_series(grid, path)
        logger.info(f"Wrote {len(paths)} slices using pattern \"{path}\"")
        return paths

    logger.debug(f"Writing image in \"{path}\" as a single file")
    ensure_dir_exists(os.path.dirname(path))
    ext = os.path.splitext(path)[1].lower()
    if ext in TIFF_EXTENSIONS:
        try:
            success = cv2.imwritemulti(path, list(grid))
        except cv2.error as e:
            raise ImageWriteError(f"Cannot write image in {path} ({e})") from e
        if not success:
            raise ImageWriteError(f"cv2.imwritemulti failed for {path}")
    elif ext == GIF_EXTENSION:
        save_gif(list(grid), path)
    elif grid.shape[0] == 1:
        _imwrite(path, grid[0])
    else:
        raise ImageWriteError(
            f"Cannot write a {grid.shape[0]}-slice grid to \"{path}\": use a .tif/.gif file "
            f"or a numbered series such as \"slice_%03d{ext or '.png'}\"")
    logger.info(f"Wrote \"{path}\"")
    return [path]
