"""
Renderer module - the heart of the ray tracer.

Implements:
- Recursive single-path Monte Carlo radiance estimation
- Multi-threaded row-based rendering on a bounded worker pool
- Reproducible per-row random streams
- 8-bit RGBA output
"""

from __future__ import annotations
import logging
import math
import os
import threading
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, Optional, Sequence
import numpy as np

from .color import Color, BLACK, WHITE
from .ray import Ray
from .camera import Camera
from .objects import SceneObject, hit_objects

logger = logging.getLogger(__name__)

# Maximum number of bounces before a path is cut off as black
REFLECTION_LIMIT = 50

# Shadow-acne epsilon: hits closer than this to the ray origin are ignored
T_MIN = 1e-3

SKY_ZENITH = Color(0.5, 0.7, 1.0)

_SEED_MASK = (1 << 64) - 1


def sky_color(ray: Ray) -> Color:
    """Vertical white-to-blue gradient seen by rays that miss everything."""
    unit_direction = ray.direction.normalize()
    t = 0.5 * (unit_direction.y + 1.0)
    return WHITE * (1.0 - t) + SKY_ZENITH * t


def trace_ray(
    ray: Ray,
    objects: Sequence[SceneObject],
    rng: np.random.Generator,
    depth: int = 0
) -> Color:
    """Compute the linear color carried back along a ray.

    Args:
        ray: The ray to trace
        objects: The scene to trace against
        rng: Random generator owned by the calling thread
        depth: Number of bounces already taken

    Returns:
        The estimated radiance for this ray
    """
    logger.debug("Ray: %s", ray)
    if depth >= REFLECTION_LIMIT:
        logger.debug("End: dark")
        return BLACK

    nearest = hit_objects(objects, ray, T_MIN, math.inf)
    if nearest is None:
        logger.debug("End: sky")
        return sky_color(ray)

    obj, hit = nearest
    result = obj.material.scatter(ray, hit, rng)
    if not result.reflected:
        logger.debug("End: opaque %s", result.attenuation)
        return result.attenuation

    logger.debug("Reflect: attenuate %s", result.attenuation)
    return result.attenuation * trace_ray(result.scattered_ray, objects, rng, depth + 1)


def row_generator(seed: int, row: int) -> np.random.Generator:
    """Private random stream for one image row.

    Depends only on (seed, row), so output does not change with the number
    of threads or the order rows are picked up in.
    """
    return np.random.default_rng([seed & _SEED_MASK, row])


@dataclass
class RenderSettings:
    """Configuration for the renderer."""
    width: int = 400
    height: int = 225
    samples_per_pixel: int = 100
    num_threads: int = 0  # 0 = auto-detect
    seed: int = 283

    def __post_init__(self):
        if self.num_threads == 0:
            self.num_threads = os.cpu_count() or 4

    def validate(self) -> None:
        """Raise ValueError if the settings cannot produce an image."""
        if self.width <= 0 or self.height <= 0:
            raise ValueError(f"Image size must be positive, got {self.width}x{self.height}")
        if self.samples_per_pixel <= 0:
            raise ValueError(f"samples_per_pixel must be positive, got {self.samples_per_pixel}")
        if self.num_threads <= 0:
            raise ValueError(f"num_threads must be positive, got {self.num_threads}")


class Renderer:
    """Path tracing renderer with multi-threading support."""

    def __init__(self, settings: RenderSettings = None):
        """Create a renderer with the given settings.

        Args:
            settings: Render configuration (uses defaults if None)
        """
        self.settings = settings if settings else RenderSettings()
        self._progress_callback: Optional[Callable[[float], None]] = None

    def set_progress_callback(self, callback: Callable[[float], None]) -> None:
        """Set a callback function for progress updates.

        Args:
            callback: Function that takes progress as float (0.0 to 1.0).
                It is called from worker threads, once per finished row,
                one call at a time and in increasing order.
        """
        self._progress_callback = callback

    def render(self, camera: Camera, objects: Sequence[SceneObject]) -> np.ndarray:
        """Render the scene and return the image as a numpy array.

        Each row is one job. At most `num_threads` rows are in flight at a
        time, and every row writes only its own slice of the buffer.

        Args:
            camera: The camera to render from
            objects: The scene objects (shared read-only by all threads)

        Returns:
            RGBA image as uint8 numpy array of shape (height, width, 4),
            row 0 at the top
        """
        self.settings.validate()
        width = self.settings.width
        height = self.settings.height
        samples = self.settings.samples_per_pixel
        seed = self.settings.seed
        objects = tuple(objects)

        logger.info(
            "Rendering %dx%d, %d samples/pixel, %d objects, %d threads",
            width, height, samples, len(objects), self.settings.num_threads
        )

        image = np.zeros((height, width, 4), dtype=np.uint8)

        lock = threading.Lock()
        completed_rows = [0]  # Use list for mutable in closure

        def render_row(i: int) -> None:
            """Render image row i into its slice of the buffer."""
            rng = row_generator(seed, i)
            row = image[i]

            for j in range(width):
                pixel_color = BLACK
                for _ in range(samples):
                    u = (j + rng.random()) / width
                    v = (height - 1 - i + rng.random()) / height
                    ray = camera.get_ray(u, v, rng)
                    pixel_color = pixel_color + trace_ray(ray, objects, rng)

                row[j] = (pixel_color / samples).gamma_encode().encode()

            # Callbacks run under the lock so they see rows in order
            with lock:
                completed_rows[0] += 1
                if self._progress_callback:
                    self._progress_callback(completed_rows[0] / height)

        if self.settings.num_threads > 1:
            with ThreadPoolExecutor(max_workers=self.settings.num_threads) as executor:
                futures = [executor.submit(render_row, i) for i in range(height)]
            # Re-raise the first worker failure, if any
            for future in futures:
                future.result()
        else:
            for i in range(height):
                render_row(i)

        logger.info("Render finished: %d rows", height)
        return image

    def save_image(self, image: np.ndarray, filename: str) -> None:
        """Save an RGBA image to file.

        Args:
            image: uint8 array of shape (height, width, 4)
            filename: Output filename (extension determines format)
        """
        from PIL import Image as PILImage

        path = Path(filename)
        path.parent.mkdir(parents=True, exist_ok=True)

        pil_image = PILImage.fromarray(image)
        if path.suffix.lower() in ('.jpg', '.jpeg', '.bmp'):
            # No alpha channel in these formats
            pil_image = pil_image.convert('RGB')
        pil_image.save(path)
        logger.info("Saved %s", path)


def render(
    camera: Camera,
    objects: Sequence[SceneObject],
    width: int,
    height: int,
    workers: int,
    seed: int,
    samples_per_pixel: int
) -> np.ndarray:
    """Render a scene with an explicit configuration.

    Returns:
        RGBA image as uint8 numpy array of shape (height, width, 4)
    """
    if workers <= 0:
        raise ValueError(f"workers must be positive, got {workers}")
    settings = RenderSettings(
        width=width,
        height=height,
        samples_per_pixel=samples_per_pixel,
        num_threads=workers,
        seed=seed
    )
    return Renderer(settings).render(camera, objects)
