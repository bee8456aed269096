# create_overlays.py
import os

import numpy as np
from PIL import Image, ImageDraw

HERE = os.path.dirname(os.path.abspath(__file__))
DEFAULT_OUTPUT_DIR = os.getenv("OVERLAYS_DIR", os.path.join(HERE, "overlays"))

WIDTH, HEIGHT = 640, 480


def create_all_overlays(output_dir=DEFAULT_OUTPUT_DIR):
    os.makedirs(output_dir, exist_ok=True)

    # 1) Frame: solid border, transparent window
    frame = Image.new("RGBA", (WIDTH, HEIGHT), (0, 0, 0, 0))
    draw = ImageDraw.Draw(frame)
    draw.rectangle((0, 0, WIDTH - 1, HEIGHT - 1), outline=(236, 72, 153, 255), width=24)
    draw.rectangle((30, 30, WIDTH - 31, HEIGHT - 31), outline=(255, 255, 255, 200), width=4)
    frame.save(os.path.join(output_dir, "frame1.png"))

    # 2) Vignette: alpha grows with distance from the center
    yy, xx = np.mgrid[0:HEIGHT, 0:WIDTH].astype(np.float32)
    dist = np.hypot((xx - WIDTH / 2) / (WIDTH / 2), (yy - HEIGHT / 2) / (HEIGHT / 2))
    alpha = (np.clip(dist - 0.6, 0.0, 1.0) / 0.8 * 255).clip(0, 255).astype(np.uint8)
    vignette = np.zeros((HEIGHT, WIDTH, 4), dtype=np.uint8)
    vignette[..., 3] = alpha
    Image.fromarray(vignette).save(os.path.join(output_dir, "vignette.png"))

    # 3) Banner: semi-transparent strip along the bottom edge
    banner = Image.new("RGBA", (WIDTH, HEIGHT), (0, 0, 0, 0))
    draw = ImageDraw.Draw(banner)
    draw.rectangle((0, HEIGHT - 90, WIDTH, HEIGHT), fill=(20, 20, 20, 160))
    for i in range(12):
        x = 20 + i * 52
        draw.ellipse((x, HEIGHT - 60, x + 30, HEIGHT - 30), fill=(255, 215, 0, 230))
    banner.save(os.path.join(output_dir, "banner.png"))


if __name__ == "__main__":
    create_all_overlays()
    print("Overlay creation script finished successfully:", DEFAULT_OUTPUT_DIR)
