#!/usr/bin/env python3
"""
Generate simple placeholder images for each product in the honey catalog.

- Writes one JPEG per product at public/<product.image>, e.g.
  public/images/products/bagremov-med.jpg
- Renders the product name, beekeeper and price label as a clean card
- Leaves data/products.json untouched; the catalog already names the paths

Safe to run multiple times; it overwrites existing generated files.
"""
from __future__ import annotations
import argparse
import json
from pathlib import Path
from typing import Dict, List

try:
    from PIL import Image, ImageDraw, ImageFont
except ImportError:
    raise SystemExit("Pillow is required. Install it in your env: pip install Pillow")

ROOT = Path(__file__).resolve().parents[1]
CATALOG_PATH = ROOT / "data" / "products.json"
PUBLIC_DIR = ROOT / "public"

WIDTH, HEIGHT = 800, 800
BG = (255, 248, 225)    # amber-50
FG = (69, 26, 3)        # amber-950
SUB = (146, 64, 14)     # amber-800
ACCENT = (245, 158, 11)  # amber-500
PADDING = 56

# Try to find a font with Bosnian diacritics; fall back to default
FONT_PATHS = [
    "/usr/share/fonts/truetype/dejavu/DejaVuSans.ttf",
    "/Library/Fonts/Arial.ttf",
    "/System/Library/Fonts/SFNS.ttf",
]


def load_font(size: int) -> ImageFont.FreeTypeFont | ImageFont.ImageFont:
    for p in FONT_PATHS:
        fp = Path(p)
        if fp.exists():
            try:
                return ImageFont.truetype(str(fp), size=size)
            except OSError:
                pass
    return ImageFont.load_default()


TITLE_FONT = load_font(56)
META_FONT = load_font(30)
BADGE_FONT = load_font(32)


def text_size(draw: ImageDraw.ImageDraw, text: str, font: ImageFont.ImageFont) -> tuple[int, int]:
    """Return width, height of text for the given font using textbbox (Pillow 10+)."""
    bbox = draw.textbbox((0, 0), text, font=font)
    return bbox[2] - bbox[0], bbox[3] - bbox[1]


def wrap(draw: ImageDraw.ImageDraw, text: str, font: ImageFont.ImageFont, max_width: int) -> List[str]:
    lines: List[str] = []
    line: List[str] = []
    for word in text.split():
        tentative = " ".join(line + [word])
        tw, _ = text_size(draw, tentative, font)
        if tw <= max_width:
            line.append(word)
        else:
            if line:
                lines.append(" ".join(line))
            line = [word]
    if line:
        lines.append(" ".join(line))
    return lines


def draw_badge(draw: ImageDraw.ImageDraw, text: str, x: int, y: int) -> int:
    tw, th = text_size(draw, text, BADGE_FONT)
    pad_x, pad_y = 18, 10
    box = [x, y, x + tw + 2 * pad_x, y + th + 2 * pad_y]
    draw.rounded_rectangle(box, radius=16, fill=ACCENT)
    draw.text((x + pad_x, y + pad_y), text, fill=FG, font=BADGE_FONT)
    return box[3]  # new y


def render_card(name: str, seller: str, location: str, price: float, currency: str, weight: str) -> Image.Image:
    img = Image.new("RGB", (WIDTH, HEIGHT), BG)
    d = ImageDraw.Draw(img)

    # Honeycomb strip across the top
    for i, x in enumerate(range(0, WIDTH, 64)):
        d.regular_polygon((x + 32, 40 + (i % 2) * 28, 28), n_sides=6, fill=ACCENT)

    y = 180
    for ln in wrap(d, name, TITLE_FONT, WIDTH - 2 * PADDING)[:3]:
        d.text((PADDING, y), ln, fill=FG, font=TITLE_FONT)
        y += 70

    d.text((PADDING, y + 12), f"{seller} · {location}", fill=SUB, font=META_FONT)
    y += 64

    draw_badge(d, f"{price:g} {currency} / {weight}", PADDING, y + 24)

    d.rectangle([0, HEIGHT - 16, WIDTH, HEIGHT], fill=ACCENT)
    return img


def main() -> None:
    parser = argparse.ArgumentParser(description="Render placeholder product images")
    parser.add_argument("--catalog", type=Path, default=CATALOG_PATH, help="Path to products.json")
    parser.add_argument("--out", type=Path, default=PUBLIC_DIR, help="Public assets directory")
    args = parser.parse_args()

    data = json.loads(args.catalog.read_text(encoding="utf-8"))
    items: List[Dict] = data["products"] if isinstance(data, dict) else data
    written = 0
    for item in items:
        image = item.get("image")
        if not image:
            continue
        seller = item.get("seller") or {}
        img = render_card(
            item.get("name") or "Med",
            seller.get("name", ""),
            seller.get("location", ""),
            float(item.get("price") or 0),
            item.get("currency") or "KM",
            item.get("weight") or "",
        )
        out_path = args.out / image.lstrip("/")
        out_path.parent.mkdir(parents=True, exist_ok=True)
        img.save(out_path, format="JPEG", quality=88)
        written += 1

    print(f"Generated {written} images into {args.out}")


if __name__ == "__main__":
    main()
