import logging

from PIL import Image, ImageDraw

from flexgrid.model.layout_engine import LayoutResult

logger = logging.getLogger(__name__)

BACKGROUND_COLOR = "#FFFFFF"
PADDING_COLOR = "#CCCCCC"
CELL_FILL_COLOR = "#E0E0E0"
CELL_OUTLINE_COLOR = "#007ACC"


def _pixel_box(x, y, w, h, scale):
    # Pillow boxes are inclusive and must not be inverted
    x0, y0 = x * scale, y * scale
    x1 = max(x0, (x + w) * scale - 1)
    y1 = max(y0, (y + h) * scale - 1)
    return [x0, y0, x1, y1]


class ImageExporter:
    """Export a computed grid layout as a wireframe image."""

    @staticmethod
    def export(result: LayoutResult, width: float, height: float, output_path: str,
               scale: float = 1.0, padding=None, format: str = "PNG"):
        """
        Draw every cell rectangle of the layout.

        Args:
            result: Layout computed for a width x height container
            width: Container width the layout was computed for
            height: Container height the layout was computed for
            output_path: Output file path
            scale: Pixels per layout unit
            padding: Optional (left, right, top, bottom) drawn as the content bounds
            format: Any format Pillow can write
        """
        width_px = max(int(round(width * scale)), 1)
        height_px = max(int(round(height * scale)), 1)

        image = Image.new("RGB", (width_px, height_px), BACKGROUND_COLOR)
        draw = ImageDraw.Draw(image)

        if padding is not None:
            left, right, top, bottom = padding
            draw.rectangle(
                _pixel_box(left, top, width - left - right, height - top - bottom, scale),
                outline=PADDING_COLOR,
            )

        for x, y, w, h in result.cell_rects:
            # Zero-sized cells have nothing to draw
            if w <= 0 or h <= 0:
                continue
            draw.rectangle(
                _pixel_box(x, y, w, h, scale),
                fill=CELL_FILL_COLOR,
                outline=CELL_OUTLINE_COLOR,
            )

        logger.debug("Exporting %d cells to %s (%d x %d px)",
                     len(result.cell_rects), output_path, width_px, height_px)
        image.save(output_path, format=format)
        return image
