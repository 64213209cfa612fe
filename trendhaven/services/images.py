import base64
import io

from PIL import Image, ImageOps, UnidentifiedImageError

from trendhaven.core.errors import AnalysisFailed


def to_analysis_data_url(data: bytes, max_side: int) -> str:
    """Re-encode an uploaded photo as a bounded-size JPEG data URL for the analyzer."""
    try:
        with Image.open(io.BytesIO(data)) as src:
            img = ImageOps.exif_transpose(src).convert("RGB")
        img.thumbnail((max_side, max_side))
        buf = io.BytesIO()
        img.save(buf, format="JPEG", quality=85)
    except (UnidentifiedImageError, Image.DecompressionBombError, OSError) as e:
        raise AnalysisFailed("unreadable_image", message="The uploaded file is not a readable image.") from e
    return "data:image/jpeg;base64," + base64.b64encode(buf.getvalue()).decode()
