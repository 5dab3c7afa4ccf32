import base64
from pathlib import Path
from langchain_groq import ChatGroq
import config

MIME_TYPES = {
    ".jpg": "image/jpeg",
    ".jpeg": "image/jpeg",
    ".png": "image/png",
    ".webp": "image/webp",
    ".bmp": "image/bmp",
    ".tiff": "image/tiff",
}

def encode_image(image_path: str) -> str:
    """Read an image file and return its base64-encoded string."""
    with open(image_path, "rb") as f:
        return base64.b64encode(f.read()).decode("utf-8")

def get_image_media_type(image_path: str) -> str:
    """Return the MIME type for the given image file."""
    return MIME_TYPES.get(Path(image_path).suffix.lower(), "image/jpeg")

def check_image_path(image_path: str) -> Path:
    """Ensure the image exists and has a supported extension. Raises ValueError otherwise."""
    path = Path(image_path)
    if not path.exists():
        raise ValueError(f"Image not found: {path}")
    if path.suffix.lower() not in config.SUPPORTED_EXTENSIONS:
        supported = ", ".join(sorted(config.SUPPORTED_EXTENSIONS))
        raise ValueError(f"Unsupported image format: {path.suffix} (supported: {supported})")
    return path

def create_llm() -> ChatGroq:
    """Instantiate the Groq vision LLM using config settings."""
    return ChatGroq(model_name=config.MODEL_NAME, temperature=config.MODEL_TEMPERATURE)
