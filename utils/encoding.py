# utils/encoding.py
import base64
import binascii


def decode_base64_image(image_base64: str) -> bytes:
    """
    Decode a base64 image as posted by the webcam capture component.

    Accepts bare base64 or a data URL ("data:image/jpeg;base64,..."), line-wrapped
    or URL-safe alphabets, and restores missing padding before decoding.
    """
    if image_base64.startswith("data:") and "," in image_base64:
        image_base64 = image_base64.split(",", 1)[1]

    image_base64 = "".join(image_base64.split())
    image_base64 = image_base64.replace("-", "+").replace("_", "/")
    missing_padding = len(image_base64) % 4
    if missing_padding:
        image_base64 += "=" * (4 - missing_padding)

    try:
        return base64.b64decode(image_base64, validate=True)
    except binascii.Error as e:
        raise ValueError(f"Invalid base64 image: {str(e)}") from e


def encode_base64_image(image_bytes: bytes) -> str:
    # No data URL prefix
    return base64.b64encode(image_bytes).decode("ascii")
