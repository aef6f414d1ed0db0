import os


def detect_format(filepath: str) -> str:
    """
    Return 'terraform', 'terraform-json', or 'unknown'.
    """
    lower = filepath.lower()
    if lower.endswith(".tf.json"):
        return "terraform-json"

    _, ext = os.path.splitext(lower)
    if ext == ".tf":
        return "terraform"

    return "unknown"
