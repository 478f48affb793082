from urllib.parse import urlparse


def is_url(url: str) -> bool:
    """Check if the given string is an http(s) URL."""
    try:
        result = urlparse(url)
    except ValueError:
        return False
    return result.scheme in ("http", "https") and bool(result.netloc)
