"""Key-value store key builders. Single place for key format.

An owner is either a browser session id or ``api_key:{keyId}`` for
requests authenticated with an API key.
"""

API_KEYS_INDEX = "api_keys:all"


def api_key_owner(key_id: str) -> str:
    """Owner id for data bound to an API key."""
    return f"api_key:{key_id}"


def config_key(owner: str) -> str:
    """Key of the owner's variable schema."""
    return f"config:{owner}"


def names_key(owner: str) -> str:
    """Key of the owner's generated-name history."""
    return f"names:{owner}"


def api_key_hash_key(key_hash: str) -> str:
    """Key of API key metadata, looked up by the key's SHA-256 hash."""
    return f"api_key:{key_hash}"


def key_meta_key(key_id: str) -> str:
    """Key of API key metadata, looked up by key id."""
    return f"key_meta:{key_id}"
