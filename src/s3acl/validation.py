"""Client-side S3 name validation for s3acl.

Names are checked before a request is built so malformed names never reach
the server. Each function raises an appropriate ``S3Error`` subclass on
invalid input.
"""

import re

from s3acl.errors import InvalidBucketName, InvalidObjectName

# ---------------------------------------------------------------------------
# Constants
# ---------------------------------------------------------------------------

# S3 bucket naming rules:
#   - 3-63 characters
#   - lowercase letters, digits, hyphens, and periods
#   - must start and end with a letter or digit
#   - must not be formatted as an IP address
#   - no consecutive periods ("..") or period-hyphen adjacency allowed

_BUCKET_RE = re.compile(r"^[a-z0-9][a-z0-9.\-]{1,61}[a-z0-9]$")
_IP_RE = re.compile(r"^\d{1,3}\.\d{1,3}\.\d{1,3}\.\d{1,3}$")

_MAX_KEY_BYTES = 1024


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------


def validate_bucket_name(name: str) -> None:
    """Validate an S3 bucket name against AWS naming rules.

    Args:
        name: The candidate bucket name.

    Raises:
        InvalidBucketName: If the name violates any S3 bucket naming rule.
    """
    if not name:
        raise InvalidBucketName("Bucket name cannot be empty.", bucket_name=name)

    if len(name) < 3 or len(name) > 63:
        raise InvalidBucketName(
            "Bucket name must be between 3 and 63 characters long.", bucket_name=name
        )

    if not _BUCKET_RE.match(name):
        raise InvalidBucketName(bucket_name=name)

    if _IP_RE.match(name):
        raise InvalidBucketName("Bucket name cannot be an IP address.", bucket_name=name)

    if ".." in name or ".-" in name or "-." in name:
        raise InvalidBucketName(
            "Bucket name contains invalid successive characters.", bucket_name=name
        )


def validate_object_name(name: str) -> None:
    """Validate an S3 object name.

    Args:
        name: The object key string.

    Raises:
        InvalidObjectName: If the key is empty or exceeds 1024 bytes when
            UTF-8 encoded.
    """
    if not name:
        raise InvalidObjectName("Object name cannot be empty.", object_name=name)

    if len(name.encode("utf-8")) > _MAX_KEY_BYTES:
        raise InvalidObjectName("Your key is too long.", object_name=name)
