"""Object metadata returned by the client."""

from __future__ import annotations

from dataclasses import dataclass, field

from s3acl.handlers.acl import Grant, Owner


def canonical_header_key(name: str) -> str:
    """Return a header name in canonical MIME form (``x-amz-acl`` -> ``X-Amz-Acl``)."""
    return "-".join(part.capitalize() for part in name.split("-"))


@dataclass
class ObjectInfo:
    """Metadata for an S3 object, as reported by HEAD plus any ACL merge.

    Attributes:
        bucket_name: The bucket name.
        object_name: The object key.
        size: Size in bytes.
        etag: ETag with surrounding quotes removed.
        content_type: MIME type.
        last_modified: Last-Modified header value, if any.
        version_id: The version ID, if the bucket is versioned.
        metadata: Response headers keyed in canonical form, each with all
            of its values.
        owner: The object owner (filled from the ACL).
        grants: The object's grants (filled from the ACL).
    """

    bucket_name: str
    object_name: str
    size: int = 0
    etag: str = ""
    content_type: str = "application/octet-stream"
    last_modified: str | None = None
    version_id: str | None = None
    metadata: dict[str, list[str]] = field(default_factory=dict)
    owner: Owner = field(default_factory=Owner)
    grants: list[Grant] = field(default_factory=list)

    def add_metadata(self, key: str, value: str) -> None:
        """Append a value under ``key``, keeping any existing values."""
        self.metadata.setdefault(canonical_header_key(key), []).append(value)
