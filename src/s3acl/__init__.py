"""s3acl - ACL operations for S3-compatible object storage."""

from s3acl.client import S3Client
from s3acl.errors import S3Error
from s3acl.handlers.acl import (
    AccessControlPolicy,
    CannedACL,
    Grant,
    Grantee,
    GranteeType,
    Owner,
    Permission,
)
from s3acl.models import ObjectInfo

__all__ = [
    "AccessControlPolicy",
    "CannedACL",
    "Grant",
    "Grantee",
    "GranteeType",
    "ObjectInfo",
    "Owner",
    "Permission",
    "S3Client",
    "S3Error",
]
