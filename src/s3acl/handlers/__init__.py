"""ACL request handlers for s3acl."""
