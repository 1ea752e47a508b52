"""Infrastructure adapters: MongoDB repositories and S3 object storage."""
