"""Text Files API: free-text files in an S3 bucket, tagged in a relational table."""
