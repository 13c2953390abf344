"""HTTP service for storing and tailoring resumes."""
