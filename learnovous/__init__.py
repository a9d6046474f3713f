"""learnovous - user registration and account confirmation service."""
