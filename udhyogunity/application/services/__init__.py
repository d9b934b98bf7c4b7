"""Application services shared by the review and dashboard use cases."""
