"""Runtime request handling for serverless functions."""
