"""HTTP API package — FastAPI app exposing translations and rendered chapters."""
