"""FastAPI application exposing the checkout relay over HTTP."""
