"""HTTP client for the remote document API."""
