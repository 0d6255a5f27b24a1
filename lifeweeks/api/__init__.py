"""HTTP routers for the Life in Weeks service."""
