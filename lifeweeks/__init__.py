"""Life in Weeks: week accounting and ephemeral share links."""
