"""Platform adapters (Discord, Slack, media, web)."""
