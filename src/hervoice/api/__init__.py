"""HerVoice HTTP API layer."""
