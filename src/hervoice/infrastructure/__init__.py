"""
HerVoice Infrastructure Layer

External integrations: PostgreSQL persistence, metrics and error tracking.
"""
