"""
HerVoice Service Layer

Business logic for the account flows. Services depend on abstract
stores and receive their configuration explicitly.
"""
