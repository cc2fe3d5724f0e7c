"""
Keyfleet Core - Exceptions, shared types and protocols.
"""
