"""
Core app for the UMKM Directory.

Provides shared models, the audit trail, roles, permissions and error handling.
"""
