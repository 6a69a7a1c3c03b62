"""
Articles app for the UMKM Directory.

Business articles and their moderation workflow.
"""
