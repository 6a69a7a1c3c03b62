"""
Businesses app for the UMKM Directory.

Categories, registered micro-enterprises and the owner tenancy scope.
"""
