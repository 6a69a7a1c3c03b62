"""
Audit receivers for authentication events.

Login and logout are announced through Django's auth signals so that the
JWT views, session logins and the Django admin all end up audited.
"""

from django.contrib.auth.signals import user_logged_in, user_logged_out
from django.dispatch import receiver

from .audit import AuditTrail

audit_trail = AuditTrail()


@receiver(user_logged_in, dispatch_uid='audit_user_logged_in')
def audit_login(sender, request, user, **kwargs):
    audit_trail.log_login(user)


@receiver(user_logged_out, dispatch_uid='audit_user_logged_out')
def audit_logout(sender, request, user, **kwargs):
    # Anonymous logout (no session) sends user=None
    if user is not None:
        audit_trail.log_logout(user)
