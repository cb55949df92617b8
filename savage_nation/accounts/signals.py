import logging

from django.contrib.auth.signals import user_logged_in, user_logged_out
from django.db.models.signals import post_delete, post_save
from django.dispatch import receiver

from .context import live_contexts
from .models import UserRole

logger = logging.getLogger(__name__)


def _refresh_request_context(request):
    auth = getattr(request, "auth", None) if request is not None else None
    if auth is not None:
        auth.refresh()


@receiver(user_logged_in)
def publish_sign_in(sender, request, user, **kwargs):
    logger.info("User %s signed in", user.get_username())
    _refresh_request_context(request)


@receiver(user_logged_out)
def publish_sign_out(sender, request, user, **kwargs):
    if user is not None:
        logger.info("User %s signed out", user.get_username())


@receiver(post_save, sender=UserRole)
@receiver(post_delete, sender=UserRole)
def publish_role_change(sender, instance, **kwargs):
    for ctx in live_contexts():
        if ctx.closed:
            continue
        user = ctx.snapshot.user
        if user is not None and user.pk == instance.user_id:
            ctx.refresh()
