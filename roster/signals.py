"""Django signals for cache invalidation."""

import logging

from django.core.cache import cache
from django.db.models.signals import m2m_changed, post_delete, post_save
from django.dispatch import receiver

from roster.handlers import cache_keys
from roster.models import Session, SessionTerm, Term

logger = logging.getLogger(__name__)


def _forget_occurrences(*session_ids) -> None:
    keys = [cache_keys.session_occurrences(sid) for sid in session_ids]
    if keys:
        cache.delete_many(keys)
        logger.debug("Invalidated occurrence cache for %d session(s)", len(keys))


@receiver([post_save, post_delete], sender=Session)
def invalidate_session_cache(sender, instance, **kwargs):
    """Invalidate cached occurrences when a session is saved or deleted."""
    _forget_occurrences(instance.pk)


@receiver([post_save, post_delete], sender=SessionTerm)
def invalidate_session_term_cache(sender, instance, **kwargs):
    """Invalidate cached occurrences when a term is linked or unlinked."""
    _forget_occurrences(instance.session_id)


@receiver(m2m_changed, sender=Session.terms.through)
def invalidate_session_terms_changed(sender, instance, action, reverse, pk_set, **kwargs):
    """Invalidate cached occurrences after ``session.terms`` add/remove/clear.

    From the term side, ``pk_set`` holds session keys; a clear is handled
    before the links disappear.
    """
    if not reverse:
        if action.startswith("post_"):
            _forget_occurrences(instance.pk)
    elif action in ("post_add", "post_remove"):
        _forget_occurrences(*(pk_set or ()))
    elif action == "pre_clear":
        _forget_occurrences(*instance.session_terms.values_list("session_id", flat=True))


@receiver([post_save, post_delete], sender=Term)
def invalidate_term_cache(sender, instance, **kwargs):
    """Invalidate cached occurrences of every session using the term."""
    session_ids = SessionTerm.objects.filter(term_id=instance.pk).values_list("session_id", flat=True)
    _forget_occurrences(*session_ids)
