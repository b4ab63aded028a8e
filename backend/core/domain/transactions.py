"""
core.domain.transactions — Helpers for safe state transitions.

Provides utilities that wrap ``select_for_update`` and optimistic
version checks into reusable patterns so that every app's service
layer follows the same concurrency-safe approach.

Design goals
------------
* State-transition reads always lock the row first
  (``select_for_update``) so two concurrent writes to the same
  aggregate are serialised by the database.
* Clients that send the ``version`` they last read get a ``Conflict``
  instead of silently overwriting a newer write (lost update).
* Keep the helpers **generic**: they accept any Django ``Model``
  class that carries a ``version`` integer field.

Usage::

    from django.db import transaction
    from core.domain.transactions import bump_version, check_version, lock_for_update

    with transaction.atomic():
        complaint = lock_for_update(Complaint, complaint_id)
        check_version(complaint, expected_version)
        ...
        bump_version(complaint)
        complaint.save()
"""

from __future__ import annotations

from typing import Any, TypeVar

from django.db import models

from core.domain.exceptions import Conflict, NotFound

M = TypeVar("M", bound=models.Model)


def lock_for_update(model_class: type[M], pk: Any) -> M:
    """
    Acquire a row-level lock on the given model instance.

    Convenience wrapper around ``select_for_update().get(pk=pk)``
    that must be called inside an ``atomic()`` block.

    Args:
        model_class: The Django model class.
        pk:          Primary key value.

    Returns:
        The locked model instance.

    Raises:
        NotFound: If no row with that PK exists.
    """
    try:
        return model_class.objects.select_for_update().get(pk=pk)
    except model_class.DoesNotExist:
        raise NotFound(f"{model_class.__name__} with pk={pk} does not exist.")


def check_version(instance: models.Model, expected: int | None) -> None:
    """
    Compare the caller's last-seen ``version`` with the locked row.

    ``expected=None`` means the caller did not opt in to optimistic
    concurrency; the row lock alone then orders the writes.

    Raises:
        Conflict: If the stored version differs from ``expected``.
    """
    if expected is None:
        return
    current = instance.version
    if current != expected:
        raise Conflict(
            f"{type(instance).__name__} #{instance.pk} was modified by another "
            f"request (version {current}, you sent {expected}). Reload and retry."
        )


def bump_version(instance: models.Model) -> None:
    """Increment the in-memory ``version``; the caller saves the row."""
    instance.version = (instance.version or 0) + 1
