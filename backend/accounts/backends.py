"""
Multi-field authentication backend.

Officers and complainants sign in with whichever identifier they
remember: username, national ID, phone number or email.  The backend is
listed in ``settings.AUTHENTICATION_BACKENDS`` ahead of ``ModelBackend``.
"""

from __future__ import annotations

from django.contrib.auth import get_user_model
from django.contrib.auth.backends import ModelBackend

User = get_user_model()

# Lookup order when an identifier could match more than one column.
_IDENTIFIER_LOOKUPS = (
    "username",
    "national_id",
    "phone_number",
    "email__iexact",
)


class MultiFieldAuthBackend(ModelBackend):
    """
    Resolve ``identifier`` against the four unique user columns, in
    ``_IDENTIFIER_LOOKUPS`` order, and check the password of the first
    match.
    """

    def authenticate(self, request, identifier=None, password=None, **kwargs):
        if not identifier or password is None:
            return None

        identifier = identifier.strip()
        user = self._find_user(identifier)
        if user is None:
            # Hash anyway so unknown identifiers take as long as bad passwords.
            User().set_password(password)
            return None

        if user.check_password(password) and self.user_can_authenticate(user):
            return user
        return None

    @staticmethod
    def _find_user(identifier: str):
        for lookup in _IDENTIFIER_LOOKUPS:
            user = User.objects.filter(**{lookup: identifier}).first()
            if user is not None:
                return user
        return None
