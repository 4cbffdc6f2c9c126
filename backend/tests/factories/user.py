"""Factory Boy definition for :class:`sessionauth.models.user.User`."""

from __future__ import annotations

import factory

from sessionauth.models.user import User
from sessionauth.services.credentials import CredentialHasher
from tests.factories import BaseFactory, SQLAlchemySession

DEFAULT_PASSWORD = "secret123"

# Same cheap method as the testing config so factory users log in quickly.
_hasher = CredentialHasher("pbkdf2:sha256:1000")


class UserFactory(BaseFactory):
    """
    Build persisted :class:`sessionauth.models.user.User` instances.

    Notes
    -----
    - ``password`` is a post-generation hook: pass ``password="..."`` to pick
      the plaintext, otherwise :data:`DEFAULT_PASSWORD` is used.
    """

    class Meta:
        model = User

    id = None  # let autoincrement handle it
    email = factory.Sequence(lambda n: f"user{n}@example.com")
    username = factory.Sequence(lambda n: f"user{n}")
    first_name = factory.Faker("first_name")
    last_name = factory.Faker("last_name")
    password_hash = factory.LazyFunction(lambda: "")  # set via postgen
    is_admin = False
    enabled = True

    @factory.post_generation
    def password(obj, create, extracted, **kwargs):
        """Hash the plaintext with the credential hasher."""
        obj.password_hash = _hasher.hash(extracted or DEFAULT_PASSWORD)
        if create:
            SQLAlchemySession.get().commit()
