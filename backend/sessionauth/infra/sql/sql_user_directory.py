"""User directory adapter over the ``users`` table."""

from __future__ import annotations

from sqlalchemy.exc import IntegrityError

from sessionauth.models.base import as_utc
from sessionauth.models.user import User
from sessionauth.services._shared.errors import ConflictError, NotFoundError
from sessionauth.services._shared.ports.user_directory import NewUser, UserDirectory, UserRecord
from sessionauth.uow.sqlalchemy_uow import SQLAlchemyReadOnlyUnitOfWork, SQLAlchemyUnitOfWork


def to_user_record(user: User) -> UserRecord:
    """
    Map ORM ``User`` to :class:`UserRecord`.

    :param user: ORM user instance.
    :type user: :class:`sessionauth.models.user.User`
    :returns: Detached snapshot safe to use after the unit of work ends.
    :rtype: :class:`UserRecord`
    """
    return UserRecord(
        id=user.id,
        email=user.email,
        password_hash=user.password_hash,
        is_admin=bool(user.is_admin),
        enabled=bool(user.enabled),
        username=user.username,
        first_name=user.first_name,
        last_name=user.last_name,
        profile_picture_url=user.profile_picture_url,
        created_at=as_utc(user.created_at) if user.created_at else None,
    )


class SQLUserDirectory(UserDirectory):
    """:class:`UserDirectory` backed by :class:`~sessionauth.repositories.user.UserRepository`."""

    def get_by_id(self, owner_id: int) -> UserRecord | None:
        with SQLAlchemyReadOnlyUnitOfWork() as uow:
            user = uow.users.get(owner_id)
            return to_user_record(user) if user is not None else None

    def get_by_identifier(self, identifier: str) -> UserRecord | None:
        with SQLAlchemyReadOnlyUnitOfWork() as uow:
            user = uow.users.get_by_identifier(identifier)
            return to_user_record(user) if user is not None else None

    def email_taken(self, email: str) -> bool:
        with SQLAlchemyReadOnlyUnitOfWork() as uow:
            return uow.users.exists_by_email(email)

    def create(self, new_user: NewUser) -> UserRecord:
        """
        Insert an enabled, non-admin user.

        :raises ConflictError: When the email or username is taken, including
            when a concurrent insert wins the race on the unique constraint.
        """
        try:
            with SQLAlchemyUnitOfWork() as uow:
                if uow.users.exists_by_email(new_user.email):
                    raise ConflictError("User", "email already in use")
                if new_user.username and uow.users.exists_by_username(new_user.username):
                    raise ConflictError("User", "username already in use")
                user = uow.users.add(
                    User(
                        email=new_user.email,
                        password_hash=new_user.password_hash,
                        username=new_user.username,
                        first_name=new_user.first_name,
                        last_name=new_user.last_name,
                        profile_picture_url=new_user.profile_picture_url,
                        is_admin=False,
                        enabled=True,
                    )
                )
                record = to_user_record(user)
        except IntegrityError as exc:
            raise ConflictError("User", "email or username already in use") from exc
        return record

    def set_password_hash(self, owner_id: int, password_hash: str) -> None:
        self._assign(owner_id, password_hash=password_hash)

    def set_enabled(self, owner_id: int, enabled: bool) -> None:
        self._assign(owner_id, enabled=enabled)

    def _assign(self, owner_id: int, **fields: object) -> None:
        with SQLAlchemyUnitOfWork() as uow:
            user = uow.users.get(owner_id)
            if user is None:
                raise NotFoundError("User", owner_id)
            uow.users.assign_updates(user, fields)
