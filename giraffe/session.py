from dataclasses import dataclass

from giraffe import typedefs as t


class NotAuthenticated(Exception):
    """An authenticated request was attempted without a signed-in user."""


@dataclass(frozen=True)
class Anonymous:
    pass


@dataclass(frozen=True)
class Authenticated:
    """A signed-in customer or vehicle provider.

    Customer sessions carry ``user``, vehicle provider sessions carry ``provider``.
    """

    token: str
    user: t.User | None = None
    provider: t.VehicleProvider | None = None

    @property
    def headers(self) -> dict[str, str]:
        return {"Authorization": f"Bearer {self.token}"}


Session = Anonymous | Authenticated

ANONYMOUS = Anonymous()


def auth_headers(session: Session) -> dict[str, str]:
    if not isinstance(session, Authenticated):
        raise NotAuthenticated("Sign in to continue")
    return session.headers
