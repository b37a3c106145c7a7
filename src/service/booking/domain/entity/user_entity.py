from enum import StrEnum

import attrs


class UserRole(StrEnum):
    CUSTOMER = 'customer'
    ADMIN = 'admin'


@attrs.define(frozen=True)
class UserEntity:
    """Identity supplied by the authentication layer; trusted for ownership checks"""

    id: int
    email: str = ''
    name: str = ''
    role: UserRole = UserRole.CUSTOMER

    @property
    def is_admin(self) -> bool:
        return self.role == UserRole.ADMIN
