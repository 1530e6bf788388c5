from typing import List, Optional

from resource_api.models.user import User, UserCreate, UserUpdate
from resource_api.services.resource_store import ResourceStore


class UsersState(ResourceStore[User]):
    """Users held in process memory; identifiers start at 0."""

    def __init__(self):
        super().__init__(User, first_id=0, name="user")

    def get_users(self) -> List[User]:
        return self.list()

    def get_user(self, user_id: int) -> Optional[User]:
        return self.get(user_id)

    def create_user(self, proto_user: UserCreate) -> User:
        return self.create(proto_user)

    def update_user(self, user_id: int, update: UserUpdate) -> Optional[User]:
        return self.update(user_id, update)

    def delete_user(self, user_id: int) -> Optional[User]:
        return self.delete(user_id)
