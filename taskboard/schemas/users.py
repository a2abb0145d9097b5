import uuid
from pydantic import BaseModel

class UserOut(BaseModel):
    id: uuid.UUID
    name: str | None

class MeOut(UserOut):
    email: str
