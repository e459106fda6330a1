from datetime import date
from typing import Optional

import attrs


@attrs.define
class UserEntity:
    id: int
    email: str = ''
    name: str = ''
    gender: Optional[str] = None
    date_of_birth: Optional[date] = None
    is_admin: bool = False
