"""
Cookie JWT authentication

Sessions are issued by the identity service; this service only verifies the
token and rebuilds the caller from its claims (no DB query).
"""

from datetime import datetime, timedelta, timezone
from typing import Dict, Optional

from fastapi import HTTPException, status
import jwt

from src.platform.config.core_setting import Settings
from src.service.ticketing.domain.entity.user_entity import UserEntity


class JwtAuth:
    def __init__(self, *, config: Settings) -> None:
        self.secret = config.SECRET_KEY.get_secret_value()
        self.algorithm = config.ALGORITHM
        self.token_expire_days = 7

    def create_jwt_token(self, user_entity: UserEntity) -> str:
        payload = {
            'sub': str(user_entity.id),
            'exp': datetime.now(timezone.utc) + timedelta(days=self.token_expire_days),
            'iat': datetime.now(timezone.utc),
            'user_id': user_entity.id,
            'email': user_entity.email,
            'name': user_entity.name,
            'is_admin': user_entity.is_admin,
        }

        return jwt.encode(payload, self.secret, algorithm=self.algorithm)

    def decode_jwt_token(self, token: str) -> Dict:
        try:
            payload = jwt.decode(token, self.secret, algorithms=[self.algorithm])
            return payload
        except jwt.PyJWTError:
            raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail='Invalid token')

    def get_current_user_info_from_jwt(self, token: Optional[str]) -> UserEntity:
        if not token:
            raise HTTPException(
                status_code=status.HTTP_401_UNAUTHORIZED, detail='Not authenticated'
            )

        payload = self.decode_jwt_token(token)

        user_id = payload.get('user_id')
        if not user_id:
            raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail='Invalid token')

        return UserEntity(
            id=int(user_id),
            email=payload.get('email') or '',
            name=payload.get('name') or '',
            is_admin=bool(payload.get('is_admin', False)),
        )
