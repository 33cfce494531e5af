"""
認証モジュール

このモジュールは、アプリケーションの認証機能を提供します。
パスワードハッシュ化（bcrypt）と、認証済みユーザーに発行する
JWT（JSON Web Token）の生成・検証を含みます。

主な機能:
- パスワードのハッシュ化と検証（PasswordHasher ポートの実装）
- JWTトークンの生成と検証
- FastAPI依存性注入による認証
"""

from datetime import datetime, timedelta, timezone
from typing import Optional, Dict, Any
from jose import JWTError, jwt
from passlib.context import CryptContext
from fastapi import HTTPException, Request, status, Depends
from fastapi.security import OAuth2PasswordBearer

from taskhub.infra.config import Settings
from taskhub.infra.logging_config import get_logger

# bcryptスキームを使用し、非推奨バージョンを自動処理
pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")

oauth2_scheme = OAuth2PasswordBearer(tokenUrl="/api/v1/auth/login")

logger = get_logger("auth")


class BcryptPasswordHasher:
    """
    bcrypt による PasswordHasher の実装

    生成されるハッシュは毎回異なりますが、verify() で正しく検証できます。
    """

    def __init__(self, context: CryptContext = pwd_context):
        self._context = context

    def hash(self, password: str) -> str:
        return self._context.hash(password)

    def verify(self, password: str, password_hash: str) -> bool:
        """
        パスワードをハッシュと照合して検証する

        ハッシュの形式が不正な場合は False を返す。
        """
        try:
            return self._context.verify(password, password_hash)
        except (ValueError, TypeError):
            logger.warning("Stored password hash could not be verified")
            return False


def create_access_token(
    data: Dict[str, Any],
    settings: Settings,
    expires_delta: Optional[timedelta] = None
) -> str:
    """
    JWTアクセストークンを生成する

    Args:
        data (Dict[str, Any]): トークンに含めるペイロードデータ
                              通常は {"sub": user_id} の形式
        settings (Settings): 署名鍵とアルゴリズムを含む設定
        expires_delta (Optional[timedelta]): カスタム有効期限
                                           Noneの場合は設定値を使用

    Returns:
        str: エンコードされたJWTトークン文字列
    """
    to_encode = data.copy()

    if expires_delta:
        expire = datetime.now(timezone.utc) + expires_delta
    else:
        expire = datetime.now(timezone.utc) + timedelta(minutes=settings.access_token_expire_minutes)

    to_encode.update({"exp": expire})

    encoded_jwt = jwt.encode(to_encode, settings.secret_key, algorithm=settings.algorithm)

    logger.info("Access token created", extra={
        "sub": data.get("sub"),
        "expires_at": expire.isoformat()
    })

    return encoded_jwt


def verify_token(token: str, settings: Settings) -> Dict[str, Any]:
    """
    JWTトークンを検証してデコードする

    Raises:
        JWTError: トークンが無効、期限切れ、署名不正等の場合
    """
    try:
        return jwt.decode(token, settings.secret_key, algorithms=[settings.algorithm])
    except JWTError as e:
        logger.warning("Token verification failed", extra={"error": str(e)})
        raise


def get_current_user(request: Request, token: str = Depends(oauth2_scheme)) -> int:
    """
    JWTトークンから現在のユーザーIDを取得する

    Returns:
        int: 認証されたユーザーのID

    Raises:
        HTTPException: トークンが無効、または sub クレームが無い場合は 401
    """
    credentials_exception = HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="Could not validate credentials",
        headers={"WWW-Authenticate": "Bearer"},
    )

    try:
        payload = verify_token(token, request.app.state.settings)
    except JWTError:
        raise credentials_exception

    subject = payload.get("sub")
    if subject is None or not str(subject).isdigit():
        logger.warning("Token missing valid 'sub' claim")
        raise credentials_exception

    return int(subject)
