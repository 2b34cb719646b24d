"""
JWT token creation and verification.
Uses PyJWT with HS256 algorithm. The token is handed to the browser in the
``token`` cookie and accepted back as a cookie or a Bearer header.
"""
import jwt
import uuid
from datetime import datetime, timedelta, timezone
from typing import Optional, Dict, Any


class JWTHandler:
    """Handles JWT token creation and verification."""

    def __init__(self, secret: str, algorithm: str = "HS256",
                 access_expiry_minutes: int = 720):
        if not secret:
            raise ValueError("API_JWT_SECRET must be set")
        self.secret = secret
        self.algorithm = algorithm
        self.access_expiry_minutes = access_expiry_minutes

    @property
    def expires_in(self) -> int:
        """Token lifetime in seconds."""
        return self.access_expiry_minutes * 60

    def create_access_token(self, user_id: str, email: str, name: str) -> str:
        """Create a session access token."""
        now = datetime.now(timezone.utc)
        payload = {
            "sub": user_id,
            "email": email,
            "name": name,
            "type": "access",
            "iat": now,
            "exp": now + timedelta(minutes=self.access_expiry_minutes),
            "jti": str(uuid.uuid4()),
        }
        return jwt.encode(payload, self.secret, algorithm=self.algorithm)

    def verify_token(self, token: str, expected_type: str = "access") -> Optional[Dict[str, Any]]:
        """
        Verify and decode a JWT token.

        Returns:
            Decoded payload dict if valid, None if invalid/expired.
        """
        try:
            payload = jwt.decode(token, self.secret, algorithms=[self.algorithm])
            if payload.get("type") != expected_type:
                return None
            return payload
        except jwt.ExpiredSignatureError:
            return None
        except jwt.InvalidTokenError:
            return None
