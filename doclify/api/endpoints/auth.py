from typing import Any, Dict, Optional

from fastapi import APIRouter, Body, HTTPException, Depends, Response, status
from fastapi.security import OAuth2PasswordBearer
from jose import JWTError

from doclify.api.errors import validation_exception
from doclify.core.security import decode_access_token
from doclify.schemas.user import CurrentUser
from doclify.validations.auth import LoginForm, RegisterForm, ResetPasswordForm, UpdatePasswordForm
from doclify.validations.rules import validate

router = APIRouter()
# el token lo emite el proveedor de identidad externo
oauth2_scheme = OAuth2PasswordBearer(tokenUrl="/auth/token", auto_error=True)

# formularios que el cliente valida antes de llamar al proveedor de identidad
AUTH_FORMS = {
    "login": LoginForm,
    "register": RegisterForm,
    "reset-password": ResetPasswordForm,
    "update-password": UpdatePasswordForm,
}

def get_current_user(token: str = Depends(oauth2_scheme)) -> CurrentUser:
    credentials_exception = HTTPException(status_code=401, detail="Could not validate credentials")
    try:
        payload = decode_access_token(token)
        user_id = payload.get("sub")
        if user_id is None:
            raise credentials_exception
    except JWTError:
        raise credentials_exception
    return CurrentUser(id=str(user_id), email=payload.get("email"))

@router.get("/me", response_model=CurrentUser)
def me(current_user: CurrentUser = Depends(get_current_user)):
    return current_user

@router.post("/validate/{form_name}", status_code=status.HTTP_204_NO_CONTENT)
def validate_auth_form(form_name: str, data: Optional[Dict[str, Any]] = Body(None)):
    """Checks a sign-in, sign-up or password form; nothing is sent to the identity provider."""
    schema = AUTH_FORMS.get(form_name)
    if schema is None:
        raise HTTPException(status_code=404, detail="Unknown form")
    _, violations = validate(schema, data)
    if violations:
        raise validation_exception(violations)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
