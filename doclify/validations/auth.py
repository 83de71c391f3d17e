from pydantic import ValidationInfo, field_validator

from doclify.validations.rules import Email, FormModel, RequiredText, fail

PASSWORD_MIN = 6


def _password(message: str):
    return RequiredText(message, min_length=PASSWORD_MIN, min_message=message)


class UpdatePasswordForm(FormModel):
    password: _password("Senha deve ter pelo menos 6 caracteres") = ""
    confirm_password: _password("Confirmação de senha deve ter pelo menos 6 caracteres") = ""

    @field_validator("confirm_password")
    @classmethod
    def passwords_match(cls, value: str, info: ValidationInfo) -> str:
        # si password ya falló no está en info.data y no se compara
        password = info.data.get("password")
        if password is not None and value != password:
            fail("password_mismatch", "Senhas não coincidem")
        return value


class LoginForm(FormModel):
    email: Email("Email inválido", required=True) = ""
    password: _password("Senha deve ter pelo menos 6 caracteres") = ""


class RegisterForm(UpdatePasswordForm):
    email: Email("Email inválido", required=True) = ""
    name: RequiredText("Nome deve ter pelo menos 2 caracteres", min_length=2) = ""


class ResetPasswordForm(FormModel):
    email: Email("Email inválido", required=True) = ""
