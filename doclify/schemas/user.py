from typing import Optional
from pydantic import BaseModel


class CurrentUser(BaseModel):
    # id opaco emitido por el proveedor de identidad (claim "sub")
    id: str
    email: Optional[str] = None
