from pydantic_settings import BaseSettings
from typing import List

class Settings(BaseSettings):
    secret_key: str = "change-me"
    database_url: str = "sqlite:///./doclify.db"
    backend_cors_origins: str = "http://localhost:3000"
    sql_echo: bool = False
    log_level: str = "INFO"
    # segundos por operación hija del commit; 0 desactiva el límite
    child_operation_timeout: float = 30.0
    editor_path_template: str = "/editor/{project_id}"
    document_element_id: str = "document-content"

    class Config:
        env_file = ".env"
        extra = "allow"

    @property
    def cors_origins_list(self) -> List[str]:
        return [origin.strip() for origin in self.backend_cors_origins.split(",") if origin.strip()]

    def editor_path(self, project_id: int) -> str:
        return self.editor_path_template.format(project_id=project_id)


settings = Settings()
