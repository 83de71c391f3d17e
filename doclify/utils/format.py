import re
import unicodedata
from datetime import date, datetime
from typing import Optional, Union

PRIORITY_LABELS = {
    "high": "Alta",
    "medium": "Média",
    "low": "Baixa",
    "must_have": "Obrigatório",
    "should_have": "Importante",
    "could_have": "Desejável",
    "wont_have": "Não será feito",
    "primary": "Primário",
    "secondary": "Secundário",
}

CATEGORY_LABELS = {
    "frontend": "Frontend",
    "backend": "Backend",
    "database": "Banco de Dados",
    "mobile": "Mobile",
    "devops": "DevOps",
    "infrastructure": "Infraestrutura",
    "other": "Outros",
    "performance": "Performance",
    "security": "Segurança",
    "usability": "Usabilidade",
    "reliability": "Confiabilidade",
    "scalability": "Escalabilidade",
}

ROLE_LABELS = {
    "front_end_developer": "Desenvolvedor Front-end",
    "back_end_developer": "Desenvolvedor Back-end",
    "full_stack_developer": "Desenvolvedor Full-stack",
    "mobile_developer": "Desenvolvedor Mobile",
    "database_administrator": "Administrador de Banco de Dados",
    "project_manager": "Gerente de Projeto",
    "tech_lead": "Líder Técnico",
    "designer": "Designer",
    "analyst": "Analista",
    "qa": "Analista de Qualidade",
    "devops": "Engenheiro DevOps",
    "product_owner": "Dono do Produto",
    "scrum_master": "Scrum Master",
    "stakeholder": "Parte Interessada",
    "other": "Outro",
}

CURRENCY_SYMBOLS = {"BRL": "R$", "USD": "US$", "EUR": "€"}

MONTHS = (
    "janeiro", "fevereiro", "março", "abril", "maio", "junho",
    "julho", "agosto", "setembro", "outubro", "novembro", "dezembro",
)


def format_priority(priority: Optional[str]) -> str:
    return PRIORITY_LABELS.get(priority or "", priority or "")

def format_category(category: Optional[str]) -> str:
    return CATEGORY_LABELS.get(category or "", category or "")

def format_role(role: Optional[str]) -> str:
    return ROLE_LABELS.get(role or "", role or "")


def _to_date(value: Union[str, date, datetime, None]) -> Optional[date]:
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    try:
        return datetime.fromisoformat(str(value).strip()).date()
    except ValueError:
        return None

def format_date(value: Union[str, date, datetime, None], pattern: str = "%d/%m/%Y") -> str:
    """dd/mm/yyyy by default; unparseable input comes back unchanged."""
    parsed = _to_date(value)
    if parsed is None:
        return "" if value is None else str(value)
    return parsed.strftime(pattern)

def format_long_date(value: Union[str, date, datetime, None]) -> str:
    # "18 de outubro de 2026"
    parsed = _to_date(value)
    if parsed is None:
        return ""
    return f"{parsed.day} de {MONTHS[parsed.month - 1]} de {parsed.year}"


def format_currency(amount: float, currency: str = "BRL") -> str:
    """pt-BR style: thousands with '.', decimals with ','."""
    symbol = CURRENCY_SYMBOLS.get((currency or "BRL").upper(), (currency or "").upper())
    sign = "-" if amount < 0 else ""
    number = f"{abs(amount):,.2f}".replace(",", "X").replace(".", ",").replace("X", ".")
    return f"{sign}{symbol} {number}"


def truncate_text(text: Optional[str], max_length: int = 100) -> str:
    text = text or ""
    if len(text) <= max_length:
        return text
    return text[:max_length] + "..."

def get_initials(name: Optional[str]) -> str:
    words = [w for w in (name or "").split(" ") if w]
    return "".join(w[0].upper() for w in words[:2])


def sanitize_file_name(value: Optional[str], fallback: str = "documento") -> str:
    """Keeps letters, digits, '-' and '_'; accents are stripped and spaces become '_'."""
    text = unicodedata.normalize("NFKD", value or "")
    text = text.encode("ascii", "ignore").decode("ascii")
    text = re.sub(r"\s+", "_", text.strip())
    text = re.sub(r"[^A-Za-z0-9_-]", "", text)
    text = re.sub(r"_+", "_", text).strip("_")
    return text or fallback
