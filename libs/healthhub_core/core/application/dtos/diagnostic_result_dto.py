from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

_camel = ConfigDict(alias_generator=to_camel, populate_by_name=True, str_strip_whitespace=True)


class AddDiagnosticResultDTO(BaseModel):
    model_config = _camel

    diagnosis: str
    notes: str | None = None


class UpdateDiagnosticResultDTO(BaseModel):
    """
    `diagnosis` é aceito apenas para ser reportado: o texto do
    diagnóstico não muda depois de criado.
    """
    model_config = _camel

    notes: str | None = None
    diagnosis: str | None = None
