from datetime import date

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

_camel = ConfigDict(alias_generator=to_camel, populate_by_name=True, str_strip_whitespace=True)


class CreatePatientDTO(BaseModel):
    model_config = _camel

    first_name: str
    last_name: str
    date_of_birth: date


class UpdatePatientDTO(BaseModel):
    """Atualização parcial: somente campos enviados são aplicados."""
    model_config = _camel

    first_name: str | None = None
    last_name: str | None = None
    date_of_birth: date | None = None
